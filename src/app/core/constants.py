"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_EXTERNAL_ID_LENGTH = 255
MAX_CRM_CODE_LENGTH = 64
MAX_CREATED_BY_LENGTH = 255
MAX_ROLE_LENGTH = 20
MAX_PURPOSE_LENGTH = 50

# Number of characters of an external identifier kept when logging
EXTERNAL_ID_LOG_PREFIX = 4

# Launch token settings
DEFAULT_LAUNCH_TOKEN_EXPIRE_MINUTES = 60
LAUNCH_TOKEN_ISSUER = "embedding-platform"

# Store round trip budget
DEFAULT_REQUEST_TIMEOUT_SECONDS = 5.0

# Activation retries after a uniqueness conflict
ACTIVATION_CONFLICT_RETRIES = 1

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Default persona for newly onboarded technicians
DEFAULT_PERSONA: dict[str, object] = {
    "communication_style": "professional and friendly",
    "personality": "customer-focused and reliable",
    "traits": ["professional", "helpful", "thorough"],
}
