"""Prompt activation failures."""

from app.core.errors import ConflictError


class ActivationConflictError(ConflictError):
    """A concurrent activation won the race for the same technician and purpose.

    Raised by the binding repository and retried by the service; callers
    only ever see it as a 503 once the retry is spent.
    """

    message = "Concurrent activation detected"
    error_code = "activation_conflict"
