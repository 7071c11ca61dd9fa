"""Tenants module - customer organizations.

Tenants are created by onboarding and exposed to the API only through
the resolved launch context, so this module has no router.
"""

# Module metadata
__module_info__ = {
    "name": "tenants",
    "version": "1.0.0",
    "description": "Customer organizations",
    "dependencies": [],
}
