"""Embedding module - host platform identity mappings and onboarding."""

from fastapi import APIRouter


router = APIRouter(prefix="/embedding", tags=["embedding"])

# Import routes to register them with the router
from app.modules.embedding import routes  # noqa: F401, E402


# Module metadata
__module_info__ = {
    "name": "embedding",
    "version": "1.0.0",
    "description": "Host platform location/user mappings and launch URLs",
    "dependencies": ["tenants", "technicians"],
}
