"""Prompts module - reusable instruction text and per-technician activation."""

from fastapi import APIRouter


router = APIRouter(prefix="/prompts", tags=["prompts"])

# Import routes to register them with the router
from app.modules.prompts import routes  # noqa: F401, E402


# Module metadata
__module_info__ = {
    "name": "prompts",
    "version": "1.0.0",
    "description": "Prompt management and activation",
    "dependencies": ["tenants", "technicians"],
}
