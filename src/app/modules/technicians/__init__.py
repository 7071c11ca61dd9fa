"""Technicians module - the people acting within a tenant."""

from fastapi import APIRouter


router = APIRouter(prefix="/technicians", tags=["technicians"])

# Import routes to register them with the router
from app.modules.technicians import routes  # noqa: F401, E402


# Module metadata
__module_info__ = {
    "name": "technicians",
    "version": "1.0.0",
    "description": "Technicians and their visibility rules",
    "dependencies": ["tenants"],
}
