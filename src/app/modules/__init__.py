"""Feature modules with auto-discovery."""

import logging
from importlib import import_module
from importlib.util import find_spec
from pathlib import Path

from fastapi import APIRouter


logger = logging.getLogger(__name__)


def _module_names() -> list[str]:
    modules_dir = Path(__file__).parent
    return [
        path.name
        for path in sorted(modules_dir.iterdir())
        if path.is_dir() and not path.name.startswith("_")
    ]


def load_models() -> None:
    """Import every module's models so the metadata holds all tables.

    Relationships and foreign keys refer to other modules' tables by
    name, so all of them must be registered before mappers configure
    or tables are created.
    """
    for name in _module_names():
        if find_spec(f"app.modules.{name}.models") is not None:
            import_module(f"app.modules.{name}.models")


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    This function scans the modules directory for subdirectories
    that contain a router attribute in their __init__.py.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    load_models()
    routers: list[APIRouter] = []

    for name in _module_names():
        try:
            module = import_module(f"app.modules.{name}")
            if hasattr(module, "router"):
                routers.append(module.router)
                logger.info(f"Loaded module: {name}")
        except ImportError as e:
            logger.warning(f"Failed to load module {name}: {e}")

    return routers
