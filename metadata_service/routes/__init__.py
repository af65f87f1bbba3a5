"""API routes package."""

from metadata_service.routes.file_routes import router as file_router
from metadata_service.routes.admin_routes import router as admin_router

__all__ = ["file_router", "admin_router"]
