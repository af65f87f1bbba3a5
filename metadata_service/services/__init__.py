"""Service layer for business logic."""

from metadata_service.services.access_service import AccessService
from metadata_service.services.file_service import FileService
from metadata_service.services.admin_service import AdminService

__all__ = [
    "AccessService",
    "FileService",
    "AdminService",
]
