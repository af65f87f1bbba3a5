"""Repository layer for data access."""

from metadata_service.repositories.user_repository import User, UserRepository
from metadata_service.repositories.file_repository import FileRecord, FileRepository

__all__ = [
    "User",
    "UserRepository",
    "FileRecord",
    "FileRepository",
]
