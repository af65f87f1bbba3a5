"""Pydantic schemas for API requests and responses."""

from metadata_service.schemas.files import (
    CreateFileRequest,
    UpdateStatusRequest,
    UpdateStorageKeyRequest,
    FileRecordResponse,
    ListFilesResponse,
    FileStatisticsResponse,
)
from metadata_service.schemas.common import ErrorResponse

__all__ = [
    "CreateFileRequest",
    "UpdateStatusRequest",
    "UpdateStorageKeyRequest",
    "FileRecordResponse",
    "ListFilesResponse",
    "FileStatisticsResponse",
    "ErrorResponse",
]
