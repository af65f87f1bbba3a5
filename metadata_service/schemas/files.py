"""Pydantic schemas for file record endpoints."""

from typing import List, Optional
from pydantic import BaseModel, StrictInt


class CreateFileRequest(BaseModel):
    """Request model for registering a new file record."""
    file_name: str
    content_type: str
    size: StrictInt
    owner_id: str


class UpdateStatusRequest(BaseModel):
    """Request model for a status change (case-insensitive status name)."""
    status: str


class UpdateStorageKeyRequest(BaseModel):
    """Request model for replacing a storage key."""
    storage_key: str


class FileRecordResponse(BaseModel):
    """Response model for a file record."""
    file_id: str
    file_name: str
    content_type: str
    size: int
    owner_id: str
    owner_username: Optional[str] = None
    status: str
    storage_key: str
    created_at: str
    updated_at: str
    version: int


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileRecordResponse]


class FileStatisticsResponse(BaseModel):
    """Response model for per-status record counts."""
    total: int
    uploaded: int
    processing: int
    ready: int
    failed: int
