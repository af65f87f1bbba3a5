"""Administrative file record API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from metadata_service.auth import get_current_user
from metadata_service.exceptions import InvalidArgumentError
from metadata_service.repositories.user_repository import User
from metadata_service.routes.serializers import (
    owner_username,
    to_file_response,
    to_list_response,
    to_statistics_response,
)
from metadata_service.schemas.files import (
    FileRecordResponse,
    FileStatisticsResponse,
    ListFilesResponse,
    UpdateStatusRequest,
    UpdateStorageKeyRequest,
)
from metadata_service.services.admin_service import AdminService

router = APIRouter(prefix="/admin/files", tags=["Administration"])


@router.get("", response_model=ListFilesResponse)
async def list_files(
    owner_id: Optional[str] = Query(None, description="Return files of this owner"),
    file_status: Optional[str] = Query(None, alias="status", description="Return files in this status"),
    current_user: User = Depends(get_current_user)
):
    """
    List records across owners, filtered by exactly one of owner_id or status.

    Raises:
        - 400: Neither or both filters given, or unknown status
        - 403: Caller is not an administrator
    """
    if (owner_id is None) == (file_status is None):
        raise InvalidArgumentError("Provide exactly one of 'owner_id' or 'status'")

    admin_service = AdminService()

    if owner_id is not None:
        records = admin_service.list_by_owner(owner_id, current_user)
    else:
        records = admin_service.get_by_status(file_status, current_user)

    return to_list_response(records, admin_service.access)


@router.get("/statistics", response_model=FileStatisticsResponse)
async def global_statistics(current_user: User = Depends(get_current_user)):
    """
    Count all records per status.
    """
    admin_service = AdminService()
    return to_statistics_response(admin_service.global_statistics(current_user))


@router.get("/{file_id}", response_model=FileRecordResponse)
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user)
):
    admin_service = AdminService()

    record = admin_service.get_file(file_id, current_user)

    return to_file_response(record, owner_username(admin_service.access, record.owner_id))


@router.patch("/{file_id}/status", response_model=FileRecordResponse)
async def update_status(
    file_id: str,
    request: UpdateStatusRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Change the status of any record. Lifecycle rules still apply.
    """
    admin_service = AdminService()

    record = admin_service.update_status(file_id, request.status, current_user)

    return to_file_response(record, owner_username(admin_service.access, record.owner_id))


@router.patch("/{file_id}/storage-key", response_model=FileRecordResponse)
async def update_storage_key(
    file_id: str,
    request: UpdateStorageKeyRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Point a record at a different storage location.

    Raises:
        - 400: Empty or oversized key
        - 409: Key already used by another record
    """
    admin_service = AdminService()

    record = admin_service.update_storage_key(file_id, request.storage_key, current_user)

    return to_file_response(record, owner_username(admin_service.access, record.owner_id))


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: str,
    current_user: User = Depends(get_current_user)
):
    admin_service = AdminService()

    admin_service.delete_file(file_id, current_user)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
