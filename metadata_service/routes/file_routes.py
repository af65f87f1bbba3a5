"""File record API routes for owners."""

from fastapi import APIRouter, Depends, Response, status

from metadata_service.auth import get_current_user
from metadata_service.repositories.user_repository import User
from metadata_service.routes.serializers import (
    to_file_response,
    to_statistics_response,
)
from metadata_service.schemas.files import (
    CreateFileRequest,
    FileRecordResponse,
    FileStatisticsResponse,
    ListFilesResponse,
    UpdateStatusRequest,
)
from metadata_service.services.file_service import FileService

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("", response_model=FileRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_file(
    request: CreateFileRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Register metadata for an uploaded file.

    Parameters:
        - file_name: Original file name (1-255 chars)
        - content_type: MIME type (1-100 chars)
        - size: Size in bytes (1 byte to 10 GiB)
        - owner_id: Must equal the caller's user id

    Returns:
        - The created record, status UPLOADED, with a generated storage key

    Raises:
        - 400: Invalid name, content type or size
        - 401: Missing or unknown user
        - 403: owner_id does not match the caller
        - 409: Storage key collision (retry)
    """
    file_service = FileService()

    record = file_service.create_file(
        file_name=request.file_name,
        content_type=request.content_type,
        size=request.size,
        owner_id=request.owner_id,
        acting_user=current_user,
    )

    return to_file_response(record, current_user.username)


@router.get("", response_model=ListFilesResponse)
async def list_my_files(current_user: User = Depends(get_current_user)):
    """
    List all file records owned by the caller.
    """
    file_service = FileService()

    records = file_service.list_by_owner(current_user.user_id, current_user)

    return ListFilesResponse(
        files=[to_file_response(record, current_user.username) for record in records]
    )


@router.get("/statistics", response_model=FileStatisticsResponse)
async def my_statistics(current_user: User = Depends(get_current_user)):
    """
    Count the caller's records per status.
    """
    file_service = FileService()
    return to_statistics_response(file_service.statistics_for(current_user.user_id))


@router.get("/{file_id}", response_model=FileRecordResponse)
async def get_file(
    file_id: str,
    current_user: User = Depends(get_current_user)
):
    """
    Fetch a single record owned by the caller.

    Raises:
        - 403: Caller does not own this file
        - 404: File not found
    """
    file_service = FileService()

    record = file_service.get_file(file_id, current_user)

    return to_file_response(record, current_user.username)


@router.patch("/{file_id}/status", response_model=FileRecordResponse)
async def update_status(
    file_id: str,
    request: UpdateStatusRequest,
    current_user: User = Depends(get_current_user)
):
    """
    Move a record to a new processing status.

    Parameters:
        - status: Target status name, case-insensitive

    Raises:
        - 400: Unknown status name
        - 403: Caller does not own this file
        - 404: File not found
        - 409: Transition not permitted, or concurrent modification
    """
    file_service = FileService()

    record = file_service.update_status(file_id, request.status, current_user)

    return to_file_response(record, current_user.username)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: str,
    current_user: User = Depends(get_current_user)
):
    """
    Permanently delete a record owned by the caller.
    """
    file_service = FileService()

    file_service.delete_file(file_id, current_user)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
