"""Translation from domain records to response schemas."""

from typing import Dict, Iterable, Optional

from common.types import FileStatistics
from metadata_service.repositories.file_repository import FileRecord
from metadata_service.schemas.files import (
    FileRecordResponse,
    FileStatisticsResponse,
    ListFilesResponse,
)
from metadata_service.services.access_service import AccessService


def to_file_response(record: FileRecord, owner_username: Optional[str] = None) -> FileRecordResponse:
    return FileRecordResponse(
        file_id=record.file_id,
        file_name=record.file_name,
        content_type=record.content_type,
        size=record.size,
        owner_id=record.owner_id,
        owner_username=owner_username,
        status=record.status.value,
        storage_key=record.storage_key,
        created_at=record.created_at.isoformat(),
        updated_at=record.updated_at.isoformat(),
        version=record.version,
    )


def to_list_response(records: Iterable[FileRecord], access: AccessService) -> ListFilesResponse:
    """
    Build a listing, looking up each distinct owner's username once.
    """
    usernames: Dict[str, Optional[str]] = {}
    files = []
    for record in records:
        if record.owner_id not in usernames:
            usernames[record.owner_id] = owner_username(access, record.owner_id)
        files.append(to_file_response(record, usernames[record.owner_id]))
    return ListFilesResponse(files=files)


def owner_username(access: AccessService, owner_id: str) -> Optional[str]:
    owner = access.user_repo.get_by_user_id(owner_id)
    return owner.username if owner is not None else None


def to_statistics_response(stats: FileStatistics) -> FileStatisticsResponse:
    return FileStatisticsResponse(**stats.to_dict())
