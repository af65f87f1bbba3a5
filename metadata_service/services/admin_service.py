"""Administrative operations that bypass ownership but not lifecycle rules."""

from typing import List, Optional, Union

from common.logging_config import get_logger
from common.types import FileStatistics
from metadata_service.lifecycle import FileStatus, parse_status
from metadata_service.repositories.file_repository import FileRecord
from metadata_service.repositories.user_repository import User
from metadata_service.services.access_service import AccessService
from metadata_service.services.file_service import FileService

logger = get_logger(__name__)


class AdminService:
    """
    Privileged view over FileService.

    Every operation requires the acting user to hold the admin role in
    place of owning the record. Status changes still go through the
    lifecycle validator inside FileService.change_status.
    """

    def __init__(
        self,
        file_service: Optional[FileService] = None,
        access_service: Optional[AccessService] = None,
    ):
        self.access = access_service or AccessService()
        self.file_service = file_service or FileService(access_service=self.access)

    def get_file(self, file_id: str, acting_user: User) -> FileRecord:
        self.access.require_privileged(acting_user)
        return self.file_service.load_record(file_id)

    def list_by_owner(self, owner_id: str, acting_user: User) -> List[FileRecord]:
        self.access.require_privileged(acting_user)
        logger.info(f"Admin listing files [owner_id={owner_id}] [admin_id={acting_user.user_id}]")
        return self.file_service.list_by_owner(owner_id, acting_user)

    def update_status(self, file_id: str, new_status_name: str, acting_user: User) -> FileRecord:
        self.access.require_privileged(acting_user)
        record = self.file_service.load_record(file_id)
        logger.info(f"Admin updating status [file_id={file_id}] [admin_id={acting_user.user_id}]")
        return self.file_service.change_status(record, new_status_name)

    def delete_file(self, file_id: str, acting_user: User) -> None:
        self.access.require_privileged(acting_user)
        record = self.file_service.load_record(file_id)
        self.file_service.remove_record(record)
        logger.info(
            f"File deleted by admin [file_id={file_id}] name={record.file_name} [admin_id={acting_user.user_id}]"
        )

    def update_storage_key(self, file_id: str, new_key: str, acting_user: User) -> FileRecord:
        self.access.require_privileged(acting_user)
        return self.file_service.update_storage_key(file_id, new_key)

    def get_by_status(self, status: Union[FileStatus, str], acting_user: User) -> List[FileRecord]:
        self.access.require_privileged(acting_user)
        status = parse_status(status)
        records = self.file_service.file_repo.find_by_status(status)
        logger.info(f"Admin retrieved {len(records)} files with status {status.value}")
        return records

    def global_statistics(self, acting_user: User) -> FileStatistics:
        self.access.require_privileged(acting_user)
        repo = self.file_service.file_repo
        stats = FileStatistics(
            total=repo.count(),
            uploaded=repo.count_by_status(FileStatus.UPLOADED),
            processing=repo.count_by_status(FileStatus.PROCESSING),
            ready=repo.count_by_status(FileStatus.READY),
            failed=repo.count_by_status(FileStatus.FAILED),
        )
        logger.info(
            f"Global statistics - total={stats.total} uploaded={stats.uploaded} "
            f"processing={stats.processing} ready={stats.ready} failed={stats.failed}"
        )
        return stats
