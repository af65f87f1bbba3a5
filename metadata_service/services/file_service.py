"""File record service for business logic."""

from collections import Counter
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from common.constants import (
    MAX_CONTENT_TYPE_LENGTH,
    MAX_FILE_NAME_LENGTH,
    MAX_FILE_SIZE_BYTES,
    MAX_STORAGE_KEY_LENGTH,
)
from common.logging_config import get_logger
from common.types import FileStatistics
from metadata_service.exceptions import (
    FileRecordNotFoundError,
    InvalidArgumentError,
    InvalidTransitionError,
    StorageKeyConflictError,
)
from metadata_service.lifecycle import INITIAL_STATUS, FileStatus, parse_status, validate_transition
from metadata_service.repositories.file_repository import FileRecord, FileRepository
from metadata_service.repositories.user_repository import User
from metadata_service.services.access_service import AccessService
from metadata_service.storage_keys import StorageKeyGenerator
from metadata_service.utils import generate_uuid, utc_now

logger = get_logger(__name__)


def _require_text(value: str, field: str, max_length: int) -> None:
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{field} must be a string", field=field)
    if not value.strip():
        raise InvalidArgumentError(f"{field} is required", field=field)
    if len(value) > max_length:
        raise InvalidArgumentError(
            f"{field} cannot exceed {max_length} characters", field=field
        )


def _require_size(size: int) -> None:
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidArgumentError("size must be an integer number of bytes", field="size")
    if size <= 0:
        raise InvalidArgumentError("size must be positive", field="size")
    if size > MAX_FILE_SIZE_BYTES:
        raise InvalidArgumentError(
            f"size cannot exceed {MAX_FILE_SIZE_BYTES} bytes", field="size"
        )


def summarize(records: Iterable[FileRecord]) -> FileStatistics:
    counts = Counter(record.status for record in records)
    return FileStatistics(
        total=sum(counts.values()),
        uploaded=counts[FileStatus.UPLOADED],
        processing=counts[FileStatus.PROCESSING],
        ready=counts[FileStatus.READY],
        failed=counts[FileStatus.FAILED],
    )


class FileService:
    def __init__(
        self,
        file_repo=None,
        access_service: Optional[AccessService] = None,
        key_generator: Optional[StorageKeyGenerator] = None,
        clock: Optional[Callable] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.file_repo = file_repo or FileRepository()
        self.access = access_service or AccessService()
        self.key_generator = key_generator or StorageKeyGenerator()
        self._now = clock or utc_now
        self._new_id = id_factory or generate_uuid

    def create_file(
        self,
        file_name: str,
        content_type: str,
        size: int,
        owner_id: str,
        acting_user: User,
    ) -> FileRecord:
        self.access.require_request_owner_consistency(owner_id, acting_user)

        _require_text(file_name, "file_name", MAX_FILE_NAME_LENGTH)
        _require_text(content_type, "content_type", MAX_CONTENT_TYPE_LENGTH)
        _require_size(size)

        storage_key = self.key_generator.generate(file_name, owner_id)
        _require_text(storage_key, "storage_key", MAX_STORAGE_KEY_LENGTH)

        now = self._now()
        record = FileRecord(
            file_id=self._new_id(),
            file_name=file_name,
            content_type=content_type,
            size=size,
            owner_id=owner_id,
            status=INITIAL_STATUS,
            storage_key=storage_key,
            created_at=now,
            updated_at=now,
        )

        self.file_repo.insert(record)
        logger.info(
            f"File record created [file_id={record.file_id}] [owner_id={owner_id}] name={file_name}"
        )
        return record

    def load_record(self, file_id: str) -> FileRecord:
        record = self.file_repo.get_by_id(file_id)
        if record is None:
            raise FileRecordNotFoundError(f"File not found with id: {file_id}")
        return record

    def get_file(self, file_id: str, acting_user: User) -> FileRecord:
        record = self.load_record(file_id)
        self.access.require_ownership(acting_user, record.owner_id, "file")
        logger.debug(f"File record read [file_id={file_id}] [user_id={acting_user.user_id}]")
        return record

    def list_by_owner(self, owner_id: str, acting_user: User) -> List[FileRecord]:
        records = self.file_repo.find_by_owner(owner_id)
        logger.debug(
            f"Listed {len(records)} file records [owner_id={owner_id}] [user_id={acting_user.user_id}]"
        )
        return records

    def change_status(self, record: FileRecord, new_status_name: str) -> FileRecord:
        """
        Move a loaded record to a new status. Callers must have authorized
        the acting user already.

        Raises:
            InvalidArgumentError: Unknown status name
            InvalidTransitionError: Transition not permitted
            StaleRecordError: Record changed since it was loaded
        """
        target = parse_status(new_status_name)
        try:
            validate_transition(record.status, target)
        except InvalidTransitionError:
            logger.warning(
                f"Rejected status change [file_id={record.file_id}] {record.status.value} -> {target.value}"
            )
            raise

        updated = self.file_repo.update(
            replace(record, status=target, updated_at=self._touch(record))
        )
        logger.info(
            f"File status updated [file_id={record.file_id}] {record.status.value} -> {target.value}"
        )
        return updated

    def update_status(self, file_id: str, new_status_name: str, acting_user: User) -> FileRecord:
        record = self.load_record(file_id)
        self.access.require_ownership(acting_user, record.owner_id, "file")
        return self.change_status(record, new_status_name)

    def remove_record(self, record: FileRecord) -> None:
        if not self.file_repo.delete_by_id(record.file_id):
            raise FileRecordNotFoundError(f"File not found with id: {record.file_id}")
        logger.info(f"File record deleted [file_id={record.file_id}] name={record.file_name}")

    def delete_file(self, file_id: str, acting_user: User) -> None:
        record = self.load_record(file_id)
        self.access.require_ownership(acting_user, record.owner_id, "file")
        self.remove_record(record)

    def update_storage_key(self, file_id: str, new_key: str) -> FileRecord:
        """
        Replace the storage key of a record. Reserved for privileged callers.
        """
        _require_text(new_key, "storage_key", MAX_STORAGE_KEY_LENGTH)
        record = self.load_record(file_id)

        if self.file_repo.exists_by_storage_key_excluding(new_key, file_id):
            raise StorageKeyConflictError(f"Storage key already in use: {new_key}")

        updated = self.file_repo.update(
            replace(record, storage_key=new_key, updated_at=self._touch(record))
        )
        logger.info(f"Storage key updated [file_id={file_id}]")
        return updated

    def statistics_for(self, owner_id: str) -> FileStatistics:
        return summarize(self.file_repo.find_by_owner(owner_id))

    def _touch(self, record: FileRecord):
        return max(self._now(), record.created_at)
