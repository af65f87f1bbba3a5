"""File record repository for database operations."""

import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from metadata_service.database import get_db_connection
from metadata_service.exceptions import (
    FileRecordNotFoundError,
    StaleRecordError,
    StorageKeyConflictError,
)
from metadata_service.lifecycle import FileStatus

logger = get_logger(__name__)

_COLUMNS = (
    "file_id, file_name, content_type, size, owner_id, status, "
    "storage_key, created_at, updated_at, version"
)


@dataclass(frozen=True)
class FileRecord:
    file_id: str
    file_name: str
    content_type: str
    size: int
    owner_id: str
    status: FileStatus
    storage_key: str
    created_at: datetime
    updated_at: datetime
    version: int = 1


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        file_id=row["file_id"],
        file_name=row["file_name"],
        content_type=row["content_type"],
        size=row["size"],
        owner_id=row["owner_id"],
        status=FileStatus(row["status"]),
        storage_key=row["storage_key"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        version=row["version"],
    )


def _is_storage_key_violation(error: sqlite3.IntegrityError) -> bool:
    message = str(error)
    return "UNIQUE" in message and "storage_key" in message


class FileRepository:
    @staticmethod
    def insert(record: FileRecord) -> FileRecord:
        """
        Insert a new record.

        Raises:
            StorageKeyConflictError: If the storage key is already taken
        """
        logger.debug(f"Inserting file record [file_id={record.file_id}]")
        with get_db_connection() as conn:
            try:
                conn.execute(
                    f"""
                    INSERT INTO files ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.file_id,
                        record.file_name,
                        record.content_type,
                        record.size,
                        record.owner_id,
                        record.status.value,
                        record.storage_key,
                        record.created_at.isoformat(),
                        record.updated_at.isoformat(),
                        record.version,
                    )
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_storage_key_violation(e):
                    logger.warning(f"Storage key collision on insert [file_id={record.file_id}]")
                    raise StorageKeyConflictError(
                        f"Storage key already in use: {record.storage_key}"
                    ) from e
                raise

        return record

    @staticmethod
    def update(record: FileRecord) -> FileRecord:
        """
        Persist mutable fields of a record loaded at record.version.

        Returns:
            The stored record with its version incremented

        Raises:
            StaleRecordError: If the stored version no longer matches
            FileRecordNotFoundError: If the record was deleted meanwhile
            StorageKeyConflictError: If the new storage key is already taken
        """
        with get_db_connection() as conn:
            try:
                cursor = conn.execute(
                    """
                    UPDATE files
                    SET status = ?, storage_key = ?, updated_at = ?, version = version + 1
                    WHERE file_id = ? AND version = ?
                    """,
                    (
                        record.status.value,
                        record.storage_key,
                        record.updated_at.isoformat(),
                        record.file_id,
                        record.version,
                    )
                )
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_storage_key_violation(e):
                    raise StorageKeyConflictError(
                        f"Storage key already in use: {record.storage_key}"
                    ) from e
                raise

            if cursor.rowcount == 0:
                conn.rollback()
                exists = conn.execute(
                    "SELECT 1 FROM files WHERE file_id = ?", (record.file_id,)
                ).fetchone()
                if exists is None:
                    raise FileRecordNotFoundError(f"File {record.file_id} not found")
                logger.warning(
                    f"Version mismatch on update [file_id={record.file_id}] [expected_version={record.version}]"
                )
                raise StaleRecordError(
                    f"File {record.file_id} was modified concurrently; reload and retry"
                )

            conn.commit()

        return replace(record, version=record.version + 1)

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM files WHERE file_id = ?", (file_id,))
            row = cursor.fetchone()
            return _row_to_record(row) if row is not None else None

    @staticmethod
    def find_by_owner(owner_id: str) -> List[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM files WHERE owner_id = ? ORDER BY created_at",
                (owner_id,)
            )
            return [_row_to_record(row) for row in cursor.fetchall()]

    @staticmethod
    def find_by_status(status: FileStatus) -> List[FileRecord]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {_COLUMNS} FROM files WHERE status = ? ORDER BY created_at",
                (status.value,)
            )
            return [_row_to_record(row) for row in cursor.fetchall()]

    @staticmethod
    def exists_by_storage_key_excluding(storage_key: str, exclude_file_id: str) -> bool:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT 1 FROM files WHERE storage_key = ? AND file_id != ?",
                (storage_key, exclude_file_id)
            )
            return cursor.fetchone() is not None

    @staticmethod
    def delete_by_id(file_id: str) -> bool:
        """
        Permanently delete a record. Returns False if nothing was deleted.
        """
        logger.debug(f"Deleting file record [file_id={file_id}]")
        with get_db_connection() as conn:
            cursor = conn.execute("DELETE FROM files WHERE file_id = ?", (file_id,))
            conn.commit()
            return cursor.rowcount > 0

    @staticmethod
    def count() -> int:
        with get_db_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM files").fetchone()[0]

    @staticmethod
    def count_by_status(status: FileStatus) -> int:
        with get_db_connection() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM files WHERE status = ?", (status.value,)
            ).fetchone()[0]

    @staticmethod
    def count_by_owner(owner_id: str) -> int:
        with get_db_connection() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM files WHERE owner_id = ?", (owner_id,)
            ).fetchone()[0]
