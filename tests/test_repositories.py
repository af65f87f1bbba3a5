"""Integration tests for database repositories."""

import sqlite3
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from metadata_service.exceptions import (
    FileRecordNotFoundError,
    StaleRecordError,
    StorageKeyConflictError,
)
from metadata_service.lifecycle import FileStatus
from metadata_service.repositories.file_repository import FileRecord, FileRepository
from metadata_service.repositories.user_repository import User, UserRepository


def make_record(file_id="file-1", owner_id="user-1", storage_key=None, status=FileStatus.UPLOADED):
    now = datetime.now(timezone.utc)
    return FileRecord(
        file_id=file_id,
        file_name=f"{file_id}.bin",
        content_type="application/octet-stream",
        size=100,
        owner_id=owner_id,
        status=status,
        storage_key=storage_key or f"users/{owner_id}/files/{file_id}.bin",
        created_at=now,
        updated_at=now,
    )


class TestUserRepository:
    def test_create_and_fetch_user(self, test_db):
        created = UserRepository.create_user(
            user_id="u-1",
            username="carol",
            created_at=datetime.now(timezone.utc),
            roles=["ADMIN", "AUDITOR"],
        )

        fetched = UserRepository.get_by_user_id("u-1")
        assert fetched == created
        assert fetched.has_role("ADMIN")
        assert not fetched.has_role("USER")

    def test_get_missing_user(self, test_db):
        assert UserRepository.get_by_user_id("nope") is None

    def test_exists_by_id(self, owner):
        assert UserRepository.exists_by_id(owner.user_id)
        assert not UserRepository.exists_by_id("nope")

    def test_add_role_is_idempotent(self, owner):
        UserRepository.add_role(owner.user_id, "ADMIN")
        UserRepository.add_role(owner.user_id, "ADMIN")

        assert UserRepository.get_by_user_id(owner.user_id).roles == frozenset({"ADMIN"})

    def test_duplicate_username_rejected(self, owner):
        with pytest.raises(sqlite3.IntegrityError):
            UserRepository.create_user("other-id", "alice", datetime.now(timezone.utc))

    def test_get_all_users(self, owner, other_user, admin_user):
        users = UserRepository.get_all_users()
        assert {u.user_id for u in users} == {"user-1", "user-2", "admin-1"}
        assert all(isinstance(u, User) for u in users)


class TestFileRepository:
    def test_insert_and_get(self, owner):
        record = FileRepository.insert(make_record())

        assert FileRepository.get_by_id("file-1") == record

    def test_get_missing(self, test_db):
        assert FileRepository.get_by_id("missing") is None

    def test_duplicate_storage_key_rejected(self, owner):
        FileRepository.insert(make_record("file-1", storage_key="shared/key"))

        with pytest.raises(StorageKeyConflictError):
            FileRepository.insert(make_record("file-2", storage_key="shared/key"))

    def test_unknown_owner_is_an_integrity_error(self, test_db):
        with pytest.raises(sqlite3.IntegrityError):
            FileRepository.insert(make_record(owner_id="ghost"))

    def test_over_long_storage_key_rejected_by_schema(self, owner):
        with pytest.raises(sqlite3.IntegrityError, match="CHECK"):
            FileRepository.insert(make_record(storage_key="k" * 501))

        assert FileRepository.get_by_id("file-1") is None

    def test_storage_key_at_limit_is_accepted(self, owner):
        record = FileRepository.insert(make_record(storage_key="k" * 500))
        assert FileRepository.get_by_id(record.file_id).storage_key == "k" * 500

    def test_find_by_owner_and_status(self, owner, other_user):
        FileRepository.insert(make_record("f1", owner_id=owner.user_id))
        FileRepository.insert(make_record("f2", owner_id=other_user.user_id, status=FileStatus.READY))

        assert [r.file_id for r in FileRepository.find_by_owner(owner.user_id)] == ["f1"]
        assert [r.file_id for r in FileRepository.find_by_status(FileStatus.READY)] == ["f2"]
        assert FileRepository.find_by_status(FileStatus.FAILED) == []

    def test_counts(self, owner, other_user):
        FileRepository.insert(make_record("f1", owner_id=owner.user_id))
        FileRepository.insert(make_record("f2", owner_id=owner.user_id, status=FileStatus.PROCESSING))
        FileRepository.insert(make_record("f3", owner_id=other_user.user_id))

        assert FileRepository.count() == 3
        assert FileRepository.count_by_owner(owner.user_id) == 2
        assert FileRepository.count_by_status(FileStatus.UPLOADED) == 2
        assert FileRepository.count_by_status(FileStatus.READY) == 0

    def test_exists_by_storage_key_excluding(self, owner):
        FileRepository.insert(make_record("f1", storage_key="k1"))

        assert FileRepository.exists_by_storage_key_excluding("k1", "f2")
        assert not FileRepository.exists_by_storage_key_excluding("k1", "f1")
        assert not FileRepository.exists_by_storage_key_excluding("k2", "f1")

    def test_update_bumps_version(self, owner):
        record = FileRepository.insert(make_record())
        later = record.updated_at + timedelta(seconds=5)

        updated = FileRepository.update(replace(record, status=FileStatus.PROCESSING, updated_at=later))

        assert updated.version == 2
        stored = FileRepository.get_by_id(record.file_id)
        assert stored == updated
        assert stored.status is FileStatus.PROCESSING
        assert stored.updated_at == later

    def test_update_with_stale_version(self, owner):
        record = FileRepository.insert(make_record())
        FileRepository.update(replace(record, status=FileStatus.PROCESSING))

        with pytest.raises(StaleRecordError):
            FileRepository.update(replace(record, status=FileStatus.PROCESSING))

    def test_update_deleted_record(self, owner):
        record = FileRepository.insert(make_record())
        FileRepository.delete_by_id(record.file_id)

        with pytest.raises(FileRecordNotFoundError):
            FileRepository.update(record)

    def test_update_into_taken_storage_key(self, owner):
        FileRepository.insert(make_record("f1", storage_key="k1"))
        second = FileRepository.insert(make_record("f2", storage_key="k2"))

        with pytest.raises(StorageKeyConflictError):
            FileRepository.update(replace(second, storage_key="k1"))

    def test_delete_by_id(self, owner):
        FileRepository.insert(make_record())

        assert FileRepository.delete_by_id("file-1") is True
        assert FileRepository.delete_by_id("file-1") is False
        assert FileRepository.get_by_id("file-1") is None
