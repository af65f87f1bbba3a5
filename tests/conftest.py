"""Shared pytest fixtures for all tests."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from metadata_service.database import init_database
from metadata_service.repositories.user_repository import User, UserRepository
from metadata_service.services.access_service import AccessService
from metadata_service.services.admin_service import AdminService
from metadata_service.services.file_service import FileService


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary test database for each test.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setattr("metadata_service.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("metadata_service.config.DATABASE_PATH", str(db_path))
    init_database()
    yield db_path


def _make_user(user_id: str, username: str, roles=()) -> User:
    return UserRepository.create_user(
        user_id=user_id,
        username=username,
        created_at=datetime.now(timezone.utc),
        roles=roles,
    )


@pytest.fixture
def owner(test_db) -> User:
    """
    Regular user who owns the files created in tests.
    """
    return _make_user("user-1", "alice")


@pytest.fixture
def other_user(test_db) -> User:
    """
    Second regular user for isolation tests.
    """
    return _make_user("user-2", "bob")


@pytest.fixture
def admin_user(test_db) -> User:
    """
    User holding the administrator role.
    """
    return _make_user("admin-1", "root", roles=["ADMIN"])


@pytest.fixture
def access_service(test_db) -> AccessService:
    return AccessService(admin_role="ADMIN")


@pytest.fixture
def file_service(access_service) -> FileService:
    return FileService(access_service=access_service)


@pytest.fixture
def admin_service(file_service, access_service) -> AdminService:
    return AdminService(file_service=file_service, access_service=access_service)


@pytest.fixture
def report(file_service, owner):
    """
    A freshly created record owned by `owner`.
    """
    return file_service.create_file(
        file_name="report.pdf",
        content_type="application/pdf",
        size=1024,
        owner_id=owner.user_id,
        acting_user=owner,
    )
