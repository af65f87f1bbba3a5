"""Tests for the HTTP API layer."""

import pytest
from fastapi.testclient import TestClient

from metadata_service.main import app


@pytest.fixture
def client(test_db):
    """Create FastAPI test client bound to the temporary database."""
    with TestClient(app) as test_client:
        yield test_client


def as_user(user):
    return {"X-User-Id": user.user_id}


def create_payload(user, **overrides):
    payload = {
        "file_name": "report.pdf",
        "content_type": "application/pdf",
        "size": 1024,
        "owner_id": user.user_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def created(client, owner):
    response = client.post("/files", json=create_payload(owner), headers=as_user(owner))
    assert response.status_code == 201
    return response.json()


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_health_and_ready(client):
    assert client.get("/health").json()["status"] == "healthy"

    ready = client.get("/ready")
    assert ready.status_code == 200
    assert ready.json()["ready"] is True


def test_request_id_header(client):
    assert client.get("/health").headers["X-Request-ID"]


class TestIdentity:
    def test_missing_identity_header(self, client):
        response = client.get("/files")
        assert response.status_code == 401

    def test_unknown_user(self, client):
        response = client.get("/files", headers={"X-User-Id": "ghost"})
        assert response.status_code == 401


class TestOwnerRoutes:
    def test_create_returns_uploaded_record(self, created, owner):
        assert created["status"] == "UPLOADED"
        assert created["owner_id"] == owner.user_id
        assert created["owner_username"] == "alice"
        assert created["storage_key"].startswith(f"users/{owner.user_id}/files/")
        assert created["storage_key"].endswith(".pdf")
        assert created["version"] == 1

    def test_create_for_someone_else(self, client, owner, other_user):
        response = client.post(
            "/files",
            json=create_payload(owner, owner_id=other_user.user_id),
            headers=as_user(owner),
        )
        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    @pytest.mark.parametrize("size", [0, -5, 10 * 2 ** 30 + 1])
    def test_create_with_bad_size(self, client, owner, size):
        response = client.post("/files", json=create_payload(owner, size=size), headers=as_user(owner))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"

    def test_create_rejects_boolean_size(self, client, owner):
        response = client.post("/files", json=create_payload(owner, size=True), headers=as_user(owner))
        assert response.status_code == 422

    def test_update_status_rejects_non_string_status(self, client, owner, created):
        response = client.patch(
            f"/files/{created['file_id']}/status",
            json={"status": 3},
            headers=as_user(owner),
        )
        assert response.status_code == 422

    def test_create_missing_fields(self, client, owner):
        response = client.post("/files", json={"file_name": "x.txt"}, headers=as_user(owner))
        assert response.status_code == 422

    def test_get_and_list(self, client, owner, created):
        response = client.get(f"/files/{created['file_id']}", headers=as_user(owner))
        assert response.status_code == 200
        assert response.json() == created

        listing = client.get("/files", headers=as_user(owner)).json()
        assert [f["file_id"] for f in listing["files"]] == [created["file_id"]]

    def test_get_missing(self, client, owner):
        response = client.get("/files/missing", headers=as_user(owner))
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_lifecycle_scenario(self, client, owner, other_user, created):
        url = f"/files/{created['file_id']}/status"

        response = client.patch(url, json={"status": "processing"}, headers=as_user(owner))
        assert response.status_code == 200
        assert response.json()["status"] == "PROCESSING"

        response = client.patch(url, json={"status": "ready"}, headers=as_user(owner))
        assert response.json()["status"] == "READY"

        response = client.patch(url, json={"status": "processing"}, headers=as_user(owner))
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"

        response = client.get(f"/files/{created['file_id']}", headers=as_user(other_user))
        assert response.status_code == 403

    def test_unknown_status_name(self, client, owner, created):
        response = client.patch(
            f"/files/{created['file_id']}/status", json={"status": "done"}, headers=as_user(owner)
        )
        assert response.status_code == 400

    def test_delete(self, client, owner, other_user, created):
        url = f"/files/{created['file_id']}"

        assert client.delete(url, headers=as_user(other_user)).status_code == 403
        assert client.delete(url, headers=as_user(owner)).status_code == 204
        assert client.get(url, headers=as_user(owner)).status_code == 404

    def test_statistics(self, client, owner, created):
        stats = client.get("/files/statistics", headers=as_user(owner)).json()
        assert stats == {"total": 1, "uploaded": 1, "processing": 0, "ready": 0, "failed": 0}


class TestAdminRoutes:
    def test_non_admin_is_forbidden(self, client, owner, created):
        response = client.get(f"/admin/files/{created['file_id']}", headers=as_user(owner))
        assert response.status_code == 403

        response = client.get("/admin/files/statistics", headers=as_user(owner))
        assert response.status_code == 403

    def test_admin_reads_any_file(self, client, admin_user, created):
        response = client.get(f"/admin/files/{created['file_id']}", headers=as_user(admin_user))
        assert response.status_code == 200
        assert response.json()["owner_username"] == "alice"

    def test_list_requires_exactly_one_filter(self, client, admin_user, owner):
        response = client.get("/admin/files", headers=as_user(admin_user))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"
        response = client.get(
            "/admin/files",
            params={"owner_id": owner.user_id, "status": "ready"},
            headers=as_user(admin_user),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"

    def test_list_by_owner_and_status(self, client, admin_user, owner, created):
        by_owner = client.get(
            "/admin/files", params={"owner_id": owner.user_id}, headers=as_user(admin_user)
        ).json()
        assert [f["file_id"] for f in by_owner["files"]] == [created["file_id"]]

        by_status = client.get(
            "/admin/files", params={"status": "uploaded"}, headers=as_user(admin_user)
        ).json()
        assert [f["file_id"] for f in by_status["files"]] == [created["file_id"]]

    def test_admin_status_change_respects_lifecycle(self, client, admin_user, created):
        url = f"/admin/files/{created['file_id']}/status"

        response = client.patch(url, json={"status": "failed"}, headers=as_user(admin_user))
        assert response.status_code == 409

        response = client.patch(url, json={"status": "processing"}, headers=as_user(admin_user))
        assert response.status_code == 200

    def test_storage_key_update_and_conflict(self, client, admin_user, owner, created):
        second = client.post(
            "/files", json=create_payload(owner, file_name="b.txt"), headers=as_user(owner)
        ).json()

        response = client.patch(
            f"/admin/files/{second['file_id']}/storage-key",
            json={"storage_key": created["storage_key"]},
            headers=as_user(admin_user),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

        response = client.patch(
            f"/admin/files/{second['file_id']}/storage-key",
            json={"storage_key": "archive/b.txt"},
            headers=as_user(admin_user),
        )
        assert response.status_code == 200
        assert response.json()["storage_key"] == "archive/b.txt"

    def test_global_statistics_and_delete(self, client, admin_user, created):
        stats = client.get("/admin/files/statistics", headers=as_user(admin_user)).json()
        assert stats["total"] == 1

        response = client.delete(f"/admin/files/{created['file_id']}", headers=as_user(admin_user))
        assert response.status_code == 204

        stats = client.get("/admin/files/statistics", headers=as_user(admin_user)).json()
        assert stats["total"] == 0
