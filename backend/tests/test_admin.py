"""Tests for admin user management and the medical-data audit log."""
import base64
import logging

import pytest
from sqlalchemy.exc import OperationalError

from conftest import ADMIN, PHYSICIAN
from hse.core.audit_middleware import access_entry, basic_auth_username
from hse.core.exceptions import NotFound, ValidationFailed
from hse.services import audit as audit_service
from hse.services import users as svc

USERS = "/api/v1/admin/users"


class TestUserService:
    def test_create_requires_username_and_password(self, db):
        with pytest.raises(ValidationFailed):
            svc.create_user(db, {"username": " ", "password": "x"})
        with pytest.raises(ValidationFailed):
            svc.create_user(db, {"username": "new", "password": ""})

    def test_username_unique(self, db):
        svc.create_user(db, {"username": "medic", "password": "a", "roles": ["treatment"]})
        with pytest.raises(ValidationFailed):
            svc.create_user(db, {"username": "medic", "password": "b"})

    def test_unknown_role_rejected(self, db):
        with pytest.raises(ValidationFailed):
            svc.create_user(db, {"username": "x", "password": "y", "roles": ["superuser"]})

    def test_edit_keeps_password(self, db):
        user = svc.create_user(db, {"username": "medic", "password": "secret", "roles": []})
        svc.edit_user(db, user.id, {"username": "medic2", "roles": ["safety", "safety"]})
        assert svc.authenticate(db, "medic2", "secret").roles == ["safety"]
        assert svc.authenticate(db, "medic", "secret") is None

    def test_delete(self, db):
        user = svc.create_user(db, {"username": "temp", "password": "t"})
        svc.delete_user(db, user.id)
        with pytest.raises(NotFound):
            svc.get_user(db, user.id)


class TestUserApi:
    def test_admin_manages_users(self, client):
        created = client.post(
            USERS, json={"username": "nurse", "password": "pw", "roles": ["treatment"]}, auth=ADMIN
        )
        assert created.status_code == 201
        user_id = created.json()["id"]
        assert "password" not in created.json()

        assert client.get("/api/v1/medicines", auth=("nurse", "pw")).status_code == 200

        client.put(f"{USERS}/{user_id}", json={"username": "nurse", "roles": ["safety"]}, auth=ADMIN)
        assert client.get("/api/v1/medicines", auth=("nurse", "pw")).status_code == 403

        assert client.delete(f"{USERS}/{user_id}", auth=ADMIN).status_code == 204
        assert client.get("/api/v1/auth/me", auth=("nurse", "pw")).status_code == 401

    def test_duplicate_username(self, client):
        resp = client.post(USERS, json={"username": "admin", "password": "x"}, auth=ADMIN)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Username already taken"


class TestAuditLog:
    def test_basic_auth_username(self):
        token = base64.b64encode(b"dr_ahmadi:password").decode()
        assert basic_auth_username(f"Basic {token}") == "dr_ahmadi"
        assert basic_auth_username("Bearer abc") == "anonymous"
        assert basic_auth_username("Basic !!!") == "anonymous"

    def test_medical_access_is_logged(self, client):
        client.get("/api/v1/personnel", auth=PHYSICIAN)
        client.get("/api/v1/medicines", auth=PHYSICIAN)

        logs = client.get("/api/v1/admin/audit-logs", auth=ADMIN).json()
        assert len(logs) == 1
        entry = logs[0]
        assert (entry["username"], entry["action"], entry["resource_type"]) == ("dr_ahmadi", "view", "personnel")
        assert entry["status_code"] == "200"

    def test_filter_by_action(self, client):
        personnel_id = client.get("/api/v1/personnel", auth=PHYSICIAN).json()[0]["id"]
        client.post(
            "/api/v1/medical-records",
            json={"personnel_id": personnel_id, "exam_date": "1403/01/01"},
            auth=PHYSICIAN,
        )
        created = client.get("/api/v1/admin/audit-logs", params={"action": "create"}, auth=ADMIN).json()
        assert [e["resource_type"] for e in created] == ["medical-records"]

    def test_filter_by_resource_id(self, client):
        first, second = (p["id"] for p in client.get("/api/v1/personnel", auth=PHYSICIAN).json())
        client.get(f"/api/v1/personnel/{first}", auth=PHYSICIAN)
        client.get(f"/api/v1/personnel/{second}", auth=PHYSICIAN)
        client.get(f"/api/v1/personnel/{first}/medical-records", auth=PHYSICIAN)

        logs = client.get("/api/v1/admin/audit-logs", params={"resource_id": first}, auth=ADMIN).json()
        assert sorted(e["request_path"] for e in logs) == [
            f"/api/v1/personnel/{first}",
            f"/api/v1/personnel/{first}/medical-records",
        ]

    def test_access_entry_from_request_parts(self):
        token = base64.b64encode(b"dr_ahmadi:password").decode()
        entry = access_entry("DELETE", "/api/v1/visits/v-1", f"Basic {token}", "10.0.0.5", 204)
        assert entry == {
            "username": "dr_ahmadi",
            "action": "delete",
            "resource_type": "visits",
            "resource_id": "v-1",
            "ip_address": "10.0.0.5",
            "request_method": "DELETE",
            "request_path": "/api/v1/visits/v-1",
            "status_code": "204",
        }

    def test_failed_write_is_logged_not_raised(self, monkeypatch, caplog):
        class BrokenSession:
            rolled_back = closed = False

            def add(self, obj):
                pass

            def commit(self):
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))

            def rollback(self):
                self.rolled_back = True

            def close(self):
                self.closed = True

        session = BrokenSession()
        monkeypatch.setattr(audit_service, "SessionLocal", lambda: session)
        entry = access_entry("GET", "/api/v1/personnel", "", None, 200)

        with caplog.at_level(logging.WARNING, logger="hse.services.audit"):
            audit_service.record_access(entry)

        assert session.rolled_back and session.closed
        assert "Audit log write failed for GET /api/v1/personnel" in caplog.text
