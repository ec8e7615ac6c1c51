"""Tests for listing accounts and changing their admin role."""

from __future__ import annotations

from mangashelf.infrastructure.database import SessionLocal
from mangashelf.infrastructure.repositories import RoleRepository, UserRepository
from mangashelf.infrastructure.repositories.role_repository import ADMINS_COLLECTION


def _uid(email: str) -> str:
    with SessionLocal() as session:
        return UserRepository(session).get_by_email(email).uid


def test_admin_lists_users_with_roles(client, sign_in):
    headers = sign_in("admin@example.com", admin=True)
    sign_in("reader@example.com")

    response = client.get("/users/", headers=headers)

    assert response.status_code == 200
    assert [(user["email"], user["role"]) for user in response.json()] == [
        ("admin@example.com", "admin"),
        ("reader@example.com", "viewer"),
    ]


def test_grant_and_revoke_admin(client, sign_in, documents):
    headers = sign_in("admin@example.com", admin=True)
    reader_headers = sign_in("reader@example.com")
    reader_uid = _uid("reader@example.com")
    roles = RoleRepository(documents)

    granted = client.post(f"/users/{reader_uid}/admin", headers=headers)

    assert granted.status_code == 200
    assert granted.json()["role"] == "admin"
    assert roles.is_admin(reader_uid) is True
    stored = documents.get(ADMINS_COLLECTION, reader_uid).data
    assert stored["updatedBy"] == _uid("admin@example.com")
    assert client.get("/auth/me", headers=reader_headers).json()["role"] == "admin"

    revoked = client.delete(f"/users/{reader_uid}/admin", headers=headers)

    assert revoked.status_code == 200
    assert revoked.json()["role"] == "viewer"
    assert roles.is_admin(reader_uid) is False
    assert client.get("/auth/me", headers=reader_headers).json()["role"] == "member"


def test_unknown_user_returns_404(client, sign_in):
    headers = sign_in("admin@example.com", admin=True)

    assert client.post("/users/abc/admin", headers=headers).status_code == 404
    assert client.delete("/users/abc/admin", headers=headers).status_code == 404


def test_members_cannot_change_roles(client, sign_in):
    headers = sign_in("reader@example.com")
    reader_uid = _uid("reader@example.com")

    assert client.get("/users/", headers=headers).status_code == 403
    assert client.post(f"/users/{reader_uid}/admin", headers=headers).status_code == 403
