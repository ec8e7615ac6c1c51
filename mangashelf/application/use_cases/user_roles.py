"""Use cases for listing accounts and changing their admin role."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from mangashelf.domain.entities import User
from mangashelf.infrastructure.repositories import RoleRepository, UserRepository

ROLE_ADMIN = "admin"
ROLE_VIEWER = "viewer"


@dataclass(frozen=True)
class UserRole:
    user: User
    role: str


def list_user_roles(session: Session, roles: RoleRepository) -> list[UserRole]:
    """Return every account with its current role, ordered by email."""

    return [
        UserRole(user, ROLE_ADMIN if roles.is_admin(user.uid) else ROLE_VIEWER)
        for user in UserRepository(session).list()
    ]


def set_user_role(
    session: Session,
    roles: RoleRepository,
    uid: str,
    *,
    admin: bool,
    updated_by: str,
) -> UserRole:
    """Grant or revoke the admin role of ``uid``.

    Raises ``LookupError`` when no account has that uid.
    """

    user = UserRepository(session).get_by_uid(uid.strip())
    if user is None:
        raise LookupError("User not found")

    if admin:
        roles.grant_admin(user.uid, updated_by=updated_by)
    else:
        roles.revoke_admin(user.uid)
    return UserRole(user, ROLE_ADMIN if admin else ROLE_VIEWER)


__all__ = [
    "ROLE_ADMIN",
    "ROLE_VIEWER",
    "UserRole",
    "list_user_roles",
    "set_user_role",
]
