"""Role lookups kept as documents next to the content they protect."""

from __future__ import annotations

from mangashelf.infrastructure.repositories.document_repository import (
    SERVER_TIMESTAMP,
    DocumentRepository,
)

ADMINS_COLLECTION = "admins"
ROLES_COLLECTION = "roles"


class RoleRepository:
    """Answer whether an identity holds the admin role."""

    def __init__(self, documents: DocumentRepository) -> None:
        self.documents = documents

    def is_admin(self, uid: str) -> bool:
        """Return ``True`` when ``admins/<uid>`` exists or ``roles/<uid>`` grants admin.

        Store failures propagate as :class:`DocumentStoreError`.
        """

        if self.documents.get(ADMINS_COLLECTION, uid) is not None:
            return True
        role = self.documents.get(ROLES_COLLECTION, uid)
        return role is not None and role.data.get("admin") is True

    def grant_admin(self, uid: str, *, updated_by: str | None = None) -> None:
        self.documents.set(
            ADMINS_COLLECTION,
            uid,
            {
                "admin": True,
                "updatedBy": updated_by or "manual",
                "updatedAt": SERVER_TIMESTAMP,
            },
        )

    def revoke_admin(self, uid: str) -> None:
        self.documents.delete(ADMINS_COLLECTION, uid)
        self.documents.delete(ROLES_COLLECTION, uid)


__all__ = ["ADMINS_COLLECTION", "ROLES_COLLECTION", "RoleRepository"]
