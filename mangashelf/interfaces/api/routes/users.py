"""Admin endpoints for listing accounts and granting the admin role."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mangashelf.application.use_cases.user_roles import (
    UserRole,
    list_user_roles,
    set_user_role,
)
from mangashelf.domain.errors import DocumentStoreError
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.database import get_db
from mangashelf.infrastructure.repositories import DocumentRepository, RoleRepository
from mangashelf.interfaces.api.dependencies import get_documents, require_admin
from mangashelf.interfaces.api.schemas import UserRoleRead

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


def _to_read_model(entry: UserRole) -> UserRoleRead:
    user = entry.user
    return UserRoleRead(
        uid=user.uid,
        email=user.email,
        display_name=user.display_name,
        is_active=user.is_active,
        role=entry.role,
    )


@router.get("/", response_model=list[UserRoleRead])
def list_users(
    db: Session = Depends(get_db),
    documents: DocumentRepository = Depends(get_documents),
    _: AuthState = Depends(require_admin),
) -> list[UserRoleRead]:
    """List every account with its role."""

    try:
        entries = list_user_roles(db, RoleRepository(documents))
    except DocumentStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return [_to_read_model(entry) for entry in entries]


def _change_role(
    db: Session, documents: DocumentRepository, auth: AuthState, uid: str, *, admin: bool
) -> UserRoleRead:
    try:
        entry = set_user_role(
            db, RoleRepository(documents), uid, admin=admin, updated_by=auth.identity.uid
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DocumentStoreError as exc:
        logger.error("Failed to update role for %s: %s", uid, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Failed to update role."
        ) from exc
    logger.info("User %s set %s to %s", auth.identity.uid, uid, entry.role)
    return _to_read_model(entry)


@router.post("/{uid}/admin", response_model=UserRoleRead)
def grant_admin(
    uid: str,
    db: Session = Depends(get_db),
    documents: DocumentRepository = Depends(get_documents),
    auth: AuthState = Depends(require_admin),
) -> UserRoleRead:
    """Make ``uid`` an admin."""

    return _change_role(db, documents, auth, uid, admin=True)


@router.delete("/{uid}/admin", response_model=UserRoleRead)
def revoke_admin(
    uid: str,
    db: Session = Depends(get_db),
    documents: DocumentRepository = Depends(get_documents),
    auth: AuthState = Depends(require_admin),
) -> UserRoleRead:
    """Turn ``uid`` back into a viewer."""

    return _change_role(db, documents, auth, uid, admin=False)


__all__ = ["router"]
