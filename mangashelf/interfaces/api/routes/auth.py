"""Endpoints for signing in and inspecting the current identity."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from mangashelf.application.use_cases.auth import (
    INACTIVE_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    AuthenticationStatus,
    authenticate_user,
    resolve_admin_role,
)
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.database import get_db
from mangashelf.infrastructure.repositories import DocumentRepository, RoleRepository
from mangashelf.infrastructure.security import create_access_token
from mangashelf.interfaces.api.dependencies import get_auth_state, get_documents
from mangashelf.interfaces.api.schemas import AuthStateRead, IdentityRead, Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
    documents: DocumentRepository = Depends(get_documents),
):
    """Authenticate by email and password and return a JWT."""

    user, auth_status = authenticate_user(db, form_data.username, form_data.password)

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=INACTIVE_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    identity = user.to_identity()
    is_admin = resolve_admin_role(RoleRepository(documents), identity)
    access_token = create_access_token(data={"sub": user.uid, "email": user.email})
    logger.info("User %s signed in", user.uid)
    return {"access_token": access_token, "token_type": "bearer", "is_admin": is_admin}


@router.get("/me", response_model=AuthStateRead)
def read_auth_state(auth: AuthState = Depends(get_auth_state)) -> AuthStateRead:
    """Return the auth state resolved for the bearer token, if any."""

    identity = auth.identity
    return AuthStateRead(
        phase=auth.phase.value,
        role=auth.role.value,
        is_admin=auth.is_admin,
        identity=(
            IdentityRead(
                uid=identity.uid,
                email=identity.email,
                display_name=identity.display_name,
            )
            if identity
            else None
        ),
    )


__all__ = ["router"]
