"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from mangashelf.application.use_cases.activity import ActivityRecorder
from mangashelf.application.use_cases.auth import resolve_admin_role
from mangashelf.domain.entities import Identity
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.database import get_db
from mangashelf.infrastructure.repositories import (
    DocumentRepository,
    RoleRepository,
    UserRepository,
)
from mangashelf.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


def _credentials_error(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_documents(request: Request) -> DocumentRepository:
    """Return the document store shared by the application."""

    return request.app.state.documents


def get_activity_recorder(request: Request) -> ActivityRecorder:
    """Return the process wide activity recorder."""

    return request.app.state.activity_recorder


def resolve_identity(token: str, db: Session) -> Identity:
    """Resolve the identity for the provided bearer token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    uid = payload.get("sub")
    if not isinstance(uid, str) or not uid:
        raise _credentials_error()

    user = UserRepository(db).get_by_uid(uid)
    if user is None:
        raise _credentials_error("User not found")
    if not user.is_active:
        raise _credentials_error("Inactive user")
    return user.to_identity()


def get_auth_state(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    documents: DocumentRepository = Depends(get_documents),
) -> AuthState:
    """Return the resolved auth state; anonymous when no token is sent."""

    if not token:
        return AuthState.resolved(None)
    identity = resolve_identity(token, db)
    is_admin = resolve_admin_role(RoleRepository(documents), identity)
    return AuthState.resolved(identity, is_admin=is_admin)


def require_identity(auth: AuthState = Depends(get_auth_state)) -> AuthState:
    """Ensure the request carries a signed-in identity."""

    if auth.identity is None:
        raise _credentials_error("Not authenticated")
    return auth


def require_admin(auth: AuthState = Depends(require_identity)) -> AuthState:
    """Ensure the authenticated identity has administrator privileges."""

    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sign in with an admin account to continue",
        )
    return auth


__all__ = [
    "get_activity_recorder",
    "get_auth_state",
    "get_documents",
    "oauth2_scheme",
    "require_admin",
    "require_identity",
    "resolve_identity",
]
