"""Use cases for signing in and tracking the current identity."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from enum import Enum, auto

import anyio
from sqlalchemy.orm import Session

from mangashelf.domain.entities import Identity, User
from mangashelf.domain.errors import AuthenticationError
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.repositories import RoleRepository, UserRepository
from mangashelf.infrastructure.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Incorrect email or password."
INACTIVE_MESSAGE = "This account has been disabled."


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()


def authenticate_user(session: Session, email: str, password: str):
    """Return the authentication result along with the user when possible."""

    user = UserRepository(session).get_by_email(email)

    if not user or not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE

    return user, AuthenticationStatus.SUCCESS


def create_user(
    session: Session,
    *,
    email: str,
    password: str,
    display_name: str | None = None,
) -> User:
    """Create an account; raise ``ValueError`` for missing or taken emails."""

    repository = UserRepository(session)
    normalized = email.strip().lower()
    if not normalized or "@" not in normalized:
        raise ValueError("A valid email address is required")
    if not password:
        raise ValueError("A password is required")
    if repository.get_by_email(normalized) is not None:
        raise ValueError("An account with this email already exists")

    return repository.create(
        User(
            id=None,
            uid=uuid.uuid4().hex,
            email=normalized,
            display_name=(display_name or "").strip() or None,
            password=get_password_hash(password),
        )
    )


def resolve_admin_role(roles: RoleRepository, identity: Identity | None) -> bool:
    """Return whether ``identity`` is an admin; lookup failures mean no."""

    if identity is None:
        return False
    try:
        return roles.is_admin(identity.uid)
    except Exception as exc:  # noqa: BLE001
        logger.error("Error checking admin role for %s: %s", identity.uid, exc)
        return False


class AuthSession:
    """Follow identity-changed events and expose the latest :class:`AuthState`.

    Models the client side auth stream; HTTP requests resolve their state per
    request in the API dependencies instead. The state stays pending until the
    first event's role lookup finishes. When events overlap, only the most
    recent one is applied.
    """

    def __init__(
        self,
        roles: RoleRepository,
        session_factory: Callable[[], Session],
    ) -> None:
        self._roles = roles
        self._session_factory = session_factory
        self._state = AuthState.pending()
        self._sequence = 0
        self._listeners: list[Callable[[AuthState], None]] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def subscribe(self, listener: Callable[[AuthState], None]) -> Callable[[], None]:
        """Register ``listener`` for state changes; return an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def handle_identity_changed(self, identity: Identity | None) -> AuthState:
        self._sequence += 1
        sequence = self._sequence

        is_admin = await anyio.to_thread.run_sync(
            resolve_admin_role, self._roles, identity
        )
        if sequence != self._sequence:
            logger.debug("Discarding superseded identity event %s", sequence)
            return self._state

        self._state = AuthState.resolved(identity, is_admin=is_admin)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    async def login(self, email: str, password: str) -> AuthState:
        """Sign in and publish the new identity.

        Raises :class:`AuthenticationError` with a user facing message.
        """

        if not email.strip() or not password:
            raise AuthenticationError("Email and password are required.")

        user, status = await anyio.to_thread.run_sync(self._authenticate, email, password)
        if status is AuthenticationStatus.INVALID_CREDENTIALS:
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
        if status is AuthenticationStatus.INACTIVE:
            raise AuthenticationError(INACTIVE_MESSAGE)
        return await self.handle_identity_changed(user.to_identity())

    async def logout(self) -> AuthState:
        return await self.handle_identity_changed(None)

    def _authenticate(self, email: str, password: str):
        session = self._session_factory()
        try:
            return authenticate_user(session, email, password)
        finally:
            session.close()


__all__ = [
    "AuthSession",
    "AuthenticationStatus",
    "INACTIVE_MESSAGE",
    "INVALID_CREDENTIALS_MESSAGE",
    "authenticate_user",
    "create_user",
    "resolve_admin_role",
]
