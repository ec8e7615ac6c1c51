"""Role based visibility rules for content pages.

A page moves through a single state machine driven by the auth state, the
viewer intent (admin workspace or public reader) and the loaded items:

* ``CHECKING`` while auth has not resolved; no content decision is made.
* ``UNAUTHENTICATED`` when the admin workspace is opened without an identity.
* ``UNAUTHORIZED`` when the identity lacks the admin role and either the route
  requires it or no published content exists.
* ``EMPTY_SET`` when the visible set is empty for an admin.
* ``VIEWING`` when an item of the visible set is selected.

Admins additionally get ``editing`` alongside ``VIEWING`` or ``EMPTY_SET``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Sequence, TypeVar

from mangashelf.domain.entities import POST_STATUS_PUBLISHED, Identity
from mangashelf.domain.errors import PermissionDeniedError

T = TypeVar("T")

LOAD_PERMISSION_MESSAGE = (
    "You do not have permission to view these posts. "
    "Make sure you are signed in with an admin account."
)
LOAD_FAILURE_MESSAGE = "Failed to load posts. Try again shortly."


class AuthPhase(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class ViewerRole(Enum):
    ANONYMOUS = "anonymous"
    MEMBER = "member"
    ADMIN = "admin"


class ViewerIntent(Enum):
    """Which surface the page is rendered for."""

    OWNER = "owner"
    READER = "reader"


class PageState(Enum):
    CHECKING = "checking"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    EMPTY_SET = "empty-set"
    VIEWING = "viewing"


class VisibilityDecision(Enum):
    AWAITING_AUTH = "awaiting-auth"
    REDIRECT_TO_SIGNIN = "redirect-to-signin"
    REDIRECT_HOME = "redirect-home"
    EMPTY_UNDER_CONSTRUCTION = "empty-under-construction"
    RENDER_CONTENT = "render-content"
    RENDER_EDITOR = "render-editor"


@dataclass(frozen=True)
class AuthState:
    """Snapshot of the auth collaborator as seen by a page."""

    phase: AuthPhase = AuthPhase.PENDING
    identity: Identity | None = None
    is_admin: bool = False

    def __post_init__(self) -> None:
        if self.phase is AuthPhase.PENDING and (self.identity or self.is_admin):
            raise ValueError("A pending auth state carries no identity")
        if self.is_admin and self.identity is None:
            raise ValueError("The admin role requires an identity")

    @classmethod
    def pending(cls) -> "AuthState":
        return cls()

    @classmethod
    def resolved(cls, identity: Identity | None, *, is_admin: bool = False) -> "AuthState":
        return cls(
            phase=AuthPhase.RESOLVED,
            identity=identity,
            is_admin=bool(is_admin and identity is not None),
        )

    @property
    def is_resolved(self) -> bool:
        return self.phase is AuthPhase.RESOLVED

    @property
    def role(self) -> ViewerRole:
        if self.identity is None:
            return ViewerRole.ANONYMOUS
        return ViewerRole.ADMIN if self.is_admin else ViewerRole.MEMBER


@dataclass(frozen=True)
class PageView(Generic[T]):
    """Outcome of :func:`resolve_page` for one render of a page."""

    state: PageState
    decision: VisibilityDecision
    visible: tuple[T, ...] = ()
    selected: T | None = None
    editing: bool = False

    @property
    def selected_id(self) -> str | None:
        return _item_id(self.selected) if self.selected is not None else None


def _item_id(item: Any) -> str | None:
    return getattr(item, "id", None)


def _is_published(item: Any) -> bool:
    return getattr(item, "status", None) == POST_STATUS_PUBLISHED


def effective_visible_set(items: Sequence[T], *, is_admin: bool) -> list[T]:
    """Return the items ``is_admin`` may see, preserving the page ordering."""

    if is_admin:
        return list(items)
    return [item for item in items if _is_published(item)]


def select_item(visible: Sequence[T], requested_id: str | None = None) -> T | None:
    """Pick the requested item when visible, otherwise the first visible one."""

    if requested_id:
        for item in visible:
            if _item_id(item) == requested_id:
                return item
    return visible[0] if visible else None


def resolve_page(
    auth: AuthState,
    intent: ViewerIntent,
    items: Sequence[T] = (),
    requested_id: str | None = None,
) -> PageView[T]:
    """Compute the render state of a page for ``auth`` and ``items``."""

    if not auth.is_resolved:
        return PageView(PageState.CHECKING, VisibilityDecision.AWAITING_AUTH)

    if intent is ViewerIntent.OWNER:
        if auth.identity is None:
            return PageView(
                PageState.UNAUTHENTICATED, VisibilityDecision.REDIRECT_TO_SIGNIN
            )
        if not auth.is_admin:
            return PageView(PageState.UNAUTHORIZED, VisibilityDecision.REDIRECT_HOME)

    visible = tuple(effective_visible_set(items, is_admin=auth.is_admin))
    selected = select_item(visible, requested_id)

    if auth.is_admin:
        state = PageState.VIEWING if selected is not None else PageState.EMPTY_SET
        return PageView(
            state,
            VisibilityDecision.RENDER_EDITOR,
            visible=visible,
            selected=selected,
            editing=True,
        )

    if selected is None:
        return PageView(
            PageState.UNAUTHORIZED, VisibilityDecision.EMPTY_UNDER_CONSTRUCTION
        )
    return PageView(
        PageState.VIEWING,
        VisibilityDecision.RENDER_CONTENT,
        visible=visible,
        selected=selected,
    )


def classify_load_error(exc: BaseException) -> str:
    """Return the user facing message for a failed content load."""

    if isinstance(exc, PermissionDeniedError):
        return LOAD_PERMISSION_MESSAGE
    return LOAD_FAILURE_MESSAGE


__all__ = [
    "AuthPhase",
    "AuthState",
    "LOAD_FAILURE_MESSAGE",
    "LOAD_PERMISSION_MESSAGE",
    "PageState",
    "PageView",
    "ViewerIntent",
    "ViewerRole",
    "VisibilityDecision",
    "classify_load_error",
    "effective_visible_set",
    "resolve_page",
    "select_item",
]
