"""Tests for the content visibility state machine."""

import pytest

from mangashelf.domain.entities import BlogPost, Identity
from mangashelf.domain.errors import DocumentStoreError, PermissionDeniedError
from mangashelf.domain.visibility import (
    LOAD_FAILURE_MESSAGE,
    LOAD_PERMISSION_MESSAGE,
    AuthState,
    PageState,
    ViewerIntent,
    ViewerRole,
    VisibilityDecision,
    classify_load_error,
    effective_visible_set,
    resolve_page,
    select_item,
)

READER = Identity(uid="reader", email="reader@example.com")
ADMIN = Identity(uid="admin", email="admin@example.com", display_name="Shelf Admin")

DRAFT = BlogPost(id="draft-1", title="Work in progress", status="draft")
PUBLISHED = BlogPost(id="pub-1", title="Volume 14 review", status="published")
PUBLISHED_OLDER = BlogPost(id="pub-0", title="Volume 13 review", status="published")


def _member() -> AuthState:
    return AuthState.resolved(READER)


def _admin() -> AuthState:
    return AuthState.resolved(ADMIN, is_admin=True)


def test_non_admin_visible_set_excludes_drafts():
    assert effective_visible_set([DRAFT, PUBLISHED], is_admin=False) == [PUBLISHED]


def test_admin_visible_set_includes_drafts():
    assert effective_visible_set([DRAFT, PUBLISHED], is_admin=True) == [DRAFT, PUBLISHED]


@pytest.mark.parametrize("intent", list(ViewerIntent))
def test_pending_auth_makes_no_content_decision(intent):
    view = resolve_page(AuthState.pending(), intent, [PUBLISHED], "pub-1")

    assert view.state is PageState.CHECKING
    assert view.decision is VisibilityDecision.AWAITING_AUTH
    assert view.visible == ()
    assert view.selected is None
    assert view.editing is False


def test_owner_route_redirects_anonymous_to_signin():
    view = resolve_page(AuthState.resolved(None), ViewerIntent.OWNER, [PUBLISHED])

    assert view.state is PageState.UNAUTHENTICATED
    assert view.decision is VisibilityDecision.REDIRECT_TO_SIGNIN


def test_owner_route_redirects_non_admin_home():
    view = resolve_page(_member(), ViewerIntent.OWNER, [PUBLISHED])

    assert view.state is PageState.UNAUTHORIZED
    assert view.decision is VisibilityDecision.REDIRECT_HOME


def test_reader_without_published_posts_sees_under_construction():
    view = resolve_page(AuthState.resolved(None), ViewerIntent.READER, [DRAFT])

    assert view.state is PageState.UNAUTHORIZED
    assert view.decision is VisibilityDecision.EMPTY_UNDER_CONSTRUCTION
    assert view.visible == ()


def test_reader_cannot_select_a_requested_draft():
    view = resolve_page(_member(), ViewerIntent.READER, [DRAFT, PUBLISHED], "draft-1")

    assert view.state is PageState.VIEWING
    assert view.decision is VisibilityDecision.RENDER_CONTENT
    assert view.selected is PUBLISHED
    assert DRAFT not in view.visible


def test_reader_gets_requested_published_post():
    view = resolve_page(
        _member(), ViewerIntent.READER, [PUBLISHED, PUBLISHED_OLDER], "pub-0"
    )

    assert view.selected_id == "pub-0"


def test_admin_views_and_edits_at_the_same_time():
    view = resolve_page(_admin(), ViewerIntent.OWNER, [DRAFT, PUBLISHED], "draft-1")

    assert view.state is PageState.VIEWING
    assert view.decision is VisibilityDecision.RENDER_EDITOR
    assert view.editing is True
    assert view.selected is DRAFT
    assert view.visible == (DRAFT, PUBLISHED)


def test_admin_with_no_posts_gets_empty_set_and_editor():
    view = resolve_page(_admin(), ViewerIntent.OWNER, [])

    assert view.state is PageState.EMPTY_SET
    assert view.decision is VisibilityDecision.RENDER_EDITOR
    assert view.editing is True
    assert view.selected is None


def test_admin_on_reader_route_sees_full_set():
    view = resolve_page(_admin(), ViewerIntent.READER, [DRAFT, PUBLISHED])

    assert view.visible == (DRAFT, PUBLISHED)
    assert view.editing is True


def test_selection_after_delete_falls_back_to_first_remaining():
    posts = [PUBLISHED, PUBLISHED_OLDER]
    assert select_item(posts, "pub-1") is PUBLISHED

    remaining = [post for post in posts if post.id != "pub-1"]
    assert select_item(remaining, "pub-1") is PUBLISHED_OLDER
    assert select_item([], "pub-1") is None
    assert resolve_page(_admin(), ViewerIntent.OWNER, [], "pub-1").state is PageState.EMPTY_SET


def test_auth_state_rejects_impossible_combinations():
    with pytest.raises(ValueError):
        AuthState(is_admin=True)

    anonymous_admin = AuthState.resolved(None, is_admin=True)
    assert anonymous_admin.is_admin is False
    assert anonymous_admin.role is ViewerRole.ANONYMOUS
    assert _member().role is ViewerRole.MEMBER
    assert _admin().role is ViewerRole.ADMIN


def test_load_errors_are_classified():
    assert classify_load_error(PermissionDeniedError("nope")) == LOAD_PERMISSION_MESSAGE
    assert classify_load_error(DocumentStoreError("down")) == LOAD_FAILURE_MESSAGE
    assert classify_load_error(RuntimeError("boom")) == LOAD_FAILURE_MESSAGE
