"""Blog workspace: loading, selecting and editing posts for one viewer."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

import anyio

from mangashelf.application.use_cases.activity import ActivityRecorder
from mangashelf.domain.entities import (
    POST_STATUS_DRAFT,
    POST_STATUS_PUBLISHED,
    BlogPost,
    PostForm,
    parse_tags,
)
from mangashelf.domain.errors import ValidationError
from mangashelf.domain.visibility import (
    AuthState,
    PageView,
    ViewerIntent,
    VisibilityDecision,
    classify_load_error,
    resolve_page,
)
from mangashelf.infrastructure.repositories import (
    SERVER_TIMESTAMP,
    BlogPostRepository,
    DocumentRepository,
)

logger = logging.getLogger(__name__)

FORM_REQUIRED_MESSAGE = "Title and body are required."
PUBLISHED_MESSAGE = "Post published and visible to everyone."
DRAFT_SAVED_MESSAGE = "Draft saved."
DELETED_MESSAGE = "Post deleted."
SAVE_FAILED_MESSAGE = "Could not save the post. Try again."
DELETE_FAILED_MESSAGE = "Could not delete the post."

_REDIRECTS = {
    VisibilityDecision.REDIRECT_TO_SIGNIN,
    VisibilityDecision.REDIRECT_HOME,
}


def validate_post_form(form: PostForm) -> None:
    if not form.title.strip() or not form.body.strip():
        raise ValidationError(FORM_REQUIRED_MESSAGE)


def build_post_payload(form: PostForm, status: str) -> dict[str, Any]:
    """Return the stored fields for ``form`` saved with ``status``.

    Publishing keeps an existing publication time; drafts clear it.
    """

    published_at = (
        (form.published_at or SERVER_TIMESTAMP)
        if status == POST_STATUS_PUBLISHED
        else None
    )
    return {
        "title": form.title.strip(),
        "summary": form.summary.strip(),
        "body": form.body.strip(),
        "cover": form.cover.strip(),
        "tags": parse_tags(form.tags),
        "status": status,
        "publishedAt": published_at,
        "updatedAt": SERVER_TIMESTAMP,
    }


class BlogWorkspace:
    """State of the blog page for a single viewer.

    ``load`` is deferred until auth resolves and skipped when the viewer is
    redirected away. Every mutation reloads the list before selecting again.
    ``close`` abandons an in-flight load and discards its result.
    """

    def __init__(
        self,
        documents: DocumentRepository,
        auth: AuthState,
        *,
        intent: ViewerIntent = ViewerIntent.OWNER,
        recorder: ActivityRecorder | None = None,
        requested_id: str | None = None,
    ) -> None:
        self._documents = documents
        self.auth = auth
        self.intent = intent
        self._recorder = recorder
        self.posts: list[BlogPost] = []
        self.form = PostForm()
        self.status = ""
        self.loading = False
        self.saving = False
        self.deleting = False
        self._selected_id = requested_id
        self._generation = 0
        self._load_scope: anyio.CancelScope | None = None
        self._closed = False

    @property
    def view(self) -> PageView[BlogPost]:
        return resolve_page(self.auth, self.intent, self.posts, self._selected_id)

    @property
    def closed(self) -> bool:
        return self._closed

    def update_auth(self, auth: AuthState) -> None:
        """Adopt a new auth state; callers reload afterwards."""

        self.auth = auth

    def _repository(self) -> BlogPostRepository:
        return BlogPostRepository(self._documents, self.auth)

    async def load(self, next_selection_id: str | None = None) -> PageView[BlogPost]:
        if self._closed or not self.auth.is_resolved:
            return self.view
        if resolve_page(self.auth, self.intent).decision in _REDIRECTS:
            return self.view

        self._generation += 1
        generation = self._generation
        self.loading = True
        self.status = ""
        list_posts = partial(self._repository().list, include_drafts=self.auth.is_admin)
        try:
            with anyio.CancelScope() as scope:
                self._load_scope = scope
                posts = await anyio.to_thread.run_sync(list_posts, abandon_on_cancel=True)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to load blog posts: %s", exc)
            if generation == self._generation and not self._closed:
                self.status = classify_load_error(exc)
            return self.view
        finally:
            if generation == self._generation:
                self.loading = False
                self._load_scope = None

        if scope.cancelled_caught or self._closed or generation != self._generation:
            logger.debug("Discarding blog posts loaded for a closed or stale view")
            return self.view

        self.posts = posts
        return self._apply_selection(next_selection_id or self._selected_id)

    def _apply_selection(self, post_id: str | None) -> PageView[BlogPost]:
        self._selected_id = post_id
        view = self.view
        self._selected_id = view.selected_id
        if self.auth.is_admin:
            self.form = PostForm.from_post(view.selected) if view.selected else PostForm()
        return view

    def select(self, post_id: str | None) -> PageView[BlogPost]:
        return self._apply_selection(post_id)

    def start_new(self) -> None:
        """Clear the editor for a new draft."""

        self.form = PostForm()
        self._selected_id = None

    async def save(self, form: PostForm, *, publish: bool = False) -> bool:
        if self._closed or not self.auth.is_admin or self.saving:
            return False
        try:
            validate_post_form(form)
        except ValidationError as exc:
            self.status = str(exc)
            return False

        status = POST_STATUS_PUBLISHED if publish else POST_STATUS_DRAFT
        payload = build_post_payload(form, status)
        repository = self._repository()

        self.saving = True
        self.status = ""
        try:
            if form.id:
                await anyio.to_thread.run_sync(repository.update, form.id, payload)
                target_id = form.id
            else:
                target_id = await anyio.to_thread.run_sync(
                    repository.create, {**payload, "createdAt": SERVER_TIMESTAMP}
                )
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to save blog post: %s", exc)
            self.status = SAVE_FAILED_MESSAGE
            return False
        finally:
            self.saving = False

        await self.load(target_id)
        if not self.status:
            self.status = PUBLISHED_MESSAGE if publish else DRAFT_SAVED_MESSAGE
        verb = "Published blog post" if publish else "Saved blog draft"
        await self._record(
            f'{verb} "{payload["title"]}"',
            action="publish" if publish else "save-draft",
            details={"post": target_id, "status": status},
        )
        return True

    async def delete(self, post_id: str | None) -> bool:
        if self._closed or not self.auth.is_admin or not post_id or self.deleting:
            return False

        repository = self._repository()
        self.deleting = True
        self.status = ""
        try:
            await anyio.to_thread.run_sync(repository.delete, post_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to delete post %s: %s", post_id, exc)
            self.status = DELETE_FAILED_MESSAGE
            return False
        finally:
            self.deleting = False

        await self.load()
        if not self.status:
            self.status = DELETED_MESSAGE
        await self._record("Deleted blog post", action="delete", details={"post": post_id})
        return True

    async def _record(self, message: str, **options: Any) -> None:
        if self._recorder is None:
            return
        identity = self.auth.identity
        await self._recorder.record(
            message,
            email=identity.email if identity else None,
            name=identity.display_name if identity else None,
            context="Blog",
            **options,
        )

    def close(self) -> None:
        """Tear the view down; pending loads are abandoned."""

        self._closed = True
        if self._load_scope is not None:
            self._load_scope.cancel()


__all__ = [
    "BlogWorkspace",
    "DELETED_MESSAGE",
    "DELETE_FAILED_MESSAGE",
    "DRAFT_SAVED_MESSAGE",
    "FORM_REQUIRED_MESSAGE",
    "PUBLISHED_MESSAGE",
    "SAVE_FAILED_MESSAGE",
    "build_post_payload",
    "validate_post_form",
]
