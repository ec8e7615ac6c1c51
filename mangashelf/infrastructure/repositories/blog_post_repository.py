"""Persistence layer for blog posts with the store's access rules applied."""

from __future__ import annotations

from typing import Any, Mapping

from mangashelf.domain.entities import POST_STATUS_DRAFT, POST_STATUS_PUBLISHED, BlogPost
from mangashelf.domain.errors import PermissionDeniedError
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.repositories.document_repository import (
    Document,
    DocumentRepository,
)
from mangashelf.utils import parse_iso_datetime

BLOG_POSTS_COLLECTION = "blogPosts"


class BlogPostRepository:
    """Read and write ``blogPosts`` documents on behalf of ``auth``.

    Only admins may read drafts or write; anything else raises
    :class:`PermissionDeniedError`, like the hosted store's security rules.
    """

    def __init__(self, documents: DocumentRepository, auth: AuthState) -> None:
        self.documents = documents
        self.auth = auth

    def list(self, *, include_drafts: bool) -> list[BlogPost]:
        """Return posts newest first.

        Drafts are included (ordered by ``updatedAt``) only for admins; the
        published listing is ordered by ``publishedAt``.
        """

        if include_drafts:
            self._require_admin("read draft posts")
            documents = self.documents.query(
                BLOG_POSTS_COLLECTION, order_by="updatedAt", descending=True
            )
        else:
            documents = self.documents.query(
                BLOG_POSTS_COLLECTION,
                where={"status": POST_STATUS_PUBLISHED},
                order_by="publishedAt",
                descending=True,
            )
        return [self._to_entity(document) for document in documents]

    def get(self, post_id: str) -> BlogPost | None:
        document = self.documents.get(BLOG_POSTS_COLLECTION, post_id)
        if document is None:
            return None
        post = self._to_entity(document)
        if not post.is_published and not self.auth.is_admin:
            raise PermissionDeniedError("Drafts are only visible to admins")
        return post

    def create(self, payload: Mapping[str, Any]) -> str:
        self._require_admin("create posts")
        return self.documents.add(BLOG_POSTS_COLLECTION, payload).id

    def update(self, post_id: str, payload: Mapping[str, Any]) -> None:
        self._require_admin("update posts")
        self.documents.update(BLOG_POSTS_COLLECTION, post_id, payload)

    def delete(self, post_id: str) -> bool:
        self._require_admin("delete posts")
        return self.documents.delete(BLOG_POSTS_COLLECTION, post_id)

    def _require_admin(self, action: str) -> None:
        if not self.auth.is_admin:
            raise PermissionDeniedError(f"Only admins may {action}")

    @staticmethod
    def _to_entity(document: Document) -> BlogPost:
        data = document.data
        tags = data.get("tags")
        return BlogPost(
            id=document.id,
            title=data.get("title") or "",
            summary=data.get("summary") or "",
            body=data.get("body") or "",
            cover=data.get("cover") or "",
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            status=data.get("status") or POST_STATUS_DRAFT,
            created_at=parse_iso_datetime(data.get("createdAt")),
            updated_at=parse_iso_datetime(data.get("updatedAt")),
            published_at=parse_iso_datetime(data.get("publishedAt")),
        )


__all__ = ["BLOG_POSTS_COLLECTION", "BlogPostRepository"]
