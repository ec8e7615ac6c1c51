"""Domain entities for blog posts and the editor form."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

POST_STATUS_DRAFT = "draft"
POST_STATUS_PUBLISHED = "published"


@dataclass
class BlogPost:
    """A review or update written in the blog workspace."""

    id: str
    title: str = ""
    summary: str = ""
    body: str = ""
    cover: str = ""
    tags: list[str] = field(default_factory=list)
    status: str = POST_STATUS_DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None

    @property
    def is_published(self) -> bool:
        return self.status == POST_STATUS_PUBLISHED


@dataclass
class PostForm:
    """Editable fields of a post as typed by the administrator."""

    id: str | None = None
    title: str = ""
    summary: str = ""
    body: str = ""
    cover: str = ""
    tags: str = ""
    status: str = POST_STATUS_DRAFT
    published_at: datetime | None = None

    @classmethod
    def from_post(cls, post: BlogPost) -> "PostForm":
        return cls(
            id=post.id,
            title=post.title or "",
            summary=post.summary or "",
            body=post.body or "",
            cover=post.cover or "",
            tags=tags_to_input(post.tags),
            status=post.status or POST_STATUS_DRAFT,
            published_at=post.published_at,
        )


def tags_to_input(tags: Sequence[str] | None) -> str:
    """Join ``tags`` into the comma separated text shown in the editor."""

    return ", ".join(tags) if tags else ""


def parse_tags(text: str | None) -> list[str]:
    """Split comma separated ``text`` into trimmed, non-empty tags."""

    return [tag.strip() for tag in (text or "").split(",") if tag.strip()]


__all__ = [
    "BlogPost",
    "POST_STATUS_DRAFT",
    "POST_STATUS_PUBLISHED",
    "PostForm",
    "parse_tags",
    "tags_to_input",
]
