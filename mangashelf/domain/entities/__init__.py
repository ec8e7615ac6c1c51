"""Domain entities exposed by the application."""

from .activity_entry import ActivityEntry
from .blog_post import (
    POST_STATUS_DRAFT,
    POST_STATUS_PUBLISHED,
    BlogPost,
    PostForm,
    parse_tags,
    tags_to_input,
)
from .identity import Identity, User

__all__ = [
    "ActivityEntry",
    "BlogPost",
    "Identity",
    "POST_STATUS_DRAFT",
    "POST_STATUS_PUBLISHED",
    "PostForm",
    "User",
    "parse_tags",
    "tags_to_input",
]
