"""Repository implementations for infrastructure layer."""

from .blog_post_repository import BLOG_POSTS_COLLECTION, BlogPostRepository
from .document_repository import SERVER_TIMESTAMP, Document, DocumentRepository
from .role_repository import RoleRepository
from .user_repository import UserRepository

__all__ = [
    "BLOG_POSTS_COLLECTION",
    "BlogPostRepository",
    "Document",
    "DocumentRepository",
    "RoleRepository",
    "SERVER_TIMESTAMP",
    "UserRepository",
]
