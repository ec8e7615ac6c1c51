"""ORM models used by the application infrastructure."""

from .document import DocumentModel
from .user import UserModel

__all__ = [
    "DocumentModel",
    "UserModel",
]
