"""Exceptions shared across the application layers."""


class DocumentStoreError(Exception):
    """Raised when the document store cannot complete an operation."""


class PermissionDeniedError(DocumentStoreError):
    """Raised when the caller is not allowed to read or write a document."""


class ValidationError(ValueError):
    """Raised when user submitted data is missing a required field."""


class AuthenticationError(Exception):
    """Raised when sign-in fails; ``str(exc)`` is safe to show to the user."""


__all__ = [
    "AuthenticationError",
    "DocumentStoreError",
    "PermissionDeniedError",
    "ValidationError",
]
