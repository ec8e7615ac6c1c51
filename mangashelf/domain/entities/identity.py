"""Domain entities for authenticated principals."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Principal reported by the authentication provider."""

    uid: str
    email: str
    display_name: str | None = None

    @property
    def label(self) -> str:
        """Return the display name, falling back to the email address."""

        return (self.display_name or "").strip() or self.email


@dataclass
class User:
    """Stored account able to sign in with email and password."""

    id: int | None
    uid: str
    email: str
    display_name: str | None
    password: str
    is_active: bool = True

    def to_identity(self) -> Identity:
        return Identity(uid=self.uid, email=self.email, display_name=self.display_name)


__all__ = ["Identity", "User"]
