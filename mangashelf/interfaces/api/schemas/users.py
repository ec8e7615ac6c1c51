"""Schemas describing accounts and their roles."""

from pydantic import BaseModel


class UserRoleRead(BaseModel):
    uid: str
    email: str
    display_name: str | None = None
    is_active: bool
    role: str


__all__ = ["UserRoleRead"]
