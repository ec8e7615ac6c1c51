"""Authentication related schemas."""

from pydantic import BaseModel, EmailStr


class Token(BaseModel):
    access_token: str
    token_type: str
    is_admin: bool


class IdentityRead(BaseModel):
    uid: str
    email: EmailStr
    display_name: str | None = None


class AuthStateRead(BaseModel):
    phase: str
    role: str
    is_admin: bool
    identity: IdentityRead | None = None


__all__ = ["AuthStateRead", "IdentityRead", "Token"]
