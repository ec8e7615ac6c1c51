"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from mangashelf.infrastructure.database import Base


class UserModel(Base):
    """Database representation of an account able to sign in."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(120), nullable=False, unique=True, index=True)
    display_name = Column(String(80), nullable=True)
    password = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
