"""Persistence layer for user accounts."""

from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from mangashelf.domain.entities import User
from mangashelf.infrastructure.models import UserModel


class UserRepository:
    """Provide lookup and creation of :class:`User` accounts."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_uid(self, uid: str) -> User | None:
        model = self.session.query(UserModel).filter_by(uid=uid).first()
        return self._to_entity(model) if model else None

    def list(self) -> list[User]:
        models = self.session.query(UserModel).order_by(UserModel.email).all()
        return [self._to_entity(model) for model in models]

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(func.lower(UserModel.email) == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            uid=user.uid,
            email=user.email.strip().lower(),
            display_name=user.display_name,
            password=user.password,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            uid=model.uid,
            email=model.email,
            display_name=model.display_name,
            password=model.password,
            is_active=model.is_active,
        )


__all__ = ["UserRepository"]
