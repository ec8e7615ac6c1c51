"""Persistence layer emulating a hosted document store on top of SQLAlchemy."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mangashelf.domain.errors import DocumentStoreError
from mangashelf.infrastructure.database import SessionLocal
from mangashelf.infrastructure.models import DocumentModel
from mangashelf.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


class _ServerTimestamp:
    """Placeholder replaced by the store's clock when a document is written."""

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Document:
    """Snapshot of a stored document."""

    collection: str
    id: str
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentRepository:
    """Provide get, query, add, set, update and delete over JSON documents."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Document store operation failed: %s", exc)
            raise DocumentStoreError("The document store is unavailable") from exc
        finally:
            session.close()

    def get(self, collection: str, doc_id: str) -> Document | None:
        """Return the document ``collection/doc_id`` when it exists."""

        with self._session() as session:
            model = self._get_model(session, collection, doc_id)
            return self._to_entity(model) if model else None

    def query(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Document]:
        """Return documents whose fields equal ``where``, sorted by ``order_by``.

        Documents missing the ordering field are placed last.
        """

        with self._session() as session:
            models = (
                session.query(DocumentModel)
                .filter(DocumentModel.collection == collection)
                .order_by(DocumentModel.id)
                .all()
            )
            documents = [self._to_entity(model) for model in models]

        if where:
            documents = [
                document
                for document in documents
                if all(document.data.get(key) == value for key, value in where.items())
            ]
        if order_by is None:
            return documents

        ordered = [d for d in documents if d.data.get(order_by) is not None]
        missing = [d for d in documents if d.data.get(order_by) is None]
        ordered.sort(key=lambda d: d.data[order_by], reverse=descending)
        return ordered + missing

    def add(self, collection: str, data: Mapping[str, Any]) -> Document:
        """Store ``data`` under a generated identifier."""

        return self.set(collection, uuid.uuid4().hex, data)

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Document:
        """Create or replace ``collection/doc_id`` with ``data``."""

        with self._session() as session:
            model = self._get_model(session, collection, doc_id)
            if model is None:
                model = DocumentModel(collection=collection, doc_id=doc_id)
            model.data = _to_storable(data)
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)

    def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Document:
        """Merge ``data`` into an existing document."""

        with self._session() as session:
            model = self._get_model(session, collection, doc_id)
            if model is None:
                raise DocumentStoreError(f"Document {collection}/{doc_id} not found")
            model.data = {**(model.data or {}), **_to_storable(data)}
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)

    def delete(self, collection: str, doc_id: str) -> bool:
        """Delete a document.

        Returns ``True`` when a document was removed and ``False`` when it did
        not exist.
        """

        with self._session() as session:
            model = self._get_model(session, collection, doc_id)
            if model is None:
                return False
            session.delete(model)
            session.commit()
            return True

    @staticmethod
    def _get_model(session: Session, collection: str, doc_id: str) -> DocumentModel | None:
        return (
            session.query(DocumentModel)
            .filter(DocumentModel.collection == collection)
            .filter(DocumentModel.doc_id == doc_id)
            .first()
        )

    @staticmethod
    def _to_entity(model: DocumentModel) -> Document:
        return Document(
            collection=model.collection,
            id=model.doc_id,
            data=dict(model.data or {}),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


def _to_storable(value: Any) -> Any:
    """Return a JSON compatible copy of ``value``.

    Datetimes become ISO strings and :data:`SERVER_TIMESTAMP` becomes the
    current time.
    """

    if value is SERVER_TIMESTAMP:
        return now_in_app_timezone().isoformat()
    if isinstance(value, datetime):
        return ensure_app_timezone(value).isoformat()
    if isinstance(value, Mapping):
        return {str(key): _to_storable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_storable(item) for item in value]
    return value


__all__ = ["Document", "DocumentRepository", "SERVER_TIMESTAMP"]
