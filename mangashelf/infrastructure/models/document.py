"""SQLAlchemy model emulating a document store record."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.types import JSON

from mangashelf.infrastructure.database import Base
from mangashelf.utils import now_in_app_timezone


class DocumentModel(Base):
    """A JSON document addressed by ``collection`` and ``doc_id``."""

    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_document_collection_doc_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    collection = Column(String(120), nullable=False, index=True)
    doc_id = Column(String(120), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=now_in_app_timezone
    )
    updated_at = Column(
        DateTime(timezone=True), nullable=True, onupdate=now_in_app_timezone
    )


__all__ = ["DocumentModel"]
