from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from mangashelf.domain.errors import DocumentStoreError
from mangashelf.infrastructure.repositories import SERVER_TIMESTAMP, DocumentRepository


def test_set_get_and_merge_update(documents):
    documents.set("settings", "webhooks", {"activity": "https://hooks.example.test/a"})
    documents.update("settings", "webhooks", {"other": 1})

    document = documents.get("settings", "webhooks")

    assert document.data == {"activity": "https://hooks.example.test/a", "other": 1}
    assert documents.get("settings", "missing") is None


def test_update_missing_document_raises(documents):
    with pytest.raises(DocumentStoreError):
        documents.update("blogPosts", "missing", {"title": "x"})


def test_add_generates_ids_and_stores_timestamps(documents):
    added = documents.add(
        "blogPosts",
        {"createdAt": SERVER_TIMESTAMP, "publishedAt": datetime(2024, 1, 1, tzinfo=timezone.utc)},
    )

    assert len(added.id) == 32
    assert isinstance(added.data["createdAt"], str)
    assert added.data["publishedAt"].startswith("2024-01-01T00:00:00")


def test_query_filters_and_orders_with_missing_last(documents):
    documents.set("blogPosts", "a", {"status": "published", "publishedAt": "2024-01-01"})
    documents.set("blogPosts", "b", {"status": "published", "publishedAt": "2024-03-01"})
    documents.set("blogPosts", "c", {"status": "published"})
    documents.set("blogPosts", "d", {"status": "draft", "publishedAt": "2024-05-01"})

    result = documents.query(
        "blogPosts", where={"status": "published"}, order_by="publishedAt", descending=True
    )

    assert [document.id for document in result] == ["b", "a", "c"]


def test_delete_reports_whether_a_document_existed(documents):
    documents.set("admins", "uid", {"admin": True})

    assert documents.delete("admins", "uid") is True
    assert documents.delete("admins", "uid") is False


def test_store_failures_become_document_store_errors():
    class _BrokenSession:
        def query(self, *args):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        def rollback(self):
            pass

        def close(self):
            pass

    repository = DocumentRepository(session_factory=_BrokenSession)

    with pytest.raises(DocumentStoreError):
        repository.get("settings", "webhooks")
