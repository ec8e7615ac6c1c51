import json
from datetime import datetime, timedelta, timezone

from mangashelf.application.use_cases.activity import (
    ACTIVITY_LOG_LIMIT,
    ACTIVITY_STORAGE_KEY,
    ActivityLog,
)
from mangashelf.domain.entities import ActivityEntry
from mangashelf.infrastructure.local_storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _entry(index: int) -> ActivityEntry:
    return ActivityEntry(
        message=f"Added volume {index}",
        timestamp=BASE_TIME + timedelta(minutes=index),
        user="reader@example.com",
    )


class _BrokenStore:
    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("quota exceeded")


def test_log_keeps_only_the_newest_entries():
    log = ActivityLog(InMemoryKeyValueStore())

    for index in range(ACTIVITY_LOG_LIMIT + 5):
        log.append(_entry(index))

    entries = log.load()
    assert len(entries) == ACTIVITY_LOG_LIMIT
    assert entries[0].message == f"Added volume {ACTIVITY_LOG_LIMIT + 4}"
    assert entries[-1].message == "Added volume 5"


def test_persist_then_load_returns_the_same_entries():
    store = InMemoryKeyValueStore()
    log = ActivityLog(store)
    entries = [
        ActivityEntry(
            message="Moved Berserk to Finished",
            timestamp=BASE_TIME,
            user="Shelf Admin",
            context="Library",
            details=("from: Reading", "to: Finished"),
        ),
        _entry(1),
    ]

    log.persist(entries)

    assert log.load() == entries
    stored = json.loads(store.get_item(ACTIVITY_STORAGE_KEY))
    assert stored[0]["ts"] == BASE_TIME.isoformat()
    assert stored[0]["details"] == ["from: Reading", "to: Finished"]


def test_persist_truncates_to_limit():
    log = ActivityLog(InMemoryKeyValueStore(), limit=3)

    log.persist([_entry(index) for index in range(10)])

    assert [entry.message for entry in log.load()] == [
        "Added volume 0",
        "Added volume 1",
        "Added volume 2",
    ]


def test_load_skips_malformed_entries():
    store = InMemoryKeyValueStore()
    store.set_item(
        ACTIVITY_STORAGE_KEY,
        json.dumps(
            [
                {"message": "Kept", "ts": "2024-05-01T10:00:00Z", "user": "a@example.com"},
                {"message": "", "ts": "2024-05-01T10:00:00Z"},
                {"ts": "2024-05-01T10:00:00Z"},
                "not an entry",
                {"message": "No timestamp", "ts": "yesterday"},
            ]
        ),
    )

    entries = ActivityLog(store).load()

    assert [entry.message for entry in entries] == ["Kept", "No timestamp"]
    assert entries[0].timestamp == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert entries[0].user == "a@example.com"
    assert entries[1].timestamp is not None


def test_load_returns_empty_for_corrupt_or_foreign_data():
    store = InMemoryKeyValueStore()
    log = ActivityLog(store)

    assert log.load() == []

    store.set_item(ACTIVITY_STORAGE_KEY, "{not json")
    assert log.load() == []

    store.set_item(ACTIVITY_STORAGE_KEY, json.dumps({"message": "object"}))
    assert log.load() == []


def test_storage_failures_are_not_raised(caplog):
    log = ActivityLog(_BrokenStore())

    assert log.load() == []
    entries = log.append(_entry(1))

    assert entries == [_entry(1)]
    assert "Failed to persist activity log" in caplog.text


def test_file_store_survives_reopening(tmp_path):
    path = tmp_path / "nested" / "activity.json"
    ActivityLog(FileKeyValueStore(path)).append(_entry(1))

    reopened = ActivityLog(FileKeyValueStore(path))

    assert reopened.load() == [_entry(1)]
    assert list(path.parent.glob("*.tmp")) == []


def test_file_store_overwrites_corrupt_file(tmp_path):
    path = tmp_path / "activity.json"
    path.write_text("[1, 2", encoding="utf-8")
    store = FileKeyValueStore(path)
    log = ActivityLog(store)

    assert log.load() == []

    log.append(_entry(2))
    assert log.load() == [_entry(2)]

    store.remove_item(ACTIVITY_STORAGE_KEY)
    assert store.get_item(ACTIVITY_STORAGE_KEY) is None
