"""Use cases for recording library activity locally and on the webhook."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, Protocol

import anyio

from mangashelf.config import Settings
from mangashelf.domain.entities import ActivityEntry
from mangashelf.infrastructure.local_storage import FileKeyValueStore
from mangashelf.infrastructure.notifications import (
    ActivityNotifier,
    WebhookTargetResolver,
    build_detail_lines,
)
from mangashelf.infrastructure.repositories import DocumentRepository
from mangashelf.utils import now_in_app_timezone, parse_iso_datetime

logger = logging.getLogger(__name__)

ACTIVITY_STORAGE_KEY = "mangaLibraryActivityLog"
ACTIVITY_LOG_LIMIT = 100


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class ActivityLog:
    """Newest-first log of activity entries kept in a key-value store.

    At most ``limit`` entries are kept; the oldest are evicted. Storage
    problems are logged and never raised.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = ACTIVITY_STORAGE_KEY,
        limit: int = ACTIVITY_LOG_LIMIT,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = limit

    def load(self) -> list[ActivityEntry]:
        try:
            raw = self._store.get_item(self._key)
            if not raw:
                return []
            return _normalize_entries(json.loads(raw))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to read activity log: %s", exc)
            return []

    def persist(self, entries: Iterable[ActivityEntry]) -> None:
        try:
            payload = [_serialize_entry(entry) for entry in list(entries)[: self._limit]]
            self._store.set_item(self._key, json.dumps(payload, ensure_ascii=False))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to persist activity log: %s", exc)

    def append(self, entry: ActivityEntry) -> list[ActivityEntry]:
        """Prepend ``entry``, truncate and write back; return the new log."""

        entries = [entry, *self.load()][: self._limit]
        self.persist(entries)
        return entries


def _serialize_entry(entry: ActivityEntry) -> dict[str, Any]:
    return {
        "message": entry.message,
        "ts": entry.timestamp.isoformat(),
        "user": entry.user,
        "context": entry.context,
        "details": list(entry.details),
    }


def _normalize_entries(raw_entries: Any) -> list[ActivityEntry]:
    if not isinstance(raw_entries, list):
        return []

    entries: list[ActivityEntry] = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            continue
        message = raw.get("message")
        if not isinstance(message, str) or not message:
            continue
        details = raw.get("details")
        entries.append(
            ActivityEntry(
                message=message,
                timestamp=parse_iso_datetime(raw.get("ts")) or now_in_app_timezone(),
                user=str(raw.get("user") or raw.get("email") or ""),
                context=str(raw.get("context") or ""),
                details=tuple(str(d) for d in details) if isinstance(details, list) else (),
            )
        )
    return entries


class ActivityRecorder:
    """Single entry point used by the rest of the app to record an action."""

    def __init__(self, log: ActivityLog, notifier: ActivityNotifier) -> None:
        self.log = log
        self.notifier = notifier

    async def record(
        self,
        message: str,
        *,
        email: str | None = None,
        name: str | None = None,
        target_override: str | None = None,
        persist_locally: bool = True,
        context: str = "",
        list_name: str = "",
        action: str = "",
        details: Any = None,
    ) -> ActivityEntry | None:
        """Store the entry locally, then notify the webhook.

        Returns ``None`` without side effects for an empty message. A failed
        notification does not change the returned entry.
        """

        if not message or not message.strip():
            return None

        detail_lines = build_detail_lines(details)
        entry = ActivityEntry(
            message=message,
            timestamp=now_in_app_timezone(),
            user=(name or "").strip() or email or "",
            context=context,
            details=tuple(detail_lines),
        )
        if persist_locally:
            await anyio.to_thread.run_sync(self.log.append, entry)

        try:
            await self.notifier.notify(
                message,
                email=email,
                name=name,
                target=target_override,
                context=context,
                list_name=list_name,
                action=action,
                detail_lines=detail_lines,
            )
        except Exception:  # noqa: BLE001
            logger.warning("Activity notification raised unexpectedly", exc_info=True)
        return entry

    def recent(self) -> list[ActivityEntry]:
        return self.log.load()


def build_activity_recorder(
    settings: Settings, documents: DocumentRepository | None = None
) -> ActivityRecorder:
    """Wire the recorder used for the lifetime of the process."""

    resolver = WebhookTargetResolver(
        documents or DocumentRepository(), settings.activity_webhook_default
    )
    notifier = ActivityNotifier(resolver, timeout=settings.webhook_timeout_seconds)
    log = ActivityLog(FileKeyValueStore(settings.activity_log_path))
    return ActivityRecorder(log, notifier)


__all__ = [
    "ACTIVITY_LOG_LIMIT",
    "ACTIVITY_STORAGE_KEY",
    "ActivityLog",
    "ActivityRecorder",
    "build_activity_recorder",
]
