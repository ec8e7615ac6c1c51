"""Resolution of the webhook that receives activity notifications."""

from __future__ import annotations

import logging
from typing import Protocol

import anyio

from mangashelf.infrastructure.repositories.document_repository import Document

logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = "settings"
WEBHOOKS_DOCUMENT_ID = "webhooks"
ACTIVITY_WEBHOOK_FIELD = "activity"


class SupportsDocumentGet(Protocol):
    def get(self, collection: str, doc_id: str) -> Document | None: ...


class WebhookTargetResolver:
    """Look up the activity webhook once and keep it for the resolver's lifetime.

    The target comes from ``settings/webhooks`` (field ``activity``). When the
    document is missing, has no target, or cannot be read, ``default`` is
    cached instead and the lookup is not retried.
    """

    def __init__(self, documents: SupportsDocumentGet, default: str) -> None:
        self._documents = documents
        self._default = default
        self._cached: str | None = None

    @property
    def cached(self) -> str | None:
        return self._cached

    async def resolve(self) -> str:
        if self._cached:
            return self._cached

        target = self._default
        try:
            document = await anyio.to_thread.run_sync(
                self._documents.get, SETTINGS_COLLECTION, WEBHOOKS_DOCUMENT_ID
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to load activity webhook: %s", exc)
        else:
            if document is not None:
                configured = document.data.get(ACTIVITY_WEBHOOK_FIELD)
                if isinstance(configured, str) and configured.strip():
                    target = configured.strip()

        self._cached = target
        return target


__all__ = [
    "ACTIVITY_WEBHOOK_FIELD",
    "SETTINGS_COLLECTION",
    "WEBHOOKS_DOCUMENT_ID",
    "WebhookTargetResolver",
]
