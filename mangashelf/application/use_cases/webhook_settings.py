"""Use cases for reading and editing the ``settings/webhooks`` document."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from mangashelf.config import Settings
from mangashelf.infrastructure.notifications.webhook_config import (
    SETTINGS_COLLECTION,
    WEBHOOKS_DOCUMENT_ID,
)
from mangashelf.infrastructure.repositories import DocumentRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookTargets:
    """Webhook URLs used by the yearly summary, release reminders and activity log."""

    yearly: str
    release: str
    activity: str

    @classmethod
    def defaults(cls, settings: Settings) -> "WebhookTargets":
        return cls(
            yearly=settings.yearly_webhook_default,
            release=settings.release_webhook_default,
            activity=settings.activity_webhook_default,
        )

    def filled_from(self, fallback: "WebhookTargets") -> "WebhookTargets":
        """Return a copy where blank targets take the value from ``fallback``."""

        return WebhookTargets(
            yearly=(self.yearly or "").strip() or fallback.yearly,
            release=(self.release or "").strip() or fallback.release,
            activity=(self.activity or "").strip() or fallback.activity,
        )


def load_webhook_targets(documents: DocumentRepository, settings: Settings) -> WebhookTargets:
    """Return the stored targets, creating the document with defaults when missing.

    Missing or blank fields of an existing document read as their defaults
    without rewriting the document.
    """

    defaults = WebhookTargets.defaults(settings)
    document = documents.get(SETTINGS_COLLECTION, WEBHOOKS_DOCUMENT_ID)
    if document is None:
        documents.set(SETTINGS_COLLECTION, WEBHOOKS_DOCUMENT_ID, asdict(defaults))
        logger.info("Created %s/%s with default targets", SETTINGS_COLLECTION, WEBHOOKS_DOCUMENT_ID)
        return defaults

    data = document.data
    stored = WebhookTargets(
        yearly=_as_text(data.get("yearly")),
        release=_as_text(data.get("release")),
        activity=_as_text(data.get("activity")),
    )
    return stored.filled_from(defaults)


def save_webhook_targets(
    documents: DocumentRepository, settings: Settings, targets: WebhookTargets
) -> WebhookTargets:
    """Replace the stored targets; blank values are saved as their defaults."""

    saved = targets.filled_from(WebhookTargets.defaults(settings))
    documents.set(SETTINGS_COLLECTION, WEBHOOKS_DOCUMENT_ID, asdict(saved))
    return saved


def _as_text(value: object) -> str:
    return value if isinstance(value, str) else ""


__all__ = ["WebhookTargets", "load_webhook_targets", "save_webhook_targets"]
