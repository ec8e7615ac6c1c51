"""Admin endpoints for the webhook targets stored in ``settings/webhooks``."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mangashelf.application.use_cases.webhook_settings import (
    WebhookTargets,
    load_webhook_targets,
    save_webhook_targets,
)
from mangashelf.config import Settings, get_settings
from mangashelf.domain.errors import DocumentStoreError
from mangashelf.domain.visibility import AuthState
from mangashelf.infrastructure.repositories import DocumentRepository
from mangashelf.interfaces.api.dependencies import get_documents, require_admin
from mangashelf.interfaces.api.schemas import WebhookSettingsRead, WebhookSettingsWrite

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger(__name__)


def _store_unavailable(exc: DocumentStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/webhooks", response_model=WebhookSettingsRead)
def read_webhooks(
    documents: DocumentRepository = Depends(get_documents),
    settings: Settings = Depends(get_settings),
    _: AuthState = Depends(require_admin),
) -> WebhookSettingsRead:
    """Return the webhook targets, storing the defaults on first use."""

    try:
        targets = load_webhook_targets(documents, settings)
    except DocumentStoreError as exc:
        logger.error("Failed to load webhook settings: %s", exc)
        raise _store_unavailable(exc) from exc
    return WebhookSettingsRead.model_validate(targets)


@router.put("/webhooks", response_model=WebhookSettingsRead)
def update_webhooks(
    payload: WebhookSettingsWrite,
    documents: DocumentRepository = Depends(get_documents),
    settings: Settings = Depends(get_settings),
    auth: AuthState = Depends(require_admin),
) -> WebhookSettingsRead:
    """Replace the webhook targets; blank fields fall back to the defaults."""

    targets = WebhookTargets(
        yearly=payload.yearly, release=payload.release, activity=payload.activity
    )
    try:
        saved = save_webhook_targets(documents, settings, targets)
    except DocumentStoreError as exc:
        logger.error("Failed to save webhook settings: %s", exc)
        raise _store_unavailable(exc) from exc
    logger.info("Webhook settings updated by %s", auth.identity.uid)
    return WebhookSettingsRead.model_validate(saved)


__all__ = ["router"]
