"""Best effort delivery of activity messages to a chat webhook."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

import httpx

from mangashelf.utils import format_local_timestamp, now_in_app_timezone, timezone_label

from .webhook_config import WebhookTargetResolver

logger = logging.getLogger(__name__)

ANONYMOUS_LABEL = "anonymous"
MISSING_VALUE = "—"
_SEPARATOR = "   •   "


def identity_label(name: str | None = None, email: str | None = None) -> str:
    """Return the display name, else the email, else ``anonymous``."""

    return (name or "").strip() or (email or "").strip() or ANONYMOUS_LABEL


def stringify_detail_value(value: Any) -> str:
    if value is None:
        return MISSING_VALUE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def build_detail_lines(details: Any) -> list[str]:
    """Normalize ``details`` (text, sequence or mapping) into display lines."""

    if not details:
        return []
    if isinstance(details, str):
        return [details]
    if isinstance(details, Mapping):
        return [f"{key}: {stringify_detail_value(value)}" for key, value in details.items()]
    if isinstance(details, Sequence):
        return [stringify_detail_value(item) for item in details]
    return []


def build_activity_message(
    message: str,
    *,
    label: str,
    timestamp: datetime,
    context: str = "",
    list_name: str = "",
    action: str = "",
    detail_lines: Sequence[str] = (),
) -> str:
    """Format the webhook text.

    The first three lines are always the action, the identity label and the
    local timestamp; metadata and details follow only when provided.
    """

    lines = [
        f"\U0001F4DD {message}",
        f"\U0001F464 {label}",
        f"\U0001F552 {format_local_timestamp(timestamp)} ({timezone_label()})",
    ]
    meta = []
    if context:
        meta.append(f"Context: {context}")
    if list_name:
        meta.append(f"List: {list_name}")
    if action:
        meta.append(f"Action: {action}")
    if meta:
        lines.append(_SEPARATOR.join(meta))
    if detail_lines:
        lines.append("\U0001F50D Details:")
        lines.extend(f"• {line}" for line in detail_lines)
    return "\n".join(lines)


class ActivityNotifier:
    """Post formatted activity messages to the resolved webhook.

    Failures are logged and never raised; nothing is retried.
    """

    def __init__(
        self,
        resolver: WebhookTargetResolver,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._resolver = resolver
        self._client = client
        self._timeout = timeout

    async def notify(
        self,
        message: str,
        *,
        email: str | None = None,
        name: str | None = None,
        target: str | None = None,
        context: str = "",
        list_name: str = "",
        action: str = "",
        detail_lines: Sequence[str] = (),
    ) -> bool:
        """Deliver ``message``; return ``True`` only when the webhook accepted it."""

        if not message:
            return False
        try:
            url = target or await self._resolver.resolve()
            if not url:
                return False
            content = build_activity_message(
                message,
                label=identity_label(name, email),
                timestamp=now_in_app_timezone(),
                context=context,
                list_name=list_name,
                action=action,
                detail_lines=detail_lines,
            )
            await self._post(url, {"content": content})
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Activity webhook responded with status %s", exc.response.status_code
            )
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning("Activity webhook failed: %s", exc)
            return False
        return True

    async def _post(self, url: str, payload: dict[str, str]) -> None:
        if self._client is not None:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


__all__ = [
    "ANONYMOUS_LABEL",
    "ActivityNotifier",
    "build_activity_message",
    "build_detail_lines",
    "identity_label",
    "stringify_detail_value",
]
