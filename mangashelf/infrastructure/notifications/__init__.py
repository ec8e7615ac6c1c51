"""Outbound activity notification helpers for the infrastructure layer."""

from .webhook import (
    ActivityNotifier,
    build_activity_message,
    build_detail_lines,
    identity_label,
)
from .webhook_config import WebhookTargetResolver

__all__ = [
    "ActivityNotifier",
    "WebhookTargetResolver",
    "build_activity_message",
    "build_detail_lines",
    "identity_label",
]
