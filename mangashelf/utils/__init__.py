"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    format_local_timestamp,
    get_app_timezone,
    now_in_app_timezone,
    parse_iso_datetime,
    timezone_label,
)

__all__ = [
    "ensure_app_timezone",
    "format_local_timestamp",
    "get_app_timezone",
    "now_in_app_timezone",
    "parse_iso_datetime",
    "timezone_label",
]
