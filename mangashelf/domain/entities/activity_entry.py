"""Domain entity describing a recorded library activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ActivityEntry:
    """Human readable description of an action taken in the library."""

    message: str
    timestamp: datetime
    user: str = ""
    context: str = ""
    details: tuple[str, ...] = field(default_factory=tuple)


__all__ = ["ActivityEntry"]
