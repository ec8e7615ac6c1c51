"""Pydantic schemas for activity endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ActivityCreate(BaseModel):
    message: str = Field(..., description="Human readable description of the action")
    context: str = Field("", description="Area of the library where it happened")
    list_name: str = Field("", alias="list", description="List affected by the action")
    action: str = Field("", description="Short action keyword")
    details: Any = Field(None, description="Text, list or mapping with extra details")
    persist_locally: bool = Field(True, description="Keep the entry in the local log")
    webhook_override: str | None = Field(
        None, description="Deliver to this webhook instead of the configured one"
    )

    model_config = ConfigDict(populate_by_name=True)


class ActivityEntryRead(BaseModel):
    message: str
    timestamp: datetime
    user: str = ""
    context: str = ""
    details: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


__all__ = ["ActivityCreate", "ActivityEntryRead"]
