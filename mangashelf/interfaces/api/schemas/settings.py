"""Schemas for the admin settings endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class WebhookSettingsRead(BaseModel):
    yearly: str
    release: str
    activity: str

    model_config = ConfigDict(from_attributes=True)


class WebhookSettingsWrite(BaseModel):
    yearly: str = Field("", description="Yearly summary webhook; blank keeps the default")
    release: str = Field("", description="Release reminder webhook; blank keeps the default")
    activity: str = Field("", description="Activity log webhook; blank keeps the default")


__all__ = ["WebhookSettingsRead", "WebhookSettingsWrite"]
