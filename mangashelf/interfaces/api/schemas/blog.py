"""Schemas for the blog reader and admin workspace."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BlogPostRead(BaseModel):
    id: str
    title: str
    summary: str = ""
    body: str = ""
    cover: str = ""
    tags: list[str] = Field(default_factory=list)
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PostFormRead(BaseModel):
    id: str | None = None
    title: str = ""
    summary: str = ""
    body: str = ""
    cover: str = ""
    tags: str = ""
    status: str = "draft"
    published_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PostWrite(BaseModel):
    title: str = Field("", description="Post title, required")
    summary: str = Field("", description="One-liner shown in previews")
    body: str = Field("", description="Post body, paragraphs separated by blank lines")
    cover: str = Field("", description="Optional cover image URL")
    tags: str = Field("", description="Comma separated tags")
    publish: bool = Field(False, description="Publish instead of saving a draft")


class BlogPageRead(BaseModel):
    state: str
    decision: str
    editing: bool
    redirect_to: str | None = None
    status: str = ""
    posts: list[BlogPostRead] = Field(default_factory=list)
    selected: BlogPostRead | None = None
    form: PostFormRead | None = None


__all__ = ["BlogPageRead", "BlogPostRead", "PostFormRead", "PostWrite"]
