"""Pydantic models for webhook payload structures."""

from typing import List

from pydantic import BaseModel, ConfigDict


class AuthorData(BaseModel):
    """Post author as sent in the payload."""

    model_config = ConfigDict(extra="forbid")

    name: str
    url: str


class DateData(BaseModel):
    """Publish date in storage and display formats."""

    model_config = ConfigDict(extra="forbid")

    raw: str
    formatted: str


class WebhookPayload(BaseModel):
    """Body POSTed to the webhook URL when a post is published."""

    model_config = ConfigDict(extra="forbid")

    id: int
    title: str
    url: str
    content: str
    excerpt: str
    tags: List[str]
    categories: List[str]
    author: AuthorData
    date: DateData

    def to_json(self) -> str:
        """Serialize with field order fixed as declared."""
        return self.model_dump_json()


class AjaxResult(BaseModel):
    """Admin action outcome: a success flag and a human-readable message."""

    success: bool
    data: str
