"""Pydantic schemas for notices."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import Notice


class NoticeRequest(BaseModel):
    """Notice create or update request."""

    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("title", "content")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Field cannot be empty"
            raise ValueError(msg)
        return v


class NoticeResponse(BaseModel):
    id: UUID
    title: str
    content: str
    author_id: UUID
    created_at: datetime
    last_modified_at: datetime

    @classmethod
    def from_notice(cls, notice: Notice) -> "NoticeResponse":
        return cls(
            id=notice.notice_id,
            title=notice.title,
            content=notice.content,
            author_id=notice.member_id,
            created_at=notice.created_at,
            last_modified_at=notice.updated_at,
        )
