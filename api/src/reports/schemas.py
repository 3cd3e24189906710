"""Pydantic schemas for reports."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import Report, ReportCategory, ReportTarget


class ReportRequest(BaseModel):
    """Request to report a post or a comment."""

    category: ReportCategory
    content: str = Field(..., min_length=1, max_length=1000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Content cannot be empty"
            raise ValueError(msg)
        return v


class ReportResponse(BaseModel):
    id: UUID
    target_type: ReportTarget
    target_id: UUID
    post_id: UUID
    category: ReportCategory
    content: str
    created_at: datetime

    @classmethod
    def from_report(cls, report: Report) -> "ReportResponse":
        return cls(
            id=report.report_id,
            target_type=report.target_type,
            target_id=report.target_id,
            post_id=report.post_id,
            category=report.category,
            content=report.content,
            created_at=report.created_at,
        )
