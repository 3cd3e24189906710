"""Database models for content reports.

A report targets either a post or a comment. Reports are kept for
moderation and survive deletion of the reported content.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class ReportCategory(str, Enum):
    """Reasons for reporting content."""

    INSULT = "INSULT"
    SEXUAL_CONTENT = "SEXUAL_CONTENT"
    SPAM = "SPAM"
    ADVERTISEMENT = "ADVERTISEMENT"
    PERSONAL_INFORMATION = "PERSONAL_INFORMATION"
    OTHER = "OTHER"


class ReportTarget(str, Enum):
    POST = "POST"
    COMMENT = "COMMENT"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

REPORT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.reports (
    report_id UUID PRIMARY KEY,
    target_type TEXT,
    target_id UUID,
    post_id UUID,
    reporter_id UUID,
    category TEXT,
    content TEXT,
    created_at TIMESTAMP
)
"""

# Moderation queue per reported item
REPORTS_BY_TARGET_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.reports_by_target (
    target_type TEXT,
    target_id UUID,
    created_at TIMESTAMP,
    report_id UUID,
    reporter_id UUID,
    category TEXT,
    content TEXT,
    PRIMARY KEY ((target_type, target_id), created_at, report_id)
) WITH CLUSTERING ORDER BY (created_at DESC, report_id ASC)
"""

REPORTS_TABLES_CQL = [
    REPORT_TABLE_CQL,
    REPORTS_BY_TARGET_TABLE_CQL,
]


@dataclass
class Report:
    """Report of a post or a comment."""

    report_id: UUID
    target_type: ReportTarget
    target_id: UUID
    post_id: UUID
    reporter_id: UUID
    category: ReportCategory
    content: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Report":
        return cls(
            report_id=row.report_id,
            target_type=ReportTarget(row.target_type),
            target_id=row.target_id,
            post_id=row.post_id,
            reporter_id=row.reporter_id,
            category=ReportCategory(row.category),
            content=row.content or "",
            created_at=row.created_at,
        )


def create_report(
    target_type: ReportTarget,
    target_id: UUID,
    post_id: UUID,
    reporter_id: UUID,
    category: ReportCategory,
    content: str,
) -> Report:
    """Create a new report."""
    return Report(
        report_id=uuid4(),
        target_type=target_type,
        target_id=target_id,
        post_id=post_id,
        reporter_id=reporter_id,
        category=category,
        content=content,
        created_at=datetime.now(UTC),
    )
