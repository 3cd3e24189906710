"""Database models for notices.

Notices are announcements written by administrators. They are few, so the
listing scans the main table and sorts newest first.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.utils.dates import ensure_utc_aware


NOTICE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.notices (
    notice_id UUID PRIMARY KEY,
    member_id UUID,
    title TEXT,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

NOTICES_TABLES_CQL = [NOTICE_TABLE_CQL]


@dataclass
class Notice:
    """Announcement written by an administrator."""

    notice_id: UUID
    member_id: UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Notice":
        created_at = ensure_utc_aware(row.created_at)
        return cls(
            notice_id=row.notice_id,
            member_id=row.member_id,
            title=row.title,
            content=row.content,
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )


def create_notice(member_id: UUID, title: str, content: str) -> Notice:
    now = datetime.now(UTC)
    return Notice(
        notice_id=uuid4(),
        member_id=member_id,
        title=title,
        content=content,
        created_at=now,
        updated_at=now,
    )
