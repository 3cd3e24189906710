"""Database models for bookmarks.

Bookmarks are partitioned by member. A secondary index on post_id lets a
post deletion find and remove every bookmark of that post.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.utils.dates import ensure_utc_aware


BOOKMARK_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.bookmarks (
    member_id UUID,
    post_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((member_id), post_id)
)
"""

BOOKMARK_POST_INDEX_CQL = """
CREATE INDEX IF NOT EXISTS bookmarks_post_idx
ON {keyspace}.bookmarks (post_id)
"""

BOOKMARKS_TABLES_CQL = [
    BOOKMARK_TABLE_CQL,
    BOOKMARK_POST_INDEX_CQL,
]


@dataclass
class Bookmark:
    member_id: UUID
    post_id: UUID
    created_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Bookmark":
        return cls(
            member_id=row.member_id,
            post_id=row.post_id,
            created_at=ensure_utc_aware(row.created_at),
        )


def create_bookmark(member_id: UUID, post_id: UUID) -> Bookmark:
    return Bookmark(member_id=member_id, post_id=post_id, created_at=datetime.now(UTC))
