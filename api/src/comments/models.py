"""Database models for threaded comments.

Cassandra table definitions for:
- Comments: main table keyed by comment_id (parent lookups for depth walks)
- Comments by post: every comment of a post, for counts and best comments
- Comments by parent: one partition per (post, parent) for paginated roots
  and reply lists
- Comments by member: the author's own comments, newest first
- Comment likes: one row per (comment, member)

Architecture: adjacency list. ``parent_id`` references the parent comment
and is ``None`` for root comments. Lookup tables cannot hold a null key, so
root comments are stored under ``ROOT_PARENT_ID`` in comments_by_parent.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.utils.dates import ensure_utc_aware


# Partition key standing in for "no parent" in comments_by_parent
ROOT_PARENT_ID = UUID(int=0)


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    comment_id UUID PRIMARY KEY,
    post_id UUID,
    parent_id UUID,
    member_id UUID,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

COMMENTS_BY_POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_post (
    post_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    parent_id UUID,
    member_id UUID,
    content TEXT,
    updated_at TIMESTAMP,
    PRIMARY KEY ((post_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at DESC, comment_id ASC)
"""

COMMENTS_BY_PARENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_parent (
    post_id UUID,
    parent_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    member_id UUID,
    content TEXT,
    updated_at TIMESTAMP,
    PRIMARY KEY ((post_id, parent_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at ASC, comment_id ASC)
"""

COMMENTS_BY_MEMBER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments_by_member (
    member_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    post_id UUID,
    parent_id UUID,
    content TEXT,
    updated_at TIMESTAMP,
    PRIMARY KEY ((member_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at DESC, comment_id ASC)
"""

COMMENT_LIKES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comment_likes (
    comment_id UUID,
    member_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((comment_id), member_id)
)
"""

COMMENTS_TABLES_CQL = [
    COMMENT_TABLE_CQL,
    COMMENTS_BY_POST_TABLE_CQL,
    COMMENTS_BY_PARENT_TABLE_CQL,
    COMMENTS_BY_MEMBER_TABLE_CQL,
    COMMENT_LIKES_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Comment or reply on a post."""

    comment_id: UUID
    post_id: UUID
    parent_id: UUID | None
    member_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Comment":
        """Create Comment from a row of any of the comment tables."""
        parent_id = row.parent_id
        created_at = ensure_utc_aware(row.created_at)
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            parent_id=None if parent_id in (None, ROOT_PARENT_ID) else parent_id,
            member_id=row.member_id,
            content=row.content,
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None

    @property
    def parent_key(self) -> UUID:
        """Partition value used in comments_by_parent."""
        return self.parent_id or ROOT_PARENT_ID


def create_comment(
    post_id: UUID,
    member_id: UUID,
    content: str,
    parent_id: UUID | None = None,
) -> Comment:
    """Create a new comment with default values."""
    now = datetime.now(UTC)
    return Comment(
        comment_id=uuid4(),
        post_id=post_id,
        parent_id=parent_id,
        member_id=member_id,
        content=content,
        created_at=now,
        updated_at=now,
    )
