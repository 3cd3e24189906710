"""Database models for votes.

A member casts at most one vote per post, keyed by (post_id, member_id).
Votes are immutable: there is no update or retract path.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from src.utils.dates import ensure_utc_aware


VOTE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.votes (
    post_id UUID,
    member_id UUID,
    option_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((post_id), member_id)
)
"""

VOTES_TABLES_CQL = [VOTE_TABLE_CQL]


@dataclass
class Vote:
    """A member's selection of one option of a post."""

    post_id: UUID
    member_id: UUID
    option_id: UUID
    created_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Vote":
        return cls(
            post_id=row.post_id,
            member_id=row.member_id,
            option_id=row.option_id,
            created_at=ensure_utc_aware(row.created_at),
        )


def create_vote(post_id: UUID, member_id: UUID, option_id: UUID) -> Vote:
    return Vote(
        post_id=post_id,
        member_id=member_id,
        option_id=option_id,
        created_at=datetime.now(UTC),
    )
