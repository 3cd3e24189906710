"""Cassandra access for votes."""

from collections import Counter
from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row, was_applied

from .models import Vote


if TYPE_CHECKING:
    from cassandra.cluster import Session


class VoteRepository:
    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        # LWT: the loser of two concurrent first votes is rejected
        self._insert_vote = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.votes
            (post_id, member_id, option_id, created_at)
            VALUES (?, ?, ?, ?) IF NOT EXISTS
        """)

        self._get_vote = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.votes
            WHERE post_id = ? AND member_id = ?
        """)

        self._get_votes_by_post = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.votes WHERE post_id = ?
        """)

        self._delete_votes_by_post = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.votes WHERE post_id = ?
        """)

    async def insert(self, vote: Vote) -> bool:
        """Store a vote. False when the member already voted on the post."""
        result = await self.session.aexecute(
            self._insert_vote,
            [vote.post_id, vote.member_id, vote.option_id, vote.created_at],
        )
        return was_applied(result)

    async def get(self, post_id: UUID, member_id: UUID) -> Vote | None:
        row = first_row(
            await self.session.aexecute(self._get_vote, [post_id, member_id])
        )
        return Vote.from_row(row) if row else None

    async def list_for_post(self, post_id: UUID) -> list[Vote]:
        rows = await self.session.aexecute(self._get_votes_by_post, [post_id])
        return [Vote.from_row(row) for row in rows]

    async def count_by_option(self, post_id: UUID) -> dict[UUID, int]:
        """Number of votes per option id."""
        votes = await self.list_for_post(post_id)
        return dict(Counter(vote.option_id for vote in votes))

    async def delete_all_for_post(self, post_id: UUID) -> None:
        await self.session.aexecute(self._delete_votes_by_post, [post_id])
