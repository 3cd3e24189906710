"""Cassandra access for bookmarks."""

from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row, was_applied

from .models import Bookmark


if TYPE_CHECKING:
    from cassandra.cluster import Session


class BookmarkRepository:
    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._insert_bookmark = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.bookmarks (member_id, post_id, created_at)
            VALUES (?, ?, ?) IF NOT EXISTS
        """)

        self._delete_bookmark = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.bookmarks
            WHERE member_id = ? AND post_id = ? IF EXISTS
        """)

        self._get_bookmark = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.bookmarks
            WHERE member_id = ? AND post_id = ?
        """)

        self._get_bookmarks_by_member = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.bookmarks WHERE member_id = ?
        """)

        # Uses the secondary index on post_id
        self._get_bookmarks_by_post = self.session.prepare(f"""
            SELECT member_id, post_id FROM {self.keyspace}.bookmarks
            WHERE post_id = ?
        """)

        self._delete_bookmark_unconditional = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.bookmarks
            WHERE member_id = ? AND post_id = ?
        """)

    async def insert(self, bookmark: Bookmark) -> bool:
        """Store a bookmark. False when it already exists."""
        result = await self.session.aexecute(
            self._insert_bookmark,
            [bookmark.member_id, bookmark.post_id, bookmark.created_at],
        )
        return was_applied(result)

    async def delete(self, member_id: UUID, post_id: UUID) -> bool:
        """Remove a bookmark. False when there was none."""
        result = await self.session.aexecute(
            self._delete_bookmark, [member_id, post_id]
        )
        return was_applied(result)

    async def exists(self, member_id: UUID, post_id: UUID) -> bool:
        result = await self.session.aexecute(self._get_bookmark, [member_id, post_id])
        return first_row(result) is not None

    async def list_for_member(self, member_id: UUID) -> list[Bookmark]:
        """Bookmarks of a member, newest first."""
        rows = await self.session.aexecute(self._get_bookmarks_by_member, [member_id])
        bookmarks = [Bookmark.from_row(row) for row in rows]
        return sorted(bookmarks, key=lambda b: b.created_at, reverse=True)

    async def delete_all_for_post(self, post_id: UUID) -> None:
        rows = await self.session.aexecute(self._get_bookmarks_by_post, [post_id])
        for row in rows:
            await self.session.aexecute(
                self._delete_bookmark_unconditional, [row.member_id, row.post_id]
            )
