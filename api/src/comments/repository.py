"""Cassandra access for comments and comment likes."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row, was_applied

from .models import ROOT_PARENT_ID, Comment


if TYPE_CHECKING:
    from cassandra.cluster import Session


class CommentRepository:
    """Keeps the comment tables in step with each other.

    Every write touches the main table and the three lookup tables, since
    content is denormalized into all of them.
    """

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        # Inserts
        self._insert_comment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments
            (comment_id, post_id, parent_id, member_id, content, created_at,
             updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_by_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_post
            (post_id, created_at, comment_id, parent_id, member_id, content,
             updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_by_parent = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_parent
            (post_id, parent_id, created_at, comment_id, member_id, content,
             updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_by_member = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments_by_member
            (member_id, created_at, comment_id, post_id, parent_id, content,
             updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        # Reads
        self._get_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments WHERE comment_id = ?
        """)

        self._get_by_post = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_post WHERE post_id = ?
        """)

        self._get_roots = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_parent
            WHERE post_id = ? AND parent_id = ?
            ORDER BY created_at DESC
            LIMIT ?
        """)

        self._get_roots_at = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_parent
            WHERE post_id = ? AND parent_id = ? AND created_at = ?
            AND comment_id < ?
            ORDER BY created_at DESC
            LIMIT ?
        """)

        self._get_roots_before = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_parent
            WHERE post_id = ? AND parent_id = ? AND created_at < ?
            ORDER BY created_at DESC
            LIMIT ?
        """)

        self._get_replies = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_parent
            WHERE post_id = ? AND parent_id = ?
        """)

        self._get_by_member = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments_by_member
            WHERE member_id = ?
            LIMIT ?
        """)

        # Content updates
        self._update_comment = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments
            SET content = ?, updated_at = ?
            WHERE comment_id = ?
        """)

        self._update_by_post = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments_by_post
            SET content = ?, updated_at = ?
            WHERE post_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._update_by_parent = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments_by_parent
            SET content = ?, updated_at = ?
            WHERE post_id = ? AND parent_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._update_by_member = self.session.prepare(f"""
            UPDATE {self.keyspace}.comments_by_member
            SET content = ?, updated_at = ?
            WHERE member_id = ? AND created_at = ? AND comment_id = ?
        """)

        # Deletes
        self._delete_comment = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments WHERE comment_id = ?
        """)

        self._delete_by_post = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_post
            WHERE post_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._delete_by_parent = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_parent
            WHERE post_id = ? AND parent_id = ? AND created_at = ? AND comment_id = ?
        """)

        self._delete_by_member = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comments_by_member
            WHERE member_id = ? AND created_at = ? AND comment_id = ?
        """)

        # Likes
        self._insert_like = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comment_likes
            (comment_id, member_id, created_at)
            VALUES (?, ?, ?) IF NOT EXISTS
        """)

        self._delete_like = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comment_likes
            WHERE comment_id = ? AND member_id = ? IF EXISTS
        """)

        self._get_like = self.session.prepare(f"""
            SELECT member_id FROM {self.keyspace}.comment_likes
            WHERE comment_id = ? AND member_id = ?
        """)

        self._count_likes = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.comment_likes WHERE comment_id = ?
        """)

        self._delete_likes = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.comment_likes WHERE comment_id = ?
        """)

    # ==========================================================================
    # Comments
    # ==========================================================================

    async def insert(self, comment: Comment) -> None:
        await self.session.aexecute(
            self._insert_comment,
            [
                comment.comment_id,
                comment.post_id,
                comment.parent_id,
                comment.member_id,
                comment.content,
                comment.created_at,
                comment.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_by_post,
            [
                comment.post_id,
                comment.created_at,
                comment.comment_id,
                comment.parent_id,
                comment.member_id,
                comment.content,
                comment.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_by_parent,
            [
                comment.post_id,
                comment.parent_key,
                comment.created_at,
                comment.comment_id,
                comment.member_id,
                comment.content,
                comment.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_by_member,
            [
                comment.member_id,
                comment.created_at,
                comment.comment_id,
                comment.post_id,
                comment.parent_id,
                comment.content,
                comment.updated_at,
            ],
        )

    async def get(self, comment_id: UUID) -> Comment | None:
        row = first_row(await self.session.aexecute(self._get_comment, [comment_id]))
        return Comment.from_row(row) if row else None

    async def list_for_post(self, post_id: UUID) -> list[Comment]:
        """Every comment and reply of a post, newest first."""
        rows = await self.session.aexecute(self._get_by_post, [post_id])
        return [Comment.from_row(row) for row in rows]

    async def list_roots(
        self,
        post_id: UUID,
        limit: int,
        before: datetime | None = None,
        before_id: UUID | None = None,
    ) -> list[Comment]:
        """Root comments of a post, newest first.

        Rows come in (created_at DESC, comment_id DESC) order. A cursor
        position ``(before, before_id)`` resumes right after that row, so rows
        sharing the boundary millisecond are not skipped.

        Args:
            post_id: Post whose comments to list
            limit: Maximum number of rows
            before: Created-at of the last row already returned
            before_id: Comment id of the last row already returned
        """
        if before is None:
            rows = await self.session.aexecute(
                self._get_roots, [post_id, ROOT_PARENT_ID, limit]
            )
            return [Comment.from_row(row) for row in rows]

        comments = []
        if before_id is not None:
            rows = await self.session.aexecute(
                self._get_roots_at,
                [post_id, ROOT_PARENT_ID, before, before_id, limit],
            )
            comments = [Comment.from_row(row) for row in rows]
        if len(comments) < limit:
            rows = await self.session.aexecute(
                self._get_roots_before,
                [post_id, ROOT_PARENT_ID, before, limit - len(comments)],
            )
            comments.extend(Comment.from_row(row) for row in rows)
        return comments

    async def list_replies(self, post_id: UUID, parent_id: UUID) -> list[Comment]:
        """Direct replies to a comment, oldest first."""
        rows = await self.session.aexecute(self._get_replies, [post_id, parent_id])
        return [Comment.from_row(row) for row in rows]

    async def list_for_member(self, member_id: UUID, limit: int) -> list[Comment]:
        rows = await self.session.aexecute(self._get_by_member, [member_id, limit])
        return [Comment.from_row(row) for row in rows]

    async def update_content(self, comment: Comment) -> None:
        """Write ``comment.content`` and ``updated_at`` to every table."""
        values = [comment.content, comment.updated_at]
        await self.session.aexecute(
            self._update_comment, [*values, comment.comment_id]
        )
        await self.session.aexecute(
            self._update_by_post,
            [*values, comment.post_id, comment.created_at, comment.comment_id],
        )
        await self.session.aexecute(
            self._update_by_parent,
            [
                *values,
                comment.post_id,
                comment.parent_key,
                comment.created_at,
                comment.comment_id,
            ],
        )
        await self.session.aexecute(
            self._update_by_member,
            [*values, comment.member_id, comment.created_at, comment.comment_id],
        )

    async def delete(self, comment: Comment) -> None:
        """Delete one comment from every table, along with its likes."""
        await self.session.aexecute(self._delete_likes, [comment.comment_id])
        await self.session.aexecute(
            self._delete_by_member,
            [comment.member_id, comment.created_at, comment.comment_id],
        )
        await self.session.aexecute(
            self._delete_by_parent,
            [
                comment.post_id,
                comment.parent_key,
                comment.created_at,
                comment.comment_id,
            ],
        )
        await self.session.aexecute(
            self._delete_by_post,
            [comment.post_id, comment.created_at, comment.comment_id],
        )
        await self.session.aexecute(self._delete_comment, [comment.comment_id])

    async def delete_all_for_post(self, post_id: UUID) -> int:
        """Delete every comment of a post. Returns how many were removed."""
        comments = await self.list_for_post(post_id)
        for comment in comments:
            await self.delete(comment)
        return len(comments)

    # ==========================================================================
    # Likes
    # ==========================================================================

    async def add_like(self, comment_id: UUID, member_id: UUID) -> bool:
        """Record a like. False when the member already liked the comment."""
        result = await self.session.aexecute(
            self._insert_like, [comment_id, member_id, datetime.now(UTC)]
        )
        return was_applied(result)

    async def remove_like(self, comment_id: UUID, member_id: UUID) -> bool:
        result = await self.session.aexecute(
            self._delete_like, [comment_id, member_id]
        )
        return was_applied(result)

    async def has_like(self, comment_id: UUID, member_id: UUID) -> bool:
        result = await self.session.aexecute(self._get_like, [comment_id, member_id])
        return first_row(result) is not None

    async def count_likes(self, comment_id: UUID) -> int:
        row = first_row(await self.session.aexecute(self._count_likes, [comment_id]))
        return row.count if row else 0
