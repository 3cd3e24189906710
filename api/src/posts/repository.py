"""Cassandra access for posts, options, tags, likes and views."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row, was_applied

from .models import BalanceOption, Post


if TYPE_CHECKING:
    from cassandra.cluster import Session


class PostRepository:
    """Prepared statements and queries over the post tables."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        # Posts
        self._insert_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts
            (post_id, member_id, title, deadline, category, tags, created_at,
             updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_post = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.posts WHERE post_id = ?
        """)

        self._list_posts = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.posts LIMIT ?
        """)

        self._delete_post = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.posts WHERE post_id = ?
        """)

        # Options
        self._insert_option = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.balance_options
            (post_id, position, option_id, title, description, stored_file_name,
             image_url)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_options = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.balance_options WHERE post_id = ?
        """)

        self._delete_options = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.balance_options WHERE post_id = ?
        """)

        # Tags
        self._insert_tag = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts_by_tag (tag, post_id, created_at)
            VALUES (?, ?, ?)
        """)

        self._get_post_ids_by_tag = self.session.prepare(f"""
            SELECT post_id FROM {self.keyspace}.posts_by_tag WHERE tag = ? LIMIT ?
        """)

        self._delete_tag = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.posts_by_tag WHERE tag = ? AND post_id = ?
        """)

        # Likes
        self._insert_like = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.post_likes (post_id, member_id, created_at)
            VALUES (?, ?, ?) IF NOT EXISTS
        """)

        self._delete_like = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.post_likes
            WHERE post_id = ? AND member_id = ? IF EXISTS
        """)

        self._get_like = self.session.prepare(f"""
            SELECT member_id FROM {self.keyspace}.post_likes
            WHERE post_id = ? AND member_id = ?
        """)

        self._count_likes = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.post_likes WHERE post_id = ?
        """)

        self._delete_likes = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.post_likes WHERE post_id = ?
        """)

        # Views (counter table)
        self._incr_views = self.session.prepare(f"""
            UPDATE {self.keyspace}.post_views
            SET views = views + 1
            WHERE post_id = ?
        """)

        self._get_views = self.session.prepare(f"""
            SELECT views FROM {self.keyspace}.post_views WHERE post_id = ?
        """)

        self._delete_views = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.post_views WHERE post_id = ?
        """)

    # ==========================================================================
    # Posts
    # ==========================================================================

    async def insert(self, post: Post) -> None:
        """Insert a post with its options and tag lookups."""
        await self.session.aexecute(
            self._insert_post,
            [
                post.post_id,
                post.member_id,
                post.title,
                post.deadline,
                post.category.value,
                post.tags,
                post.created_at,
                post.updated_at,
            ],
        )
        for option in post.options:
            await self.session.aexecute(
                self._insert_option,
                [
                    post.post_id,
                    option.position,
                    option.option_id,
                    option.title,
                    option.description,
                    option.stored_file_name,
                    option.image_url,
                ],
            )
        for tag in post.tags:
            await self.session.aexecute(
                self._insert_tag, [tag, post.post_id, post.created_at]
            )

    async def get(self, post_id: UUID) -> Post | None:
        row = first_row(await self.session.aexecute(self._get_post, [post_id]))
        if row is None:
            return None
        return Post.from_row(row, await self.get_options(post_id))

    async def get_options(self, post_id: UUID) -> list[BalanceOption]:
        rows = await self.session.aexecute(self._get_options, [post_id])
        return [BalanceOption.from_row(row) for row in rows]

    async def list_posts(self, limit: int) -> list[Post]:
        """Scan up to ``limit`` posts, newest first."""
        rows = await self.session.aexecute(self._list_posts, [limit])
        posts = [
            Post.from_row(row, await self.get_options(row.post_id)) for row in rows
        ]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    async def list_by_tag(self, tag: str, limit: int) -> list[Post]:
        rows = await self.session.aexecute(self._get_post_ids_by_tag, [tag, limit])
        posts = []
        for row in rows:
            post = await self.get(row.post_id)
            if post is not None:
                posts.append(post)
        return sorted(posts, key=lambda p: p.created_at, reverse=True)

    async def delete(self, post: Post) -> None:
        """Delete a post with its options, tags, likes and view counter."""
        for tag in post.tags:
            await self.session.aexecute(self._delete_tag, [tag, post.post_id])
        await self.session.aexecute(self._delete_options, [post.post_id])
        await self.session.aexecute(self._delete_likes, [post.post_id])
        await self.session.aexecute(self._delete_views, [post.post_id])
        await self.session.aexecute(self._delete_post, [post.post_id])

    # ==========================================================================
    # Likes
    # ==========================================================================

    async def add_like(self, post_id: UUID, member_id: UUID) -> bool:
        """Record a like. False when the member already liked the post."""
        result = await self.session.aexecute(
            self._insert_like, [post_id, member_id, datetime.now(UTC)]
        )
        return was_applied(result)

    async def remove_like(self, post_id: UUID, member_id: UUID) -> bool:
        """Remove a like. False when there was none."""
        result = await self.session.aexecute(self._delete_like, [post_id, member_id])
        return was_applied(result)

    async def has_like(self, post_id: UUID, member_id: UUID) -> bool:
        result = await self.session.aexecute(self._get_like, [post_id, member_id])
        return first_row(result) is not None

    async def count_likes(self, post_id: UUID) -> int:
        row = first_row(await self.session.aexecute(self._count_likes, [post_id]))
        return row.count if row else 0

    # ==========================================================================
    # Views
    # ==========================================================================

    async def increment_views(self, post_id: UUID) -> None:
        await self.session.aexecute(self._incr_views, [post_id])

    async def get_views(self, post_id: UUID) -> int:
        row = first_row(await self.session.aexecute(self._get_views, [post_id]))
        return row.views if row and row.views else 0
