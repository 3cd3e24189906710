"""Database models for balance posts.

Cassandra table definitions for:
- Posts: main table keyed by post_id
- Balance options: the two choices of a post, clustered by position
- Posts by tag: tag search lookup
- Post likes: one row per (post, member)
- Post views: counter table

A post owns its options, tags, likes and view counter; they are removed
together with the post.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from src.utils.dates import ensure_utc_aware


# A post always offers exactly this many options
BALANCE_OPTION_COUNT = 2


class PostCategory(str, Enum):
    """Post categories."""

    CASUAL = "CASUAL"
    DISCUSSION = "DISCUSSION"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    post_id UUID PRIMARY KEY,
    member_id UUID,
    title TEXT,
    deadline TIMESTAMP,
    category TEXT,
    tags LIST<TEXT>,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

BALANCE_OPTION_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.balance_options (
    post_id UUID,
    position INT,
    option_id UUID,
    title TEXT,
    description TEXT,
    stored_file_name TEXT,
    image_url TEXT,
    PRIMARY KEY ((post_id), position)
) WITH CLUSTERING ORDER BY (position ASC)
"""

POSTS_BY_TAG_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts_by_tag (
    tag TEXT,
    post_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((tag), post_id)
)
"""

POST_LIKES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.post_likes (
    post_id UUID,
    member_id UUID,
    created_at TIMESTAMP,
    PRIMARY KEY ((post_id), member_id)
)
"""

POST_VIEWS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.post_views (
    post_id UUID PRIMARY KEY,
    views COUNTER
)
"""

POSTS_TABLES_CQL = [
    POST_TABLE_CQL,
    BALANCE_OPTION_TABLE_CQL,
    POSTS_BY_TAG_TABLE_CQL,
    POST_LIKES_TABLE_CQL,
    POST_VIEWS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class BalanceOption:
    """One of the two choices of a post."""

    option_id: UUID
    post_id: UUID
    position: int
    title: str
    description: str | None = None
    stored_file_name: str | None = None
    image_url: str | None = None

    @classmethod
    def from_row(cls, row: Any) -> "BalanceOption":
        return cls(
            option_id=row.option_id,
            post_id=row.post_id,
            position=row.position,
            title=row.title,
            description=row.description,
            stored_file_name=row.stored_file_name,
            image_url=row.image_url,
        )


@dataclass
class Post:
    """Balance post with its options."""

    post_id: UUID
    member_id: UUID
    title: str
    deadline: datetime
    category: PostCategory
    created_at: datetime
    updated_at: datetime
    tags: list[str] = field(default_factory=list)
    options: list[BalanceOption] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any, options: list[BalanceOption] | None = None) -> "Post":
        """Create Post from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at)
        return cls(
            post_id=row.post_id,
            member_id=row.member_id,
            title=row.title,
            deadline=ensure_utc_aware(row.deadline),
            category=PostCategory(row.category),
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
            tags=list(row.tags or []),
            options=sorted(options or [], key=lambda o: o.position),
        )

    def get_option(self, option_id: UUID) -> BalanceOption | None:
        """Find one of this post's options by id."""
        return next((o for o in self.options if o.option_id == option_id), None)

    def is_closed(self, now: datetime | None = None) -> bool:
        """Whether the voting deadline has passed."""
        return (now or datetime.now(UTC)) >= self.deadline


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_post(
    member_id: UUID,
    title: str,
    deadline: datetime,
    category: PostCategory,
    options: list[dict[str, Any]],
    tags: list[str] | None = None,
) -> Post:
    """Create a new post and its options.

    Args:
        member_id: Author
        title: Post title
        deadline: Voting deadline (UTC)
        category: Post category
        options: Option fields in display order (title, description,
            stored_file_name, image_url)
        tags: Tag names, deduplicated in order

    Returns:
        Post ready to be inserted
    """
    now = datetime.now(UTC)
    post_id = uuid4()
    return Post(
        post_id=post_id,
        member_id=member_id,
        title=title,
        deadline=deadline,
        category=category,
        created_at=now,
        updated_at=now,
        tags=list(dict.fromkeys(tags or [])),
        options=[
            BalanceOption(
                option_id=uuid4(),
                post_id=post_id,
                position=position,
                title=option["title"],
                description=option.get("description"),
                stored_file_name=option.get("stored_file_name"),
                image_url=option.get("image_url"),
            )
            for position, option in enumerate(options)
        ],
    )
