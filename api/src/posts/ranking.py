"""Ranking policies for "best" selections.

A ranking policy is a key function: higher keys rank first. Best posts and
best comments are computed per request from the stats passed in.
"""

import heapq
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from .models import Post


T = TypeVar("T")


@dataclass
class PostStats:
    """A post with the counters used for ranking."""

    post: Post
    likes: int = 0
    votes: int = 0
    views: int = 0


def default_post_rank(stats: PostStats) -> tuple[int, int, int, datetime]:
    """Likes, then votes, then views, then recency."""
    return (stats.likes, stats.votes, stats.views, stats.post.created_at)


def default_comment_rank(likes: int, created_at: datetime) -> tuple[int, float]:
    """Like count descending, then oldest first."""
    return (likes, -created_at.timestamp())


def top_n(items: Iterable[T], key: Callable[[T], Any], n: int) -> list[T]:
    """The ``n`` highest-ranked items, best first."""
    if n <= 0:
        return []
    return heapq.nlargest(n, items, key=key)
