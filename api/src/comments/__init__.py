"""Threaded comments on posts.

Provides:
- Comments gated by a prior vote on the post
- Replies with a bounded nesting depth
- Comment likes and reports

Note: Router and service are not exported here to avoid circular imports.
Import directly from src.comments.router when needed.
"""

from .models import COMMENTS_TABLES_CQL, ROOT_PARENT_ID, Comment, create_comment


__all__ = [
    "COMMENTS_TABLES_CQL",
    "ROOT_PARENT_ID",
    "Comment",
    "create_comment",
]
