"""Balance posts with two options, tags, likes and views."""

from .models import (
    BALANCE_OPTION_COUNT,
    POSTS_TABLES_CQL,
    BalanceOption,
    Post,
    PostCategory,
    create_post,
)


__all__ = [
    "BALANCE_OPTION_COUNT",
    "POSTS_TABLES_CQL",
    "BalanceOption",
    "Post",
    "PostCategory",
    "create_post",
]
