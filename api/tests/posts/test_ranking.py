"""Tests for ranking helpers and cursors."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi import HTTPException

from src.core.pagination import decode_cursor, encode_cursor
from src.posts.ranking import default_comment_rank, top_n


def test_top_n_orders_by_key() -> None:
    assert top_n([3, 9, 1, 7], key=lambda x: x, n=2) == [9, 7]


def test_top_n_non_positive_size() -> None:
    assert top_n([1, 2, 3], key=lambda x: x, n=0) == []


def test_comment_rank_prefers_likes_then_age() -> None:
    now = datetime.now(UTC)
    older = default_comment_rank(1, now - timedelta(minutes=5))
    newer = default_comment_rank(1, now)
    liked = default_comment_rank(2, now)

    assert liked > older > newer


def test_cursor_round_trip() -> None:
    created_at = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
    item_id = uuid4()

    assert decode_cursor(encode_cursor(created_at, item_id)) == (created_at, item_id)


def test_bad_cursor() -> None:
    with pytest.raises(HTTPException) as exc_info:
        decode_cursor("garbage!")
    assert exc_info.value.status_code == 400
