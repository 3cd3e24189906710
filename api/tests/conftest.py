"""Shared fixtures.

The app is built without running its lifespan, so no Redis or Cassandra is
needed. Router tests put mocked services on ``app.state``.
"""

import os


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("AUTH_SECRET_KEY", "test-signing-key-not-for-production")

from collections.abc import Callable  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from unittest.mock import AsyncMock, Mock  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.auth.permissions import MemberRole  # noqa: E402
from src.members.models import Member, create_member  # noqa: E402
from src.posts.models import Post, PostCategory, create_post  # noqa: E402


@pytest.fixture
def app() -> FastAPI:
    from src.main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_member() -> Callable[..., Member]:
    """Factory for members with a throwaway password hash."""

    def _make(
        nickname: str = "tester",
        email: str | None = None,
        role: MemberRole = MemberRole.USER,
    ) -> Member:
        return create_member(
            email=email or f"{nickname}@example.com",
            nickname=nickname,
            password_hash="$argon2id$not-a-real-hash",
            role=role,
        )

    return _make


@pytest.fixture
def make_post() -> Callable[..., Post]:
    """Factory for posts with two options and a deadline a day away."""

    def _make(
        member_id: UUID,
        title: str = "Cats or dogs?",
        deadline: datetime | None = None,
        tags: list[str] | None = None,
    ) -> Post:
        return create_post(
            member_id=member_id,
            title=title,
            deadline=deadline or datetime.now(UTC) + timedelta(days=1),
            category=PostCategory.CASUAL,
            options=[{"title": "Cats"}, {"title": "Dogs"}],
            tags=tags or [],
        )

    return _make


@pytest.fixture
def login_as(app: FastAPI) -> Callable[[Member], dict[str, str]]:
    """Issue a token for a member and make the member resolvable.

    Returns the headers to send with authenticated requests.
    """

    def _login(member: Member) -> dict[str, str]:
        member_service = getattr(app.state, "member_service", None)
        if member_service is None:
            member_service = Mock()
            app.state.member_service = member_service
        member_service.get_member_by_email = AsyncMock(return_value=member)
        token = app.state.token_provider.create_token(member.email, member.role)
        return {"X-AUTH-TOKEN": token}

    return _login
