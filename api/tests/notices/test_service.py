"""Tests for NoticeService."""

from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from src.auth.permissions import MemberRole
from src.core.errors import BalanceTalkError, ErrorCode
from src.notices.models import create_notice
from src.notices.schemas import NoticeRequest
from src.notices.service import NoticeService


@pytest.fixture
def repository() -> Mock:
    repo = Mock()
    repo.insert = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.list_notices = AsyncMock(return_value=[])
    repo.update = AsyncMock()
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def service(repository: Mock) -> NoticeService:
    return NoticeService(repository, list_limit=50)


@pytest.fixture
def admin(make_member):
    return make_member("admin", role=MemberRole.ADMIN)


def _request(title: str = "Maintenance", content: str = "Down at 3am") -> NoticeRequest:
    return NoticeRequest(title=title, content=content)


class TestWriteAccess:
    @pytest.mark.asyncio
    async def test_admin_creates_notice(
        self, service: NoticeService, repository: Mock, admin
    ) -> None:
        notice = await service.create_notice(admin, _request())

        assert notice.member_id == admin.id
        assert notice.title == "Maintenance"
        repository.insert.assert_awaited_once_with(notice)

    @pytest.mark.asyncio
    async def test_user_cannot_create(
        self, service: NoticeService, repository: Mock, make_member
    ) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_notice(make_member(), _request())
        assert exc_info.value.code == ErrorCode.FORBIDDEN_NOTICE_ACCESS
        repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_cannot_delete(
        self, service: NoticeService, repository: Mock, make_member
    ) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.delete_notice(make_member(), uuid4())
        assert exc_info.value.code == ErrorCode.FORBIDDEN_NOTICE_ACCESS
        repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update(
        self, service: NoticeService, repository: Mock, admin
    ) -> None:
        notice = create_notice(admin.id, "Old", "Old content")
        repository.get.return_value = notice

        updated = await service.update_notice(
            admin, notice.notice_id, _request("New", "New content")
        )

        assert updated.title == "New"
        assert updated.content == "New content"
        assert updated.updated_at >= notice.created_at
        repository.update.assert_awaited_once_with(notice)

    @pytest.mark.asyncio
    async def test_update_missing(self, service: NoticeService, admin) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.update_notice(admin, uuid4(), _request())
        assert exc_info.value.code == ErrorCode.NOT_FOUND_NOTICE


class TestRead:
    @pytest.mark.asyncio
    async def test_get_missing(self, service: NoticeService) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.get_notice(uuid4())
        assert exc_info.value.code == ErrorCode.NOT_FOUND_NOTICE

    @pytest.mark.asyncio
    async def test_list_uses_limit(
        self, service: NoticeService, repository: Mock
    ) -> None:
        await service.list_notices()
        repository.list_notices.assert_awaited_once_with(50)


class TestNoticeRequest:
    def test_strips_title(self) -> None:
        assert _request(title="  Hello  ").title == "Hello"

    def test_rejects_blank_title(self) -> None:
        with pytest.raises(ValueError):
            _request(title="   ")
