"""Notice service layer.

Anyone can read notices; only ADMIN members write them.
"""

from uuid import UUID

import structlog

from src.core.errors import BalanceTalkError, ErrorCode
from src.members.models import Member
from src.utils.dates import utcnow

from .models import Notice, create_notice
from .repository import NoticeRepository
from .schemas import NoticeRequest


logger = structlog.get_logger(__name__)


class NoticeService:
    """Service for administrator notices."""

    def __init__(self, repository: NoticeRepository, list_limit: int = 1000):
        self.repository = repository
        self.list_limit = list_limit

    @staticmethod
    def _require_admin(member: Member) -> None:
        if not member.is_admin:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_NOTICE_ACCESS)

    async def create_notice(self, member: Member, data: NoticeRequest) -> Notice:
        """Publish a notice.

        Raises:
            BalanceTalkError(FORBIDDEN_NOTICE_ACCESS): Member is not an admin
        """
        self._require_admin(member)
        notice = create_notice(
            member_id=member.id, title=data.title, content=data.content
        )
        await self.repository.insert(notice)
        logger.info("notice_created", notice_id=str(notice.notice_id))
        return notice

    async def list_notices(self) -> list[Notice]:
        return await self.repository.list_notices(self.list_limit)

    async def get_notice(self, notice_id: UUID) -> Notice:
        notice = await self.repository.get(notice_id)
        if notice is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_NOTICE)
        return notice

    async def update_notice(
        self, member: Member, notice_id: UUID, data: NoticeRequest
    ) -> Notice:
        """Replace a notice's title and content.

        Raises:
            BalanceTalkError(FORBIDDEN_NOTICE_ACCESS)
            BalanceTalkError(NOT_FOUND_NOTICE)
        """
        self._require_admin(member)
        notice = await self.get_notice(notice_id)
        notice.title = data.title
        notice.content = data.content
        notice.updated_at = utcnow()
        await self.repository.update(notice)
        logger.info("notice_updated", notice_id=str(notice_id))
        return notice

    async def delete_notice(self, member: Member, notice_id: UUID) -> None:
        """Remove a notice.

        Raises:
            BalanceTalkError(FORBIDDEN_NOTICE_ACCESS)
            BalanceTalkError(NOT_FOUND_NOTICE)
        """
        self._require_admin(member)
        await self.get_notice(notice_id)
        await self.repository.delete(notice_id)
        logger.info("notice_deleted", notice_id=str(notice_id))
