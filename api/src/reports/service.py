"""Report filing shared by posts and comments."""

from uuid import UUID

import structlog

from src.core.errors import BalanceTalkError, ErrorCode

from .models import Report, ReportCategory, ReportTarget, create_report
from .repository import ReportRepository


logger = structlog.get_logger(__name__)


class ReportService:
    """Records reports against posts and comments.

    Whether members may report their own content is a policy switch
    (``forbid_self_report``), off by default.
    """

    def __init__(self, repository: ReportRepository, forbid_self_report: bool = False):
        self.repository = repository
        self.forbid_self_report = forbid_self_report

    async def file_report(
        self,
        reporter_id: UUID,
        author_id: UUID,
        target_type: ReportTarget,
        target_id: UUID,
        post_id: UUID,
        category: ReportCategory,
        content: str,
    ) -> Report:
        """Record a report.

        Args:
            reporter_id: Member filing the report
            author_id: Author of the reported post or comment
            target_type: POST or COMMENT
            target_id: ID of the reported item
            post_id: Post the item belongs to
            category: Report reason
            content: Free-text description

        Raises:
            BalanceTalkError(FORBIDDEN_OWN_REPORT): If self reports are
                forbidden and the reporter wrote the content.
        """
        if self.forbid_self_report and reporter_id == author_id:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_OWN_REPORT)

        report = create_report(
            target_type=target_type,
            target_id=target_id,
            post_id=post_id,
            reporter_id=reporter_id,
            category=category,
            content=content,
        )
        await self.repository.insert(report)

        logger.info(
            "report_filed",
            report_id=str(report.report_id),
            target_type=target_type.value,
            target_id=str(target_id),
            category=category.value,
        )
        return report
