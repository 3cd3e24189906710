"""Cassandra access for reports."""

from typing import TYPE_CHECKING

from .models import Report


if TYPE_CHECKING:
    from cassandra.cluster import Session


class ReportRepository:
    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._insert_report = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.reports
            (report_id, target_type, target_id, post_id, reporter_id, category,
             content, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_report_by_target = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.reports_by_target
            (target_type, target_id, created_at, report_id, reporter_id, category,
             content)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

    async def insert(self, report: Report) -> None:
        await self.session.aexecute(
            self._insert_report,
            [
                report.report_id,
                report.target_type.value,
                report.target_id,
                report.post_id,
                report.reporter_id,
                report.category.value,
                report.content,
                report.created_at,
            ],
        )
        await self.session.aexecute(
            self._insert_report_by_target,
            [
                report.target_type.value,
                report.target_id,
                report.created_at,
                report.report_id,
                report.reporter_id,
                report.category.value,
                report.content,
            ],
        )
