"""Cassandra access for notices."""

from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row

from .models import Notice


if TYPE_CHECKING:
    from cassandra.cluster import Session


class NoticeRepository:
    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._insert_notice = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.notices
            (notice_id, member_id, title, content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)

        self._get_notice = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.notices WHERE notice_id = ?
        """)

        self._list_notices = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.notices LIMIT ?
        """)

        self._update_notice = self.session.prepare(f"""
            UPDATE {self.keyspace}.notices
            SET title = ?, content = ?, updated_at = ?
            WHERE notice_id = ?
        """)

        self._delete_notice = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.notices WHERE notice_id = ?
        """)

    async def insert(self, notice: Notice) -> None:
        await self.session.aexecute(
            self._insert_notice,
            [
                notice.notice_id,
                notice.member_id,
                notice.title,
                notice.content,
                notice.created_at,
                notice.updated_at,
            ],
        )

    async def get(self, notice_id: UUID) -> Notice | None:
        row = first_row(await self.session.aexecute(self._get_notice, [notice_id]))
        return Notice.from_row(row) if row else None

    async def list_notices(self, limit: int) -> list[Notice]:
        """Up to ``limit`` notices, newest first."""
        rows = await self.session.aexecute(self._list_notices, [limit])
        notices = [Notice.from_row(row) for row in rows]
        return sorted(notices, key=lambda n: n.created_at, reverse=True)

    async def update(self, notice: Notice) -> None:
        await self.session.aexecute(
            self._update_notice,
            [notice.title, notice.content, notice.updated_at, notice.notice_id],
        )

    async def delete(self, notice_id: UUID) -> None:
        await self.session.aexecute(self._delete_notice, [notice_id])
