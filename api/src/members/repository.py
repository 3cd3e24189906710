"""Cassandra access for members."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from src.core.database import first_row, was_applied

from .models import Member


if TYPE_CHECKING:
    from cassandra.cluster import Session


class MemberRepository:
    """Prepared statements and queries over the member tables."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        self._insert_member = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.members
            (id, email, nickname, password_hash, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_by_id = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.members WHERE id = ?
        """)

        self._list_members = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.members LIMIT ?
        """)

        self._update_nickname = self.session.prepare(f"""
            UPDATE {self.keyspace}.members
            SET nickname = ?, updated_at = ?
            WHERE id = ?
        """)

        self._update_password = self.session.prepare(f"""
            UPDATE {self.keyspace}.members
            SET password_hash = ?, updated_at = ?
            WHERE id = ?
        """)

        self._delete_member = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.members WHERE id = ?
        """)

        # Lookup tables, written with LWT to hold uniqueness
        self._claim_email = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.members_by_email (email, member_id)
            VALUES (?, ?) IF NOT EXISTS
        """)

        self._get_id_by_email = self.session.prepare(f"""
            SELECT member_id FROM {self.keyspace}.members_by_email WHERE email = ?
        """)

        self._release_email = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.members_by_email WHERE email = ?
        """)

        self._claim_nickname = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.members_by_nickname (nickname, member_id)
            VALUES (?, ?) IF NOT EXISTS
        """)

        self._get_id_by_nickname = self.session.prepare(f"""
            SELECT member_id FROM {self.keyspace}.members_by_nickname
            WHERE nickname = ?
        """)

        self._release_nickname = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.members_by_nickname WHERE nickname = ?
        """)

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def get_by_id(self, member_id: UUID) -> Member | None:
        row = first_row(await self.session.aexecute(self._get_by_id, [member_id]))
        return Member.from_row(row) if row else None

    async def get_by_email(self, email: str) -> Member | None:
        row = first_row(
            await self.session.aexecute(self._get_id_by_email, [email.lower()])
        )
        return await self.get_by_id(row.member_id) if row else None

    async def nickname_owner(self, nickname: str) -> UUID | None:
        """ID of the member holding this nickname, if any."""
        row = first_row(
            await self.session.aexecute(self._get_id_by_nickname, [nickname])
        )
        return row.member_id if row else None

    async def list_all(self, limit: int) -> list[Member]:
        rows = await self.session.aexecute(self._list_members, [limit])
        return [Member.from_row(row) for row in rows]

    # ==========================================================================
    # Writes
    # ==========================================================================

    async def claim_email(self, email: str, member_id: UUID) -> bool:
        """Reserve an email for a member. False when already taken."""
        result = await self.session.aexecute(self._claim_email, [email, member_id])
        return was_applied(result)

    async def release_email(self, email: str) -> None:
        await self.session.aexecute(self._release_email, [email])

    async def claim_nickname(self, nickname: str, member_id: UUID) -> bool:
        """Reserve a nickname for a member. False when already taken."""
        result = await self.session.aexecute(
            self._claim_nickname, [nickname, member_id]
        )
        return was_applied(result)

    async def release_nickname(self, nickname: str) -> None:
        await self.session.aexecute(self._release_nickname, [nickname])

    async def insert(self, member: Member) -> None:
        await self.session.aexecute(
            self._insert_member,
            [
                member.id,
                member.email,
                member.nickname,
                member.password_hash,
                member.role.value,
                member.created_at,
                member.updated_at,
            ],
        )

    async def update_nickname(
        self, member_id: UUID, nickname: str, updated_at: datetime
    ) -> None:
        await self.session.aexecute(
            self._update_nickname, [nickname, updated_at, member_id]
        )

    async def update_password(
        self, member_id: UUID, password_hash: str, updated_at: datetime
    ) -> None:
        await self.session.aexecute(
            self._update_password, [password_hash, updated_at, member_id]
        )

    async def delete(self, member: Member) -> None:
        """Remove the member and release its email and nickname."""
        await self.session.aexecute(self._delete_member, [member.id])
        await self.release_email(member.email)
        await self.release_nickname(member.nickname)
