"""Database models for members.

Cassandra table definitions for:
- Members: main table keyed by id
- Lookup tables by email and by nickname, which also hold uniqueness
  through lightweight transactions
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from src.auth.permissions import MemberRole
from src.utils.dates import ensure_utc_aware


MEMBER_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.members (
    id UUID PRIMARY KEY,
    email TEXT,
    nickname TEXT,
    password_hash TEXT,
    role TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

MEMBERS_BY_EMAIL_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.members_by_email (
    email TEXT PRIMARY KEY,
    member_id UUID
)
"""

MEMBERS_BY_NICKNAME_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.members_by_nickname (
    nickname TEXT PRIMARY KEY,
    member_id UUID
)
"""

MEMBERS_TABLES_CQL = [
    MEMBER_TABLE_CQL,
    MEMBERS_BY_EMAIL_TABLE_CQL,
    MEMBERS_BY_NICKNAME_TABLE_CQL,
]


@dataclass
class Member:
    """Registered member.

    Attributes:
        id: Unique identifier
        email: Unique login email (lowercase)
        nickname: Unique display name
        password_hash: Argon2id hash
        role: USER or ADMIN
    """

    id: UUID
    email: str
    nickname: str
    password_hash: str
    role: MemberRole
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "Member":
        """Create Member from Cassandra row."""
        created_at = ensure_utc_aware(row.created_at)
        return cls(
            id=row.id,
            email=row.email,
            nickname=row.nickname,
            password_hash=row.password_hash,
            role=MemberRole(row.role or MemberRole.USER.value),
            created_at=created_at,
            updated_at=ensure_utc_aware(row.updated_at) or created_at,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN


def create_member(
    email: str,
    nickname: str,
    password_hash: str,
    role: MemberRole = MemberRole.USER,
) -> Member:
    """Create a new member with default values."""
    now = datetime.now(UTC)
    return Member(
        id=uuid4(),
        email=email.lower().strip(),
        nickname=nickname.strip(),
        password_hash=password_hash,
        role=role,
        created_at=now,
        updated_at=now,
    )
