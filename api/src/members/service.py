"""Member service layer.

Business logic for:
- Join with unique email and nickname
- Login and token issuing
- Profile updates and withdrawal
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog

from src.auth.permissions import MemberRole
from src.auth.security import TokenProvider, hash_password, verify_password
from src.core.errors import BalanceTalkError, ErrorCode

from .models import Member, create_member
from .repository import MemberRepository
from .schemas import JoinRequest, LoginResponse, MemberResponse


logger = structlog.get_logger(__name__)

# Upper bound for the member listing
MAX_MEMBERS_LISTED = 1000


class MemberService:
    """Service for member accounts."""

    def __init__(
        self,
        repository: MemberRepository,
        token_provider: TokenProvider,
        allow_admin_join: bool = False,
    ):
        self.repository = repository
        self.token_provider = token_provider
        self.allow_admin_join = allow_admin_join

    async def join(self, data: JoinRequest) -> Member:
        """Register a new member.

        Email and nickname are reserved through lightweight transactions, so a
        concurrent join with the same value loses even if both pass the
        existence check.

        Raises:
            BalanceTalkError(ALREADY_REGISTERED_EMAIL)
            BalanceTalkError(ALREADY_REGISTERED_NICKNAME)
            BalanceTalkError(FORBIDDEN_ADMIN_JOIN): ADMIN requested while admin
                self-registration is disabled
        """
        if data.role == MemberRole.ADMIN and not self.allow_admin_join:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_ADMIN_JOIN)

        email = data.email.lower()
        if await self.repository.get_by_email(email):
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_EMAIL)
        if await self.repository.nickname_owner(data.nickname):
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_NICKNAME)

        member = create_member(
            email=email,
            nickname=data.nickname,
            password_hash=hash_password(data.password),
            role=data.role,
        )

        if not await self.repository.claim_email(member.email, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_EMAIL)
        if not await self.repository.claim_nickname(member.nickname, member.id):
            await self.repository.release_email(member.email)
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_NICKNAME)

        await self.repository.insert(member)
        logger.info("member_joined", member_id=str(member.id), role=member.role.value)
        return member

    async def login(self, email: str, password: str) -> LoginResponse:
        """Authenticate and issue an access token.

        Unknown email and wrong password fail the same way.
        """
        member = await self.repository.get_by_email(email)
        if member is None or not verify_password(password, member.password_hash):
            logger.info("member_login_failed")
            raise BalanceTalkError(ErrorCode.MISMATCHED_EMAIL_OR_PASSWORD)

        token = self.token_provider.create_token(member.email, member.role)
        logger.info("member_logged_in", member_id=str(member.id))
        return LoginResponse(
            token=token,
            expires_in=self.token_provider.expire_minutes * 60,
            member=MemberResponse.from_member(member),
        )

    async def get_member(self, member_id: UUID) -> Member:
        member = await self.repository.get_by_id(member_id)
        if member is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_MEMBER)
        return member

    async def get_member_by_email(self, email: str) -> Member:
        """Resolve the member behind a token subject."""
        member = await self.repository.get_by_email(email)
        if member is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_MEMBER)
        return member

    async def list_members(self) -> list[Member]:
        members = await self.repository.list_all(MAX_MEMBERS_LISTED)
        return sorted(members, key=lambda m: m.created_at)

    async def update_nickname(self, member: Member, nickname: str) -> Member:
        """Change the member's nickname.

        Raises:
            BalanceTalkError(ALREADY_REGISTERED_NICKNAME): If another member
                holds it.
        """
        if nickname == member.nickname:
            return member

        owner = await self.repository.nickname_owner(nickname)
        if owner is not None and owner != member.id:
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_NICKNAME)
        if not await self.repository.claim_nickname(nickname, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_REGISTERED_NICKNAME)

        now = datetime.now(UTC)
        await self.repository.update_nickname(member.id, nickname, now)
        await self.repository.release_nickname(member.nickname)

        logger.info("member_nickname_updated", member_id=str(member.id))
        member.nickname = nickname
        member.updated_at = now
        return member

    async def update_password(self, member: Member, password: str) -> None:
        now = datetime.now(UTC)
        await self.repository.update_password(member.id, hash_password(password), now)
        logger.info("member_password_updated", member_id=str(member.id))

    async def delete(self, member: Member, email: str, password: str) -> None:
        """Withdraw the current member after re-checking credentials.

        Raises:
            BalanceTalkError(FORBIDDEN_MEMBER_DELETE): If the credentials do
                not belong to the current member.
        """
        if email.lower() != member.email or not verify_password(
            password, member.password_hash
        ):
            raise BalanceTalkError(ErrorCode.FORBIDDEN_MEMBER_DELETE)

        await self.repository.delete(member)
        logger.info("member_deleted", member_id=str(member.id))

    async def logout(self, member: Member) -> None:
        # Tokens are stateless; they stay valid until they expire
        logger.info("member_logged_out", member_id=str(member.id))
