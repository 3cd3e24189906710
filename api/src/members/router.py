"""Member API endpoints.

Provides routes for:
- Join, login and logout
- Member lookup
- Nickname and password changes
- Withdrawal
"""

from uuid import UUID

from fastapi import APIRouter, status

from src.auth.dependencies import CurrentMember

from .dependencies import MemberServiceDep
from .schemas import (
    JoinRequest,
    LoginRequest,
    LoginResponse,
    MemberResponse,
    MessageResponse,
    NicknameUpdateRequest,
    PasswordUpdateRequest,
    WithdrawRequest,
)


router = APIRouter(prefix="/members", tags=["members"])


@router.post(
    "/join",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join",
)
async def join(data: JoinRequest, member_service: MemberServiceDep) -> MemberResponse:
    """Register a new member with a unique email and nickname."""
    member = await member_service.join(data)
    return MemberResponse.from_member(member)


@router.post("/login", response_model=LoginResponse, summary="Login")
async def login(data: LoginRequest, member_service: MemberServiceDep) -> LoginResponse:
    """Exchange credentials for an access token.

    Send the token back in the ``X-AUTH-TOKEN`` header.
    """
    return await member_service.login(data.email, data.password)


@router.get("", response_model=list[MemberResponse], summary="List members")
async def list_members(member_service: MemberServiceDep) -> list[MemberResponse]:
    members = await member_service.list_members()
    return [MemberResponse.from_member(m) for m in members]


@router.get("/{member_id}", response_model=MemberResponse, summary="Get member")
async def get_member(
    member_id: UUID, member_service: MemberServiceDep
) -> MemberResponse:
    member = await member_service.get_member(member_id)
    return MemberResponse.from_member(member)


@router.put("/nickname", response_model=MemberResponse, summary="Change nickname")
async def update_nickname(
    data: NicknameUpdateRequest,
    member_service: MemberServiceDep,
    member: CurrentMember,
) -> MemberResponse:
    updated = await member_service.update_nickname(member, data.nickname)
    return MemberResponse.from_member(updated)


@router.put("/password", response_model=MessageResponse, summary="Change password")
async def update_password(
    data: PasswordUpdateRequest,
    member_service: MemberServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    await member_service.update_password(member, data.password)
    return MessageResponse(message="Password updated")


@router.delete("", response_model=MessageResponse, summary="Withdraw")
async def delete_member(
    data: WithdrawRequest,
    member_service: MemberServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    """Delete the current member. Credentials must be re-entered."""
    await member_service.delete(member, data.email, data.password)
    return MessageResponse(message="Member deleted")


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(
    member_service: MemberServiceDep, member: CurrentMember
) -> MessageResponse:
    """Acknowledge logout. The token stays valid until it expires."""
    await member_service.logout(member)
    return MessageResponse(message="Logged out")
