"""Vote API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from src.auth.dependencies import CurrentMember, OptionalMember

from .dependencies import VoteServiceDep
from .schemas import VoteRequest, VoteResponse, VoteResultResponse


router = APIRouter(prefix="/posts/{post_id}/vote", tags=["votes"])


@router.post(
    "",
    response_model=VoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Vote",
)
async def vote(
    post_id: UUID,
    data: VoteRequest,
    vote_service: VoteServiceDep,
    member: CurrentMember,
) -> VoteResponse:
    """Vote for one option of a post. A vote cannot be changed later."""
    result = await vote_service.vote(member, post_id, data.selected_option_id)
    return VoteResponse.from_vote(result)


@router.get("", response_model=VoteResultResponse, summary="Vote results")
async def get_vote_results(
    post_id: UUID,
    vote_service: VoteServiceDep,
    member: OptionalMember,
) -> VoteResultResponse:
    return await vote_service.get_results(post_id, member)
