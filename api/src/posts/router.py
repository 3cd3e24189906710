"""Post API endpoints.

Provides routes for:
- Creating, reading, listing and deleting posts
- Best posts and search
- Post likes and reports
"""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.auth.dependencies import CurrentMember, OptionalMember
from src.members.schemas import MessageResponse
from src.reports.schemas import ReportRequest, ReportResponse

from .dependencies import PostServiceDep
from .schemas import PostRequest, PostResponse, SearchType


router = APIRouter(prefix="/posts", tags=["posts"])


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    data: PostRequest,
    post_service: PostServiceDep,
    member: CurrentMember,
) -> PostResponse:
    """Create a balance post with exactly two options.

    The member needs a valid "can post" permission and the deadline must be
    in the future.
    """
    return await post_service.create_post(member, data)


@router.get("", response_model=list[PostResponse], summary="List posts")
async def list_posts(
    post_service: PostServiceDep,
    member: OptionalMember,
    limit: int | None = Query(None, ge=1, le=100),
) -> list[PostResponse]:
    return await post_service.list_posts(member, limit)


@router.get("/best", response_model=list[PostResponse], summary="Best posts")
async def best_posts(
    post_service: PostServiceDep, member: OptionalMember
) -> list[PostResponse]:
    return await post_service.best_posts(member)


@router.get("/search", response_model=list[PostResponse], summary="Search posts")
async def search_posts(
    post_service: PostServiceDep,
    member: OptionalMember,
    keyword: str = Query(..., min_length=1, max_length=50),
    type: SearchType = Query(SearchType.TITLE),  # noqa: A002
) -> list[PostResponse]:
    """Search by title substring or by tag name."""
    return await post_service.search(keyword, type, member)


@router.get("/{post_id}", response_model=PostResponse, summary="Get post")
async def get_post(
    post_id: UUID,
    post_service: PostServiceDep,
    member: OptionalMember,
) -> PostResponse:
    return await post_service.get_post(post_id, member)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete post",
)
async def delete_post(
    post_id: UUID,
    post_service: PostServiceDep,
    member: CurrentMember,
) -> Response:
    """Delete a post with its options, votes, comments, likes and bookmarks."""
    await post_service.delete_post(member, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{post_id}/like",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Like post",
)
async def like_post(
    post_id: UUID,
    post_service: PostServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    await post_service.like_post(member, post_id)
    return MessageResponse(message="Post liked")


@router.delete("/{post_id}/like", response_model=MessageResponse, summary="Unlike post")
async def unlike_post(
    post_id: UUID,
    post_service: PostServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    await post_service.unlike_post(member, post_id)
    return MessageResponse(message="Post like removed")


@router.post(
    "/{post_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report post",
)
async def report_post(
    post_id: UUID,
    data: ReportRequest,
    post_service: PostServiceDep,
    member: CurrentMember,
) -> ReportResponse:
    report = await post_service.report_post(member, post_id, data)
    return ReportResponse.from_report(report)
