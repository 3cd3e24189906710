"""Comment API endpoints.

Provides routes for:
- Comment create, list, update, delete
- Replies
- Best comments per option
- Comment likes and reports
- The current member's comments (my page)
"""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.auth.dependencies import CurrentMember, OptionalMember
from src.members.schemas import MessageResponse
from src.reports.schemas import ReportRequest, ReportResponse

from .dependencies import CommentServiceDep
from .schemas import (
    CommentListResponse,
    CommentRequest,
    CommentResponse,
    MyCommentResponse,
    ReplyRequest,
    UpdateCommentRequest,
)


router = APIRouter(prefix="/posts/{post_id}/comments", tags=["comments"])

my_page_router = APIRouter(prefix="/my-page", tags=["comments"])


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create comment",
)
async def create_comment(
    post_id: UUID,
    data: CommentRequest,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> CommentResponse:
    """Comment on a post. The member must have voted on it first."""
    return await comment_service.create_comment(member, post_id, data)


@router.get("", response_model=CommentListResponse, summary="List comments")
async def list_comments(
    post_id: UUID,
    comment_service: CommentServiceDep,
    member: OptionalMember,
    cursor: str | None = Query(None, description="Pagination cursor"),
    limit: int = Query(20, ge=1, le=100),
) -> CommentListResponse:
    """Root comments of a post, newest first."""
    return await comment_service.find_all(post_id, member, cursor, limit)


@router.get("/best", response_model=list[CommentResponse], summary="Best comments")
async def best_comments(
    post_id: UUID,
    comment_service: CommentServiceDep,
    member: OptionalMember,
) -> list[CommentResponse]:
    return await comment_service.find_best_comments(post_id, member)


@router.put("/{comment_id}", response_model=CommentResponse, summary="Update comment")
async def update_comment(
    post_id: UUID,
    comment_id: UUID,
    data: UpdateCommentRequest,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> CommentResponse:
    return await comment_service.update_comment(
        member, post_id, comment_id, data.content
    )


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
)
async def delete_comment(
    post_id: UUID,
    comment_id: UUID,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> Response:
    """Delete a comment together with its replies."""
    await comment_service.delete_comment(member, post_id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{comment_id}/replies",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create reply",
)
async def create_reply(
    post_id: UUID,
    comment_id: UUID,
    data: ReplyRequest,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> CommentResponse:
    return await comment_service.create_reply(member, post_id, comment_id, data.content)


@router.get(
    "/{comment_id}/replies",
    response_model=list[CommentResponse],
    summary="List replies",
)
async def list_replies(
    post_id: UUID,
    comment_id: UUID,
    comment_service: CommentServiceDep,
    member: OptionalMember,
) -> list[CommentResponse]:
    return await comment_service.find_all_replies(post_id, comment_id, member)


@router.post(
    "/{comment_id}/like",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Like comment",
)
async def like_comment(
    post_id: UUID,
    comment_id: UUID,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    await comment_service.like_comment(member, post_id, comment_id)
    return MessageResponse(message="Comment liked")


@router.delete(
    "/{comment_id}/like",
    response_model=MessageResponse,
    summary="Unlike comment",
)
async def unlike_comment(
    post_id: UUID,
    comment_id: UUID,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> MessageResponse:
    await comment_service.unlike_comment(member, post_id, comment_id)
    return MessageResponse(message="Comment like removed")


@router.post(
    "/{comment_id}/report",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report comment",
)
async def report_comment(
    post_id: UUID,
    comment_id: UUID,
    data: ReportRequest,
    comment_service: CommentServiceDep,
    member: CurrentMember,
) -> ReportResponse:
    report = await comment_service.report_comment(member, post_id, comment_id, data)
    return ReportResponse.from_report(report)


# ==============================================================================
# My page
# ==============================================================================


@my_page_router.get(
    "/comments",
    response_model=list[MyCommentResponse],
    summary="My comments",
)
async def my_comments(
    comment_service: CommentServiceDep,
    member: CurrentMember,
    limit: int = Query(100, ge=1, le=500),
) -> list[MyCommentResponse]:
    """The current member's comments, newest first."""
    return await comment_service.find_mine(member, limit)
