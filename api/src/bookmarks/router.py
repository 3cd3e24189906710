"""Bookmark API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from src.auth.dependencies import CurrentMember

from .dependencies import BookmarkServiceDep
from .schemas import BookmarkResponse


router = APIRouter(prefix="/bookmark/posts", tags=["bookmarks"])


@router.post(
    "/{post_id}",
    response_model=BookmarkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark post",
)
async def add_bookmark(
    post_id: UUID,
    bookmark_service: BookmarkServiceDep,
    member: CurrentMember,
) -> BookmarkResponse:
    return await bookmark_service.add(member, post_id)


@router.get("", response_model=list[BookmarkResponse], summary="List bookmarks")
async def list_bookmarks(
    bookmark_service: BookmarkServiceDep,
    member: CurrentMember,
) -> list[BookmarkResponse]:
    return await bookmark_service.list_bookmarks(member)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove bookmark",
)
async def remove_bookmark(
    post_id: UUID,
    bookmark_service: BookmarkServiceDep,
    member: CurrentMember,
) -> Response:
    await bookmark_service.remove(member, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
