"""Notice API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from src.auth.dependencies import CurrentMember

from .dependencies import NoticeServiceDep
from .schemas import NoticeRequest, NoticeResponse


router = APIRouter(prefix="/notices", tags=["notices"])


@router.post(
    "",
    response_model=NoticeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create notice",
)
async def create_notice(
    data: NoticeRequest,
    notice_service: NoticeServiceDep,
    member: CurrentMember,
) -> NoticeResponse:
    """Publish a notice (admin only)."""
    notice = await notice_service.create_notice(member, data)
    return NoticeResponse.from_notice(notice)


@router.get("", response_model=list[NoticeResponse], summary="List notices")
async def list_notices(notice_service: NoticeServiceDep) -> list[NoticeResponse]:
    notices = await notice_service.list_notices()
    return [NoticeResponse.from_notice(n) for n in notices]


@router.get("/{notice_id}", response_model=NoticeResponse, summary="Get notice")
async def get_notice(
    notice_id: UUID, notice_service: NoticeServiceDep
) -> NoticeResponse:
    notice = await notice_service.get_notice(notice_id)
    return NoticeResponse.from_notice(notice)


@router.put("/{notice_id}", response_model=NoticeResponse, summary="Update notice")
async def update_notice(
    notice_id: UUID,
    data: NoticeRequest,
    notice_service: NoticeServiceDep,
    member: CurrentMember,
) -> NoticeResponse:
    notice = await notice_service.update_notice(member, notice_id, data)
    return NoticeResponse.from_notice(notice)


@router.delete(
    "/{notice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete notice",
)
async def delete_notice(
    notice_id: UUID,
    notice_service: NoticeServiceDep,
    member: CurrentMember,
) -> Response:
    await notice_service.delete_notice(member, notice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
