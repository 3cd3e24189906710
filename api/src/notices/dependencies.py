"""FastAPI dependencies for notices."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import NoticeService


async def get_notice_service(request: Request) -> NoticeService:
    """Get notice service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "notice_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notice service not available",
        )
    return app_state.notice_service


NoticeServiceDep = Annotated[NoticeService, Depends(get_notice_service)]
