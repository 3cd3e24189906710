"""FastAPI dependencies for members."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import MemberService


async def get_member_service(request: Request) -> MemberService:
    """Get member service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "member_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Member service not available",
        )
    return app_state.member_service


MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]
