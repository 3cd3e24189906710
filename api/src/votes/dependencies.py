"""FastAPI dependencies for votes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import VoteService


async def get_vote_service(request: Request) -> VoteService:
    """Get vote service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "vote_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vote service not available",
        )
    return app_state.vote_service


VoteServiceDep = Annotated[VoteService, Depends(get_vote_service)]
