"""FastAPI dependencies for bookmarks."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import BookmarkService


async def get_bookmark_service(request: Request) -> BookmarkService:
    """Get bookmark service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "bookmark_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Bookmark service not available",
        )
    return app_state.bookmark_service


BookmarkServiceDep = Annotated[BookmarkService, Depends(get_bookmark_service)]
