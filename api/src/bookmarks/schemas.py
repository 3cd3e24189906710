"""Pydantic schemas for bookmarks."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class BookmarkResponse(BaseModel):
    """Bookmarked post summary."""

    post_id: UUID
    title: str
    deadline: datetime
    bookmarked_at: datetime
