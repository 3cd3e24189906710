"""Pydantic schemas for comments and replies.

Request/Response models with validation for:
- Comment and reply creation, update
- Comment listings with cursor pagination
- The member's own comments
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import Comment


CONTENT_MAX_LENGTH = 2000


def _strip_content(v: str) -> str:
    v = v.strip()
    if not v:
        msg = "Content cannot be empty"
        raise ValueError(msg)
    return v


# ==============================================================================
# Request Schemas
# ==============================================================================


class CommentRequest(BaseModel):
    """Request to comment on a post.

    The member must already have voted; ``selected_option_id`` must be one
    of the post's options.
    """

    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)
    selected_option_id: UUID

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _strip_content(v)


class ReplyRequest(BaseModel):
    """Request to reply to a comment."""

    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _strip_content(v)


class UpdateCommentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _strip_content(v)


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """A comment or reply as seen by the requester."""

    id: UUID
    post_id: UUID
    parent_id: UUID | None = None
    content: str
    member_id: UUID
    member_name: str | None = None
    selected_option_id: UUID | None = None
    likes_count: int = 0
    my_like: bool = False
    reply_count: int = 0
    created_at: datetime
    last_modified_at: datetime

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        member_name: str | None = None,
        selected_option_id: UUID | None = None,
        likes_count: int = 0,
        my_like: bool = False,
        reply_count: int = 0,
    ) -> "CommentResponse":
        return cls(
            id=comment.comment_id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            content=comment.content,
            member_id=comment.member_id,
            member_name=member_name,
            selected_option_id=selected_option_id,
            likes_count=likes_count,
            my_like=my_like,
            reply_count=reply_count,
            created_at=comment.created_at,
            last_modified_at=comment.updated_at,
        )


class CommentListResponse(BaseModel):
    """Paginated list of root comments."""

    items: list[CommentResponse]
    has_more: bool
    next_cursor: str | None = None


class MyCommentResponse(BaseModel):
    """One of the current member's comments, for the my-page listing."""

    id: UUID
    post_id: UUID
    post_title: str | None = None
    content: str
    created_at: datetime
    last_modified_at: datetime
