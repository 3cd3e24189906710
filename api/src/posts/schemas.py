"""Pydantic schemas for posts.

Request and response models for:
- Posts: create, read, list, search, best
- Balance options: the two choices embedded in a post
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .models import BALANCE_OPTION_COUNT, BalanceOption, PostCategory


TITLE_MAX_LENGTH = 50
TAG_MAX_LENGTH = 20


class SearchType(str, Enum):
    """What a post search keyword is matched against."""

    TITLE = "title"
    TAG = "tag"


# ==============================================================================
# Request Schemas
# ==============================================================================


class BalanceOptionRequest(BaseModel):
    """One choice of a new post."""

    title: str = Field(..., min_length=1, max_length=100, description="Option title")
    description: str | None = Field(
        None, max_length=1000, description="Option description"
    )
    stored_file_name: str | None = Field(
        None, max_length=255, description="Stored name of an uploaded image"
    )


class PostRequest(BaseModel):
    """Post creation request."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    deadline: datetime = Field(..., description="Voting deadline, must be future")
    category: PostCategory = Field(PostCategory.CASUAL)
    balance_options: list[BalanceOptionRequest] = Field(
        ...,
        min_length=BALANCE_OPTION_COUNT,
        max_length=BALANCE_OPTION_COUNT,
        description="Exactly two options",
    )
    tags: list[str] = Field(default_factory=list, max_length=10)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Title cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        tags = []
        for tag in v:
            tag = tag.strip()
            if not tag:
                continue
            if len(tag) > TAG_MAX_LENGTH:
                msg = f"Tags cannot exceed {TAG_MAX_LENGTH} characters"
                raise ValueError(msg)
            tags.append(tag)
        return tags


# ==============================================================================
# Response Schemas
# ==============================================================================


class BalanceOptionResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    stored_file_name: str | None = None
    image_url: str | None = None

    @classmethod
    def from_option(cls, option: BalanceOption) -> "BalanceOptionResponse":
        return cls(
            id=option.option_id,
            title=option.title,
            description=option.description,
            stored_file_name=option.stored_file_name,
            image_url=option.image_url,
        )


class PostResponse(BaseModel):
    """Post as seen by the requester.

    ``my_like``, ``my_bookmark`` and ``my_vote`` are relative to the
    requester and empty for anonymous requests.
    """

    id: UUID
    title: str
    deadline: datetime
    category: PostCategory
    tags: list[str] = []
    balance_options: list[BalanceOptionResponse]
    author_id: UUID
    author_nickname: str | None = None
    likes_count: int = 0
    views: int = 0
    my_like: bool = False
    my_bookmark: bool = False
    my_vote: UUID | None = None
    created_at: datetime
    updated_at: datetime | None = None
