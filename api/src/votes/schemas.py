"""Pydantic schemas for votes."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from .models import Vote


class VoteRequest(BaseModel):
    """Request to vote for one option of a post."""

    selected_option_id: UUID


class VoteResponse(BaseModel):
    post_id: UUID
    selected_option_id: UUID
    created_at: datetime

    @classmethod
    def from_vote(cls, vote: Vote) -> "VoteResponse":
        return cls(
            post_id=vote.post_id,
            selected_option_id=vote.option_id,
            created_at=vote.created_at,
        )


class OptionVoteCount(BaseModel):
    option_id: UUID
    title: str
    vote_count: int


class VoteResultResponse(BaseModel):
    """Vote counts per option of a post."""

    post_id: UUID
    total: int
    options: list[OptionVoteCount]
    my_vote: UUID | None = None
