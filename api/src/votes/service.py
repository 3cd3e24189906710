"""Vote service layer.

One member, one option, one post. Votes cannot be changed or withdrawn and
are only accepted until the post deadline.
"""

from uuid import UUID

import structlog

from src.core.errors import BalanceTalkError, ErrorCode
from src.members.models import Member
from src.posts.models import Post
from src.posts.repository import PostRepository

from .models import Vote, create_vote
from .repository import VoteRepository
from .schemas import OptionVoteCount, VoteResultResponse


logger = structlog.get_logger(__name__)


class VoteService:
    """Service for casting and counting votes."""

    def __init__(
        self, vote_repository: VoteRepository, post_repository: PostRepository
    ):
        self.vote_repository = vote_repository
        self.post_repository = post_repository

    async def _get_post(self, post_id: UUID) -> Post:
        post = await self.post_repository.get(post_id)
        if post is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_POST)
        return post

    async def vote(self, member: Member, post_id: UUID, option_id: UUID) -> Vote:
        """Cast the member's vote on a post.

        Raises:
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(NOT_FOUND_BALANCE_OPTION): If the option is not
                one of the post's options
            BalanceTalkError(EXPIRED_POST_DEADLINE): If voting has closed
            BalanceTalkError(ALREADY_VOTE): If the member already voted
        """
        post = await self._get_post(post_id)
        if post.get_option(option_id) is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_BALANCE_OPTION)
        if post.is_closed():
            raise BalanceTalkError(ErrorCode.EXPIRED_POST_DEADLINE)

        if await self.vote_repository.get(post_id, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_VOTE)

        vote = create_vote(post_id=post_id, member_id=member.id, option_id=option_id)
        if not await self.vote_repository.insert(vote):
            raise BalanceTalkError(ErrorCode.ALREADY_VOTE)

        logger.info(
            "vote_cast",
            post_id=str(post_id),
            option_id=str(option_id),
            member_id=str(member.id),
        )
        return vote

    async def get_results(
        self, post_id: UUID, member: Member | None = None
    ) -> VoteResultResponse:
        """Vote counts per option, plus the requester's own choice."""
        post = await self._get_post(post_id)
        counts = await self.vote_repository.count_by_option(post_id)

        my_vote = None
        if member is not None:
            vote = await self.vote_repository.get(post_id, member.id)
            my_vote = vote.option_id if vote else None

        options = [
            OptionVoteCount(
                option_id=option.option_id,
                title=option.title,
                vote_count=counts.get(option.option_id, 0),
            )
            for option in post.options
        ]
        return VoteResultResponse(
            post_id=post_id,
            total=sum(o.vote_count for o in options),
            options=options,
            my_vote=my_vote,
        )
