"""Post service layer.

Business logic for:
- Creating posts, gated by the Redis "can post" marker
- Reading, listing, searching and ranking posts
- Post likes and reports
- Deleting a post together with everything that hangs off it
"""

from collections.abc import Callable
from typing import Any
from uuid import UUID

import redis.asyncio as redis
import structlog

from src.auth.permissions import counts_post_view
from src.bookmarks.repository import BookmarkRepository
from src.comments.repository import CommentRepository
from src.core.errors import BalanceTalkError, ErrorCode
from src.core.redis import post_permission_key
from src.files.repository import FileRepository
from src.members.models import Member
from src.members.repository import MemberRepository
from src.reports.models import Report, ReportTarget
from src.reports.schemas import ReportRequest
from src.reports.service import ReportService
from src.utils.dates import ensure_utc_aware, utcnow
from src.votes.repository import VoteRepository

from .models import Post, create_post
from .ranking import PostStats, default_post_rank, top_n
from .repository import PostRepository
from .schemas import BalanceOptionResponse, PostRequest, PostResponse, SearchType


logger = structlog.get_logger(__name__)


class PostService:
    """Service for balance posts."""

    def __init__(
        self,
        post_repository: PostRepository,
        vote_repository: VoteRepository,
        bookmark_repository: BookmarkRepository,
        comment_repository: CommentRepository,
        member_repository: MemberRepository,
        file_repository: FileRepository,
        report_service: ReportService,
        redis_client: redis.Redis | None = None,
        permission_ttl: int = 86400,
        scan_limit: int = 1000,
        best_size: int = 5,
        rank: Callable[[PostStats], Any] = default_post_rank,
    ):
        self.post_repository = post_repository
        self.vote_repository = vote_repository
        self.bookmark_repository = bookmark_repository
        self.comment_repository = comment_repository
        self.member_repository = member_repository
        self.file_repository = file_repository
        self.report_service = report_service
        self.redis = redis_client
        self.permission_ttl = permission_ttl
        self.scan_limit = scan_limit
        self.best_size = best_size
        self.rank = rank

    # ==========================================================================
    # Helpers
    # ==========================================================================

    async def _get_post(self, post_id: UUID) -> Post:
        post = await self.post_repository.get(post_id)
        if post is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_POST)
        return post

    async def _to_response(self, post: Post, member: Member | None) -> PostResponse:
        """Build the response with counters and the requester's own flags."""
        author = await self.member_repository.get_by_id(post.member_id)

        my_like = False
        my_bookmark = False
        my_vote = None
        if member is not None:
            my_like = await self.post_repository.has_like(post.post_id, member.id)
            my_bookmark = await self.bookmark_repository.exists(
                member.id, post.post_id
            )
            vote = await self.vote_repository.get(post.post_id, member.id)
            my_vote = vote.option_id if vote else None

        return PostResponse(
            id=post.post_id,
            title=post.title,
            deadline=post.deadline,
            category=post.category,
            tags=post.tags,
            balance_options=[
                BalanceOptionResponse.from_option(o) for o in post.options
            ],
            author_id=post.member_id,
            author_nickname=author.nickname if author else None,
            likes_count=await self.post_repository.count_likes(post.post_id),
            views=await self.post_repository.get_views(post.post_id),
            my_like=my_like,
            my_bookmark=my_bookmark,
            my_vote=my_vote,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )

    async def _can_post(self, member: Member) -> bool:
        """Check the Redis marker. Unavailable Redis means no permission."""
        if self.redis is None:
            logger.warning("post_permission_unavailable", member_id=str(member.id))
            return False
        try:
            return bool(await self.redis.exists(post_permission_key(member.email)))
        except redis.RedisError as e:
            logger.warning(
                "post_permission_check_failed",
                member_id=str(member.id),
                error=str(e),
            )
            return False

    # ==========================================================================
    # Create
    # ==========================================================================

    async def grant_post_permission(self, email: str) -> bool:
        """Set the "can post" marker for a member, expiring after the TTL.

        Returns:
            False when Redis is unavailable
        """
        if self.redis is None:
            logger.warning("post_permission_grant_unavailable")
            return False
        await self.redis.set(post_permission_key(email), "1", ex=self.permission_ttl)
        logger.info("post_permission_granted", ttl=self.permission_ttl)
        return True

    async def create_post(self, member: Member, data: PostRequest) -> PostResponse:
        """Create a post with its two options.

        Raises:
            BalanceTalkError(FORBIDDEN_POST_CREATE): No "can post" marker
            BalanceTalkError(INVALID_DEADLINE): Deadline not in the future
            BalanceTalkError(NOT_FOUND_FILE): Unknown option image
        """
        if not await self._can_post(member):
            raise BalanceTalkError(ErrorCode.FORBIDDEN_POST_CREATE)

        deadline = ensure_utc_aware(data.deadline)
        if deadline <= utcnow():
            raise BalanceTalkError(ErrorCode.INVALID_DEADLINE)

        options = []
        for option in data.balance_options:
            fields = option.model_dump()
            if option.stored_file_name:
                stored = await self.file_repository.find_by_stored_name(
                    option.stored_file_name
                )
                if stored is None:
                    raise BalanceTalkError(ErrorCode.NOT_FOUND_FILE)
                fields["image_url"] = stored.url
            options.append(fields)

        post = create_post(
            member_id=member.id,
            title=data.title,
            deadline=deadline,
            category=data.category,
            options=options,
            tags=data.tags,
        )
        await self.post_repository.insert(post)

        logger.info(
            "post_created",
            post_id=str(post.post_id),
            member_id=str(member.id),
            tags=len(post.tags),
        )
        return await self._to_response(post, member)

    # ==========================================================================
    # Read
    # ==========================================================================

    async def get_post(
        self, post_id: UUID, member: Member | None = None
    ) -> PostResponse:
        """Read a post. Anonymous and USER reads bump the view counter."""
        post = await self._get_post(post_id)
        if counts_post_view(member.role if member else None):
            await self.post_repository.increment_views(post_id)
        return await self._to_response(post, member)

    async def list_posts(
        self, member: Member | None = None, limit: int | None = None
    ) -> list[PostResponse]:
        """Posts newest first. Listing never counts views."""
        posts = await self.post_repository.list_posts(self.scan_limit)
        if limit is not None:
            posts = posts[:limit]
        return [await self._to_response(post, member) for post in posts]

    async def search(
        self,
        keyword: str,
        search_type: SearchType = SearchType.TITLE,
        member: Member | None = None,
    ) -> list[PostResponse]:
        """Find posts by title substring (case-insensitive) or exact tag."""
        keyword = keyword.strip()
        if not keyword:
            return []

        if search_type == SearchType.TAG:
            posts = await self.post_repository.list_by_tag(keyword, self.scan_limit)
        else:
            needle = keyword.lower()
            posts = [
                post
                for post in await self.post_repository.list_posts(self.scan_limit)
                if needle in post.title.lower()
            ]
        return [await self._to_response(post, member) for post in posts]

    async def best_posts(self, member: Member | None = None) -> list[PostResponse]:
        """Top posts by the configured ranking policy."""
        stats = []
        for post in await self.post_repository.list_posts(self.scan_limit):
            counts = await self.vote_repository.count_by_option(post.post_id)
            stats.append(
                PostStats(
                    post=post,
                    likes=await self.post_repository.count_likes(post.post_id),
                    votes=sum(counts.values()),
                    views=await self.post_repository.get_views(post.post_id),
                )
            )
        best = top_n(stats, self.rank, self.best_size)
        return [await self._to_response(s.post, member) for s in best]

    # ==========================================================================
    # Delete
    # ==========================================================================

    async def delete_post(self, member: Member, post_id: UUID) -> None:
        """Delete a post and everything owned by it.

        Raises:
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(FORBIDDEN_POST_DELETE): Requester is not the author
        """
        post = await self._get_post(post_id)
        if post.member_id != member.id:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_POST_DELETE)

        comments = await self.comment_repository.delete_all_for_post(post_id)
        await self.bookmark_repository.delete_all_for_post(post_id)
        await self.vote_repository.delete_all_for_post(post_id)
        await self.post_repository.delete(post)

        logger.info(
            "post_deleted",
            post_id=str(post_id),
            member_id=str(member.id),
            comments=comments,
        )

    # ==========================================================================
    # Likes and reports
    # ==========================================================================

    async def like_post(self, member: Member, post_id: UUID) -> None:
        """Like a post.

        Raises:
            BalanceTalkError(ALREADY_LIKE_POST)
        """
        await self._get_post(post_id)
        if await self.post_repository.has_like(post_id, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_LIKE_POST)
        if not await self.post_repository.add_like(post_id, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_LIKE_POST)
        logger.info("post_liked", post_id=str(post_id), member_id=str(member.id))

    async def unlike_post(self, member: Member, post_id: UUID) -> None:
        """Remove a like.

        Raises:
            BalanceTalkError(NOT_FOUND_LIKE_POST)
        """
        await self._get_post(post_id)
        if not await self.post_repository.remove_like(post_id, member.id):
            raise BalanceTalkError(ErrorCode.NOT_FOUND_LIKE_POST)
        logger.info("post_unliked", post_id=str(post_id), member_id=str(member.id))

    async def report_post(
        self, member: Member, post_id: UUID, data: ReportRequest
    ) -> Report:
        post = await self._get_post(post_id)
        return await self.report_service.file_report(
            reporter_id=member.id,
            author_id=post.member_id,
            target_type=ReportTarget.POST,
            target_id=post_id,
            post_id=post_id,
            category=data.category,
            content=data.content,
        )
