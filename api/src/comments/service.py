"""Comment service layer.

Business logic for:
- Comments on posts, gated by a prior vote
- Replies with a bounded nesting depth
- Listings that carry per-requester like flags and each author's vote
- Best comments per option
- Comment likes and reports
"""

from collections.abc import Callable
from typing import Any
from uuid import UUID

import structlog

from src.core.errors import BalanceTalkError, ErrorCode
from src.core.pagination import decode_cursor, encode_cursor
from src.members.models import Member
from src.members.repository import MemberRepository
from src.posts.models import Post
from src.posts.ranking import default_comment_rank, top_n
from src.posts.repository import PostRepository
from src.reports.models import Report, ReportTarget
from src.reports.schemas import ReportRequest
from src.reports.service import ReportService
from src.utils.dates import utcnow
from src.votes.repository import VoteRepository

from .models import Comment, create_comment
from .repository import CommentRepository
from .schemas import (
    CommentListResponse,
    CommentRequest,
    CommentResponse,
    MyCommentResponse,
)


logger = structlog.get_logger(__name__)


class CommentService:
    """Service for comments and replies on posts."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        vote_repository: VoteRepository,
        member_repository: MemberRepository,
        report_service: ReportService,
        max_depth: int = 1,
        best_size: int = 3,
        best_min_count: int = 15,
        rank: Callable[[int, Any], Any] = default_comment_rank,
    ):
        self.comment_repository = comment_repository
        self.post_repository = post_repository
        self.vote_repository = vote_repository
        self.member_repository = member_repository
        self.report_service = report_service
        self.max_depth = max_depth
        self.best_size = best_size
        self.best_min_count = best_min_count
        self.rank = rank

    # ==========================================================================
    # Helpers
    # ==========================================================================

    async def _get_post(self, post_id: UUID) -> Post:
        post = await self.post_repository.get(post_id)
        if post is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_POST)
        return post

    async def _get_comment(self, comment_id: UUID) -> Comment:
        comment = await self.comment_repository.get(comment_id)
        if comment is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_COMMENT)
        return comment

    async def _get_comment_on_post(self, post_id: UUID, comment_id: UUID) -> Comment:
        comment = await self._get_comment(comment_id)
        if comment.post_id != post_id:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST)
        return comment

    async def _selected_option(self, comment: Comment) -> UUID | None:
        """The option the commenter voted for.

        Root comments always have a vote behind them. Replies may come from
        members who never voted; their option is None.

        Raises:
            BalanceTalkError(NOT_FOUND_BALANCE_OPTION): Root comment without a
                vote on record
        """
        vote = await self.vote_repository.get(comment.post_id, comment.member_id)
        if vote is not None:
            return vote.option_id
        if comment.is_reply:
            return None
        raise BalanceTalkError(ErrorCode.NOT_FOUND_BALANCE_OPTION)

    async def _member_name(
        self, member_id: UUID, names: dict[UUID, str | None]
    ) -> str | None:
        if member_id not in names:
            author = await self.member_repository.get_by_id(member_id)
            names[member_id] = author.nickname if author else None
        return names[member_id]

    async def _to_response(
        self,
        comment: Comment,
        member: Member | None,
        names: dict[UUID, str | None],
        selected_option_id: UUID | None = None,
    ) -> CommentResponse:
        if selected_option_id is None:
            selected_option_id = await self._selected_option(comment)
        my_like = False
        if member is not None:
            my_like = await self.comment_repository.has_like(
                comment.comment_id, member.id
            )
        replies = await self.comment_repository.list_replies(
            comment.post_id, comment.comment_id
        )
        return CommentResponse.from_comment(
            comment,
            member_name=await self._member_name(comment.member_id, names),
            selected_option_id=selected_option_id,
            likes_count=await self.comment_repository.count_likes(comment.comment_id),
            my_like=my_like,
            reply_count=len(replies),
        )

    async def _depth(self, comment: Comment) -> int:
        """Count ancestor edges up to the root, stopping at max_depth."""
        depth = 0
        current = comment
        while current.parent_id is not None and depth < self.max_depth:
            depth += 1
            parent = await self.comment_repository.get(current.parent_id)
            if parent is None:
                break
            current = parent
        return depth

    async def _delete_tree(self, comment: Comment) -> None:
        for reply in await self.comment_repository.list_replies(
            comment.post_id, comment.comment_id
        ):
            await self._delete_tree(reply)
        await self.comment_repository.delete(comment)

    # ==========================================================================
    # Create
    # ==========================================================================

    async def create_comment(
        self, member: Member, post_id: UUID, data: CommentRequest
    ) -> CommentResponse:
        """Comment on a post.

        Raises:
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(NOT_FOUND_BALANCE_OPTION): Option not on the post
            BalanceTalkError(NOT_FOUND_VOTE): Member has not voted on the post
        """
        post = await self._get_post(post_id)
        if post.get_option(data.selected_option_id) is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_BALANCE_OPTION)

        vote = await self.vote_repository.get(post_id, member.id)
        if vote is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_VOTE)

        comment = create_comment(
            post_id=post_id, member_id=member.id, content=data.content
        )
        await self.comment_repository.insert(comment)

        logger.info(
            "comment_created",
            comment_id=str(comment.comment_id),
            post_id=str(post_id),
            member_id=str(member.id),
        )
        return CommentResponse.from_comment(
            comment,
            member_name=member.nickname,
            selected_option_id=vote.option_id,
        )

    async def create_reply(
        self, member: Member, post_id: UUID, parent_id: UUID, content: str
    ) -> CommentResponse:
        """Reply to a comment.

        Raises:
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(NOT_FOUND_COMMENT): Parent does not exist
            BalanceTalkError(NOT_FOUND_PARENT_COMMENT): Parent on another post
            BalanceTalkError(EXCEED_MAX_DEPTH): Reply would nest too deep
        """
        await self._get_post(post_id)
        parent = await self._get_comment(parent_id)
        if parent.post_id != post_id:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_PARENT_COMMENT)

        if await self._depth(parent) >= self.max_depth:
            raise BalanceTalkError(ErrorCode.EXCEED_MAX_DEPTH)

        reply = create_comment(
            post_id=post_id,
            member_id=member.id,
            content=content,
            parent_id=parent.comment_id,
        )
        await self.comment_repository.insert(reply)

        logger.info(
            "reply_created",
            comment_id=str(reply.comment_id),
            parent_id=str(parent_id),
            post_id=str(post_id),
            member_id=str(member.id),
        )
        return CommentResponse.from_comment(
            reply,
            member_name=member.nickname,
            selected_option_id=await self._selected_option(reply),
        )

    # ==========================================================================
    # Read
    # ==========================================================================

    async def find_all(
        self,
        post_id: UUID,
        member: Member | None = None,
        cursor: str | None = None,
        limit: int = 20,
    ) -> CommentListResponse:
        """Root comments of a post, newest first, with cursor pagination."""
        await self._get_post(post_id)

        before, before_id = decode_cursor(cursor) if cursor else (None, None)
        comments = await self.comment_repository.list_roots(
            post_id, limit + 1, before=before, before_id=before_id
        )
        has_more = len(comments) > limit
        comments = comments[:limit]

        names: dict[UUID, str | None] = {}
        items = [await self._to_response(c, member, names) for c in comments]

        next_cursor = None
        if has_more and comments:
            last = comments[-1]
            next_cursor = encode_cursor(last.created_at, last.comment_id)

        return CommentListResponse(
            items=items, has_more=has_more, next_cursor=next_cursor
        )

    async def find_all_replies(
        self, post_id: UUID, parent_id: UUID, member: Member | None = None
    ) -> list[CommentResponse]:
        """Direct replies to a comment, oldest first."""
        await self._get_post(post_id)
        parent = await self.comment_repository.get(parent_id)
        if parent is None or parent.post_id != post_id:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_PARENT_COMMENT)

        replies = await self.comment_repository.list_replies(post_id, parent_id)
        names: dict[UUID, str | None] = {}
        return [await self._to_response(r, member, names) for r in replies]

    async def find_best_comments(
        self, post_id: UUID, member: Member | None = None
    ) -> list[CommentResponse]:
        """Best root comments for each option of the post.

        Empty unless the post has more than ``best_min_count`` comments.
        Candidates for an option are comments by members who voted for it.
        """
        post = await self._get_post(post_id)
        comments = await self.comment_repository.list_for_post(post_id)
        if len(comments) <= self.best_min_count:
            return []

        choices = {
            vote.member_id: vote.option_id
            for vote in await self.vote_repository.list_for_post(post_id)
        }
        roots = [c for c in comments if not c.is_reply]
        likes = {
            c.comment_id: await self.comment_repository.count_likes(c.comment_id)
            for c in roots
        }

        names: dict[UUID, str | None] = {}
        responses = []
        for option in post.options:
            candidates = [
                c for c in roots if choices.get(c.member_id) == option.option_id
            ]
            best = top_n(
                candidates,
                lambda c: self.rank(likes[c.comment_id], c.created_at),
                self.best_size,
            )
            for comment in best:
                responses.append(
                    await self._to_response(
                        comment, member, names, selected_option_id=option.option_id
                    )
                )
        return responses

    async def find_mine(
        self, member: Member, limit: int = 100
    ) -> list[MyCommentResponse]:
        """The member's own comments, newest first."""
        comments = await self.comment_repository.list_for_member(member.id, limit)
        titles: dict[UUID, str | None] = {}
        responses = []
        for comment in comments:
            if comment.post_id not in titles:
                post = await self.post_repository.get(comment.post_id)
                titles[comment.post_id] = post.title if post else None
            responses.append(
                MyCommentResponse(
                    id=comment.comment_id,
                    post_id=comment.post_id,
                    post_title=titles[comment.post_id],
                    content=comment.content,
                    created_at=comment.created_at,
                    last_modified_at=comment.updated_at,
                )
            )
        return responses

    # ==========================================================================
    # Update / Delete
    # ==========================================================================

    async def update_comment(
        self, member: Member, post_id: UUID, comment_id: UUID, content: str
    ) -> CommentResponse:
        """Edit a comment's content.

        Raises:
            BalanceTalkError(NOT_FOUND_COMMENT)
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(FORBIDDEN_COMMENT_MODIFY): Not the author
            BalanceTalkError(NOT_FOUND_COMMENT_AT_THAT_POST)
        """
        comment = await self._get_comment(comment_id)
        await self._get_post(post_id)
        if comment.member_id != member.id:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_COMMENT_MODIFY)
        if comment.post_id != post_id:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST)

        selected_option_id = await self._selected_option(comment)

        comment.content = content
        comment.updated_at = utcnow()
        await self.comment_repository.update_content(comment)

        logger.info("comment_updated", comment_id=str(comment_id))
        return await self._to_response(
            comment,
            member,
            {member.id: member.nickname},
            selected_option_id=selected_option_id,
        )

    async def delete_comment(
        self, member: Member, post_id: UUID, comment_id: UUID
    ) -> None:
        """Delete a comment with its replies and likes.

        Raises:
            BalanceTalkError(NOT_FOUND_COMMENT)
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(FORBIDDEN_COMMENT_DELETE): Not the author
            BalanceTalkError(NOT_FOUND_COMMENT_AT_THAT_POST)
        """
        comment = await self._get_comment(comment_id)
        await self._get_post(post_id)
        if comment.member_id != member.id:
            raise BalanceTalkError(ErrorCode.FORBIDDEN_COMMENT_DELETE)
        if comment.post_id != post_id:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST)

        await self._delete_tree(comment)
        logger.info("comment_deleted", comment_id=str(comment_id))

    # ==========================================================================
    # Likes and reports
    # ==========================================================================

    async def like_comment(
        self, member: Member, post_id: UUID, comment_id: UUID
    ) -> None:
        """Like a comment.

        Raises:
            BalanceTalkError(ALREADY_LIKE_COMMENT)
        """
        await self._get_comment_on_post(post_id, comment_id)
        if await self.comment_repository.has_like(comment_id, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_LIKE_COMMENT)
        if not await self.comment_repository.add_like(comment_id, member.id):
            raise BalanceTalkError(ErrorCode.ALREADY_LIKE_COMMENT)
        logger.info(
            "comment_liked", comment_id=str(comment_id), member_id=str(member.id)
        )

    async def unlike_comment(
        self, member: Member, post_id: UUID, comment_id: UUID
    ) -> None:
        """Remove a like.

        Raises:
            BalanceTalkError(NOT_FOUND_LIKE_COMMENT)
        """
        await self._get_comment_on_post(post_id, comment_id)
        if not await self.comment_repository.remove_like(comment_id, member.id):
            raise BalanceTalkError(ErrorCode.NOT_FOUND_LIKE_COMMENT)
        logger.info(
            "comment_unliked", comment_id=str(comment_id), member_id=str(member.id)
        )

    async def report_comment(
        self, member: Member, post_id: UUID, comment_id: UUID, data: ReportRequest
    ) -> Report:
        comment = await self._get_comment_on_post(post_id, comment_id)
        return await self.report_service.file_report(
            reporter_id=member.id,
            author_id=comment.member_id,
            target_type=ReportTarget.COMMENT,
            target_id=comment_id,
            post_id=post_id,
            category=data.category,
            content=data.content,
        )
