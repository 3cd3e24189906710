"""Bookmark service layer."""

from uuid import UUID

import structlog

from src.core.errors import BalanceTalkError, ErrorCode
from src.members.models import Member
from src.posts.repository import PostRepository

from .models import create_bookmark
from .repository import BookmarkRepository
from .schemas import BookmarkResponse


logger = structlog.get_logger(__name__)


class BookmarkService:
    """Member-scoped bookmarks of posts."""

    def __init__(
        self,
        bookmark_repository: BookmarkRepository,
        post_repository: PostRepository,
    ):
        self.bookmark_repository = bookmark_repository
        self.post_repository = post_repository

    async def add(self, member: Member, post_id: UUID) -> BookmarkResponse:
        """Bookmark a post.

        Raises:
            BalanceTalkError(NOT_FOUND_POST)
            BalanceTalkError(ALREADY_BOOKMARKED)
        """
        post = await self.post_repository.get(post_id)
        if post is None:
            raise BalanceTalkError(ErrorCode.NOT_FOUND_POST)

        bookmark = create_bookmark(member_id=member.id, post_id=post_id)
        if not await self.bookmark_repository.insert(bookmark):
            raise BalanceTalkError(ErrorCode.ALREADY_BOOKMARKED)

        logger.info("bookmark_added", post_id=str(post_id), member_id=str(member.id))
        return BookmarkResponse(
            post_id=post.post_id,
            title=post.title,
            deadline=post.deadline,
            bookmarked_at=bookmark.created_at,
        )

    async def list_bookmarks(self, member: Member) -> list[BookmarkResponse]:
        """The member's bookmarks, newest first.

        Bookmarks whose post has disappeared are skipped.
        """
        responses = []
        for bookmark in await self.bookmark_repository.list_for_member(member.id):
            post = await self.post_repository.get(bookmark.post_id)
            if post is None:
                continue
            responses.append(
                BookmarkResponse(
                    post_id=post.post_id,
                    title=post.title,
                    deadline=post.deadline,
                    bookmarked_at=bookmark.created_at,
                )
            )
        return responses

    async def remove(self, member: Member, post_id: UUID) -> None:
        """Remove a bookmark.

        Raises:
            BalanceTalkError(NOT_FOUND_BOOKMARK)
        """
        if not await self.bookmark_repository.delete(member.id, post_id):
            raise BalanceTalkError(ErrorCode.NOT_FOUND_BOOKMARK)
        logger.info("bookmark_removed", post_id=str(post_id), member_id=str(member.id))
