"""Tests for CommentService."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

import pytest

from src.comments.models import create_comment
from src.comments.schemas import CommentRequest
from src.comments.service import CommentService
from src.core.errors import BalanceTalkError, ErrorCode
from src.reports.models import ReportCategory, ReportTarget
from src.reports.schemas import ReportRequest
from src.votes.models import create_vote


@pytest.fixture
def comment_repository() -> Mock:
    repo = Mock()
    repo.insert = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.list_for_post = AsyncMock(return_value=[])
    repo.list_roots = AsyncMock(return_value=[])
    repo.list_replies = AsyncMock(return_value=[])
    repo.list_for_member = AsyncMock(return_value=[])
    repo.update_content = AsyncMock()
    repo.delete = AsyncMock()
    repo.add_like = AsyncMock(return_value=True)
    repo.remove_like = AsyncMock(return_value=True)
    repo.has_like = AsyncMock(return_value=False)
    repo.count_likes = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def post_repository() -> Mock:
    repo = Mock()
    repo.get = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def vote_repository() -> Mock:
    repo = Mock()
    repo.get = AsyncMock(return_value=None)
    repo.list_for_post = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def member_repository() -> Mock:
    repo = Mock()
    repo.get_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def report_service() -> Mock:
    service = Mock()
    service.file_report = AsyncMock(return_value=Mock())
    return service


@pytest.fixture
def service(
    comment_repository,
    post_repository,
    vote_repository,
    member_repository,
    report_service,
) -> CommentService:
    return CommentService(
        comment_repository=comment_repository,
        post_repository=post_repository,
        vote_repository=vote_repository,
        member_repository=member_repository,
        report_service=report_service,
    )


@pytest.fixture
def author(make_member):
    return make_member("author")


@pytest.fixture
def post(make_post, author, post_repository):
    post = make_post(author.id)
    post_repository.get.return_value = post
    return post


def _store(comment_repository: Mock, *comments) -> None:
    """Make ``get`` resolve the given comments by id."""
    by_id = {c.comment_id: c for c in comments}
    comment_repository.get.side_effect = lambda comment_id: by_id.get(comment_id)


class TestCreateComment:
    @pytest.mark.asyncio
    async def test_requires_vote(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        request = CommentRequest(
            content="Cats, obviously", selected_option_id=post.options[0].option_id
        )

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_comment(author, post.post_id, request)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_VOTE
        comment_repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_selected_option_comes_from_vote(
        self,
        service: CommentService,
        comment_repository: Mock,
        vote_repository: Mock,
        author,
        post,
    ) -> None:
        first, second = post.options
        vote_repository.get.return_value = create_vote(
            post.post_id, author.id, first.option_id
        )
        # The request names the other option; the recorded vote wins
        request = CommentRequest(content="Cats", selected_option_id=second.option_id)

        response = await service.create_comment(author, post.post_id, request)

        assert response.selected_option_id == first.option_id
        assert response.member_name == "author"
        assert response.parent_id is None
        comment_repository.insert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_option(
        self, service: CommentService, author, post
    ) -> None:
        request = CommentRequest(content="Hmm", selected_option_id=uuid4())

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_comment(author, post.post_id, request)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_BALANCE_OPTION

    @pytest.mark.asyncio
    async def test_missing_post(self, service: CommentService, author) -> None:
        request = CommentRequest(content="Hmm", selected_option_id=uuid4())

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_comment(author, uuid4(), request)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_POST


class TestReplies:
    @pytest.mark.asyncio
    async def test_reply_to_root(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        root = create_comment(post.post_id, author.id, "root")
        _store(comment_repository, root)

        response = await service.create_reply(
            author, post.post_id, root.comment_id, "hi"
        )

        assert response.parent_id == root.comment_id
        assert response.selected_option_id is None
        reply = comment_repository.insert.await_args.args[0]
        assert reply.is_reply

    @pytest.mark.asyncio
    async def test_reply_to_reply_exceeds_depth(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        root = create_comment(post.post_id, author.id, "root")
        reply = create_comment(post.post_id, author.id, "reply", root.comment_id)
        _store(comment_repository, root, reply)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_reply(author, post.post_id, reply.comment_id, "deep")
        assert exc_info.value.code == ErrorCode.EXCEED_MAX_DEPTH
        comment_repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deeper_nesting_when_configured(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        service.max_depth = 2
        root = create_comment(post.post_id, author.id, "root")
        reply = create_comment(post.post_id, author.id, "reply", root.comment_id)
        _store(comment_repository, root, reply)

        response = await service.create_reply(
            author, post.post_id, reply.comment_id, "deeper"
        )

        assert response.parent_id == reply.comment_id

    @pytest.mark.asyncio
    async def test_parent_on_another_post(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        elsewhere = create_comment(uuid4(), author.id, "elsewhere")
        _store(comment_repository, elsewhere)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_reply(
                author, post.post_id, elsewhere.comment_id, "hi"
            )
        assert exc_info.value.code == ErrorCode.NOT_FOUND_PARENT_COMMENT

    @pytest.mark.asyncio
    async def test_missing_parent(self, service: CommentService, author, post) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_reply(author, post.post_id, uuid4(), "hi")
        assert exc_info.value.code == ErrorCode.NOT_FOUND_COMMENT

    @pytest.mark.asyncio
    async def test_list_replies_of_unknown_parent(
        self, service: CommentService, author, post
    ) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.find_all_replies(post.post_id, uuid4(), author)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_PARENT_COMMENT


class TestListing:
    @pytest.mark.asyncio
    async def test_page_with_cursor(
        self,
        service: CommentService,
        comment_repository: Mock,
        vote_repository: Mock,
        author,
        post,
    ) -> None:
        vote_repository.get.return_value = create_vote(
            post.post_id, author.id, post.options[0].option_id
        )
        comments = [create_comment(post.post_id, author.id, str(i)) for i in range(3)]
        comment_repository.list_roots.return_value = comments

        page = await service.find_all(post.post_id, author, limit=2)

        comment_repository.list_roots.assert_awaited_once_with(
            post.post_id, 3, before=None, before_id=None
        )
        assert len(page.items) == 2
        assert page.has_more is True
        assert page.next_cursor is not None
        assert all(
            item.selected_option_id == post.options[0].option_id
            for item in page.items
        )

        comment_repository.list_roots.reset_mock()
        comment_repository.list_roots.return_value = []
        await service.find_all(post.post_id, author, cursor=page.next_cursor)
        kwargs = comment_repository.list_roots.await_args.kwargs
        assert kwargs["before"] == comments[1].created_at
        assert kwargs["before_id"] == comments[1].comment_id

    @pytest.mark.asyncio
    async def test_commenter_without_vote(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        comment_repository.list_roots.return_value = [
            create_comment(post.post_id, author.id, "orphan")
        ]

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.find_all(post.post_id, author)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_BALANCE_OPTION


class TestBestComments:
    @pytest.mark.asyncio
    async def test_too_few_comments(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        comment_repository.list_for_post.return_value = [
            create_comment(post.post_id, author.id, str(i)) for i in range(10)
        ]

        assert await service.find_best_comments(post.post_id, author) == []

    @pytest.mark.asyncio
    async def test_best_per_option(
        self,
        service: CommentService,
        comment_repository: Mock,
        vote_repository: Mock,
        make_member,
        author,
        post,
    ) -> None:
        first, second = post.options
        members = [make_member(f"m{i}") for i in range(16)]
        start = datetime.now(UTC)
        comments = []
        votes = []
        for i, member in enumerate(members):
            option = first if i % 2 == 0 else second
            votes.append(create_vote(post.post_id, member.id, option.option_id))
            comment = create_comment(post.post_id, member.id, f"comment {i}")
            comment.created_at = start + timedelta(seconds=i)
            comments.append(comment)
        comment_repository.list_for_post.return_value = comments
        vote_repository.list_for_post.return_value = votes
        likes = {comments[4].comment_id: 9, comments[3].comment_id: 2}
        comment_repository.count_likes.side_effect = lambda cid: likes.get(cid, 0)

        best = await service.find_best_comments(post.post_id, author)

        assert len(best) == 6
        first_best = [b for b in best if b.selected_option_id == first.option_id]
        second_best = [b for b in best if b.selected_option_id == second.option_id]
        # Most liked first, then the earliest among equals
        assert [b.content for b in first_best] == [
            "comment 4",
            "comment 0",
            "comment 2",
        ]
        assert [b.content for b in second_best] == [
            "comment 3",
            "comment 1",
            "comment 5",
        ]


class TestUpdateDelete:
    @pytest.mark.asyncio
    async def test_update_by_other_member(
        self,
        service: CommentService,
        comment_repository: Mock,
        make_member,
        author,
        post,
    ) -> None:
        comment = create_comment(post.post_id, author.id, "mine")
        _store(comment_repository, comment)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.update_comment(
                make_member("other"), post.post_id, comment.comment_id, "edited"
            )
        assert exc_info.value.code == ErrorCode.FORBIDDEN_COMMENT_MODIFY
        comment_repository.update_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_on_wrong_post(
        self,
        service: CommentService,
        comment_repository: Mock,
        author,
        post,
    ) -> None:
        comment = create_comment(uuid4(), author.id, "mine")
        _store(comment_repository, comment)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.update_comment(
                author, post.post_id, comment.comment_id, "edited"
            )
        assert exc_info.value.code == ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST

    @pytest.mark.asyncio
    async def test_update(
        self,
        service: CommentService,
        comment_repository: Mock,
        vote_repository: Mock,
        author,
        post,
    ) -> None:
        vote_repository.get.return_value = create_vote(
            post.post_id, author.id, post.options[1].option_id
        )
        comment = create_comment(post.post_id, author.id, "before")
        _store(comment_repository, comment)

        response = await service.update_comment(
            author, post.post_id, comment.comment_id, "after"
        )

        assert response.content == "after"
        assert response.selected_option_id == post.options[1].option_id
        comment_repository.update_content.assert_awaited_once_with(comment)

    @pytest.mark.asyncio
    async def test_delete_by_other_member(
        self,
        service: CommentService,
        comment_repository: Mock,
        make_member,
        author,
        post,
    ) -> None:
        comment = create_comment(post.post_id, author.id, "mine")
        _store(comment_repository, comment)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.delete_comment(
                make_member("other"), post.post_id, comment.comment_id
            )
        assert exc_info.value.code == ErrorCode.FORBIDDEN_COMMENT_DELETE
        comment_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_removes_replies(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        root = create_comment(post.post_id, author.id, "root")
        reply = create_comment(post.post_id, author.id, "reply", root.comment_id)
        _store(comment_repository, root, reply)
        comment_repository.list_replies.side_effect = lambda post_id, parent_id: (
            [reply] if parent_id == root.comment_id else []
        )

        await service.delete_comment(author, post.post_id, root.comment_id)

        deleted = [call.args[0] for call in comment_repository.delete.await_args_list]
        assert deleted == [reply, root]


class TestLikes:
    @pytest.mark.asyncio
    async def test_like_twice(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        comment = create_comment(post.post_id, author.id, "likeable")
        _store(comment_repository, comment)

        await service.like_comment(author, post.post_id, comment.comment_id)
        comment_repository.has_like.return_value = True

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.like_comment(author, post.post_id, comment.comment_id)
        assert exc_info.value.code == ErrorCode.ALREADY_LIKE_COMMENT
        comment_repository.add_like.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unlike_without_like(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        comment = create_comment(post.post_id, author.id, "likeable")
        _store(comment_repository, comment)
        comment_repository.remove_like.return_value = False

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.unlike_comment(author, post.post_id, comment.comment_id)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_LIKE_COMMENT

    @pytest.mark.asyncio
    async def test_like_on_other_post(
        self, service: CommentService, comment_repository: Mock, author, post
    ) -> None:
        comment = create_comment(uuid4(), author.id, "elsewhere")
        _store(comment_repository, comment)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.like_comment(author, post.post_id, comment.comment_id)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST


class TestRepliesFromNonVoters:
    @pytest.fixture
    def thread(self, comment_repository: Mock, vote_repository: Mock, author, post):
        """A voter's root comment with a reply from a member who never voted."""
        root = create_comment(post.post_id, author.id, "root")
        bystander_id = uuid4()
        reply = create_comment(post.post_id, bystander_id, "reply", root.comment_id)
        _store(comment_repository, root, reply)
        choice = post.options[0].option_id
        vote_repository.get.side_effect = lambda post_id, member_id: (
            create_vote(post_id, member_id, choice) if member_id == author.id else None
        )
        return root, reply

    @pytest.mark.asyncio
    async def test_list_replies(
        self,
        service: CommentService,
        comment_repository: Mock,
        author,
        post,
        thread,
    ) -> None:
        root, bystander_reply = thread
        voter_reply = create_comment(post.post_id, author.id, "mine", root.comment_id)
        comment_repository.list_replies.side_effect = lambda post_id, parent_id: (
            [voter_reply, bystander_reply] if parent_id == root.comment_id else []
        )
        comment_repository.has_like.return_value = True

        replies = await service.find_all_replies(post.post_id, root.comment_id, author)

        assert [r.content for r in replies] == ["mine", "reply"]
        assert replies[0].selected_option_id == post.options[0].option_id
        assert replies[1].selected_option_id is None
        assert all(r.my_like for r in replies)

    @pytest.mark.asyncio
    async def test_list_replies_anonymously(
        self,
        service: CommentService,
        comment_repository: Mock,
        post,
        thread,
    ) -> None:
        root, reply = thread
        comment_repository.list_replies.side_effect = lambda post_id, parent_id: (
            [reply] if parent_id == root.comment_id else []
        )

        replies = await service.find_all_replies(post.post_id, root.comment_id)

        assert len(replies) == 1
        assert replies[0].selected_option_id is None
        assert replies[0].my_like is False
        comment_repository.has_like.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_edit_reply_without_vote(
        self,
        service: CommentService,
        comment_repository: Mock,
        make_member,
        post,
        thread,
    ) -> None:
        _, reply = thread
        bystander = make_member("bystander")
        bystander.id = reply.member_id

        response = await service.update_comment(
            bystander, post.post_id, reply.comment_id, "after"
        )

        assert response.content == "after"
        assert response.selected_option_id is None
        comment_repository.update_content.assert_awaited_once_with(reply)

    @pytest.mark.asyncio
    async def test_edit_root_without_vote_writes_nothing(
        self,
        service: CommentService,
        comment_repository: Mock,
        vote_repository: Mock,
        author,
        post,
        thread,
    ) -> None:
        root, _ = thread
        vote_repository.get.side_effect = None
        vote_repository.get.return_value = None

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.update_comment(author, post.post_id, root.comment_id, "x")
        assert exc_info.value.code == ErrorCode.NOT_FOUND_BALANCE_OPTION
        comment_repository.update_content.assert_not_awaited()


class TestMyComments:
    @pytest.mark.asyncio
    async def test_newest_first_with_post_titles(
        self,
        service: CommentService,
        comment_repository: Mock,
        post_repository: Mock,
        author,
        post,
    ) -> None:
        start = datetime.now(UTC)
        older = create_comment(post.post_id, author.id, "older")
        older.created_at = start - timedelta(minutes=5)
        orphan = create_comment(uuid4(), author.id, "on a deleted post")
        orphan.created_at = start - timedelta(minutes=1)
        newer = create_comment(post.post_id, author.id, "newer")
        newer.created_at = start
        comment_repository.list_for_member.return_value = [newer, orphan, older]
        post_repository.get.side_effect = lambda post_id: (
            post if post_id == post.post_id else None
        )

        mine = await service.find_mine(author)

        comment_repository.list_for_member.assert_awaited_once_with(author.id, 100)
        assert [c.content for c in mine] == ["newer", "on a deleted post", "older"]
        assert [c.post_title for c in mine] == [post.title, None, post.title]
        # One lookup per distinct post
        assert post_repository.get.await_count == 2


class TestReportComment:
    @pytest.mark.asyncio
    async def test_report_comment(
        self,
        service: CommentService,
        comment_repository: Mock,
        report_service: Mock,
        make_member,
        author,
        post,
    ) -> None:
        comment = create_comment(post.post_id, author.id, "rude")
        _store(comment_repository, comment)
        reporter = make_member("reporter")

        await service.report_comment(
            reporter,
            post.post_id,
            comment.comment_id,
            ReportRequest(category=ReportCategory.INSULT, content="insulting"),
        )

        report_service.file_report.assert_awaited_once_with(
            reporter_id=reporter.id,
            author_id=author.id,
            target_type=ReportTarget.COMMENT,
            target_id=comment.comment_id,
            post_id=post.post_id,
            category=ReportCategory.INSULT,
            content="insulting",
        )

    @pytest.mark.asyncio
    async def test_report_comment_on_other_post(
        self,
        service: CommentService,
        comment_repository: Mock,
        report_service: Mock,
        make_member,
        author,
        post,
    ) -> None:
        comment = create_comment(uuid4(), author.id, "elsewhere")
        _store(comment_repository, comment)

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.report_comment(
                make_member("reporter"),
                post.post_id,
                comment.comment_id,
                ReportRequest(category=ReportCategory.SPAM, content="ads"),
            )
        assert exc_info.value.code == ErrorCode.NOT_FOUND_COMMENT_AT_THAT_POST
        report_service.file_report.assert_not_awaited()
