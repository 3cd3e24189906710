"""Tests for PostService."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import pytest
import redis.asyncio as redis

from src.auth.permissions import MemberRole
from src.core.errors import BalanceTalkError, ErrorCode
from src.core.redis import post_permission_key
from src.files.models import StoredFile
from src.posts.schemas import PostRequest, SearchType
from src.posts.service import PostService
from src.reports.models import ReportCategory, ReportTarget
from src.reports.schemas import ReportRequest


@pytest.fixture
def post_repository() -> Mock:
    repo = Mock()
    repo.insert = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.list_posts = AsyncMock(return_value=[])
    repo.list_by_tag = AsyncMock(return_value=[])
    repo.delete = AsyncMock()
    repo.add_like = AsyncMock(return_value=True)
    repo.remove_like = AsyncMock(return_value=True)
    repo.has_like = AsyncMock(return_value=False)
    repo.count_likes = AsyncMock(return_value=0)
    repo.increment_views = AsyncMock()
    repo.get_views = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def vote_repository() -> Mock:
    repo = Mock()
    repo.get = AsyncMock(return_value=None)
    repo.count_by_option = AsyncMock(return_value={})
    repo.delete_all_for_post = AsyncMock()
    return repo


@pytest.fixture
def bookmark_repository() -> Mock:
    repo = Mock()
    repo.exists = AsyncMock(return_value=False)
    repo.delete_all_for_post = AsyncMock()
    return repo


@pytest.fixture
def comment_repository() -> Mock:
    repo = Mock()
    repo.delete_all_for_post = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def member_repository() -> Mock:
    repo = Mock()
    repo.get_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def file_repository() -> Mock:
    repo = Mock()
    repo.find_by_stored_name = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def report_service() -> Mock:
    service = Mock()
    service.file_report = AsyncMock(return_value=Mock())
    return service


@pytest.fixture
def mock_redis() -> AsyncMock:
    client = AsyncMock()
    client.exists = AsyncMock(return_value=1)
    client.set = AsyncMock(return_value=True)
    return client


@pytest.fixture
def service(
    post_repository,
    vote_repository,
    bookmark_repository,
    comment_repository,
    member_repository,
    file_repository,
    report_service,
    mock_redis,
) -> PostService:
    return PostService(
        post_repository=post_repository,
        vote_repository=vote_repository,
        bookmark_repository=bookmark_repository,
        comment_repository=comment_repository,
        member_repository=member_repository,
        file_repository=file_repository,
        report_service=report_service,
        redis_client=mock_redis,
        permission_ttl=600,
    )


def _post_request(**overrides) -> PostRequest:
    data = {
        "title": "Summer or winter?",
        "deadline": datetime.now(UTC) + timedelta(days=1),
        "balance_options": [{"title": "Summer"}, {"title": "Winter"}],
        "tags": ["season"],
    }
    data.update(overrides)
    return PostRequest(**data)


class TestPostRequest:
    def test_requires_exactly_two_options(self) -> None:
        with pytest.raises(ValueError):
            _post_request(balance_options=[{"title": "Only"}])
        with pytest.raises(ValueError):
            _post_request(
                balance_options=[{"title": "A"}, {"title": "B"}, {"title": "C"}]
            )

    def test_title_max_length(self) -> None:
        with pytest.raises(ValueError):
            _post_request(title="x" * 51)


class TestCreatePost:
    @pytest.mark.asyncio
    async def test_create_post(
        self, service: PostService, post_repository: Mock, mock_redis, make_member
    ) -> None:
        member = make_member()

        response = await service.create_post(member, _post_request())

        mock_redis.exists.assert_awaited_once_with(post_permission_key(member.email))
        post = post_repository.insert.await_args.args[0]
        assert len(post.options) == 2
        assert post.tags == ["season"]
        assert response.id == post.post_id
        assert [o.title for o in response.balance_options] == ["Summer", "Winter"]

    @pytest.mark.asyncio
    async def test_without_permission_marker(
        self, service: PostService, post_repository: Mock, mock_redis, make_member
    ) -> None:
        mock_redis.exists.return_value = 0

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_post(make_member(), _post_request())
        assert exc_info.value.code == ErrorCode.FORBIDDEN_POST_CREATE
        post_repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_unavailable(
        self, service: PostService, mock_redis, make_member
    ) -> None:
        mock_redis.exists.side_effect = redis.ConnectionError("down")

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_post(make_member(), _post_request())
        assert exc_info.value.code == ErrorCode.FORBIDDEN_POST_CREATE

    @pytest.mark.asyncio
    async def test_redis_not_configured(
        self, service: PostService, make_member
    ) -> None:
        service.redis = None

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_post(make_member(), _post_request())
        assert exc_info.value.code == ErrorCode.FORBIDDEN_POST_CREATE

    @pytest.mark.asyncio
    async def test_past_deadline(self, service: PostService, make_member) -> None:
        request = _post_request(deadline=datetime.now(UTC) - timedelta(minutes=1))

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_post(make_member(), request)
        assert exc_info.value.code == ErrorCode.INVALID_DEADLINE

    @pytest.mark.asyncio
    async def test_unknown_option_image(
        self, service: PostService, make_member
    ) -> None:
        request = _post_request(
            balance_options=[
                {"title": "Summer", "stored_file_name": "missing.png"},
                {"title": "Winter"},
            ]
        )

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.create_post(make_member(), request)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_FILE

    @pytest.mark.asyncio
    async def test_option_image_resolved(
        self,
        service: PostService,
        post_repository: Mock,
        file_repository: Mock,
        make_member,
    ) -> None:
        file_repository.find_by_stored_name.return_value = StoredFile(
            stored_name="sun.png",
            original_name="sun.png",
            url="https://cdn.example.com/sun.png",
            content_type="image/png",
            size=10,
            created_at=None,
        )
        request = _post_request(
            balance_options=[
                {"title": "Summer", "stored_file_name": "sun.png"},
                {"title": "Winter"},
            ]
        )

        await service.create_post(make_member(), request)

        post = post_repository.insert.await_args.args[0]
        assert post.options[0].image_url == "https://cdn.example.com/sun.png"
        assert post.options[1].image_url is None

    @pytest.mark.asyncio
    async def test_grant_post_permission(
        self, service: PostService, mock_redis
    ) -> None:
        assert await service.grant_post_permission("A@example.com") is True
        mock_redis.set.assert_awaited_once_with(
            "post_permission:a@example.com", "1", ex=600
        )


class TestReadPost:
    @pytest.mark.asyncio
    async def test_user_read_counts_view(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        member = make_member()
        post = make_post(member.id)
        post_repository.get.return_value = post

        await service.get_post(post.post_id, member)

        post_repository.increment_views.assert_awaited_once_with(post.post_id)

    @pytest.mark.asyncio
    async def test_anonymous_read_counts_view(
        self, service: PostService, post_repository: Mock, make_post, make_member
    ) -> None:
        post = make_post(make_member().id)
        post_repository.get.return_value = post

        response = await service.get_post(post.post_id, None)

        post_repository.increment_views.assert_awaited_once()
        assert response.my_like is False
        assert response.my_bookmark is False
        assert response.my_vote is None

    @pytest.mark.asyncio
    async def test_admin_read_does_not_count_view(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        admin = make_member("admin", role=MemberRole.ADMIN)
        post = make_post(admin.id)
        post_repository.get.return_value = post

        await service.get_post(post.post_id, admin)

        post_repository.increment_views.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requester_flags(
        self,
        service: PostService,
        post_repository: Mock,
        vote_repository: Mock,
        bookmark_repository: Mock,
        make_member,
        make_post,
    ) -> None:
        member = make_member()
        post = make_post(member.id)
        post_repository.get.return_value = post
        post_repository.has_like.return_value = True
        post_repository.count_likes.return_value = 4
        bookmark_repository.exists.return_value = True
        vote_repository.get.return_value = Mock(option_id=post.options[1].option_id)

        response = await service.get_post(post.post_id, member)

        assert response.my_like is True
        assert response.my_bookmark is True
        assert response.my_vote == post.options[1].option_id
        assert response.likes_count == 4

    @pytest.mark.asyncio
    async def test_missing_post(self, service: PostService) -> None:
        with pytest.raises(BalanceTalkError) as exc_info:
            await service.get_post(Mock(), None)
        assert exc_info.value.code == ErrorCode.NOT_FOUND_POST

    @pytest.mark.asyncio
    async def test_list_does_not_count_views(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        author = make_member()
        post_repository.list_posts.return_value = [
            make_post(author.id),
            make_post(author.id),
        ]

        responses = await service.list_posts(None)

        assert len(responses) == 2
        post_repository.increment_views.assert_not_awaited()


class TestSearchAndBest:
    @pytest.mark.asyncio
    async def test_search_title_case_insensitive(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        author = make_member()
        post_repository.list_posts.return_value = [
            make_post(author.id, title="Pizza or Burger"),
            make_post(author.id, title="Tea or coffee"),
        ]

        responses = await service.search("pizza", SearchType.TITLE)

        assert [r.title for r in responses] == ["Pizza or Burger"]

    @pytest.mark.asyncio
    async def test_search_tag(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        post = make_post(make_member().id, tags=["food"])
        post_repository.list_by_tag.return_value = [post]

        responses = await service.search("food", SearchType.TAG)

        post_repository.list_by_tag.assert_awaited_once_with("food", 1000)
        assert responses[0].id == post.post_id

    @pytest.mark.asyncio
    async def test_best_posts_ranked_by_likes_then_votes(
        self, service: PostService, post_repository: Mock, vote_repository: Mock,
        make_member, make_post,
    ) -> None:
        author = make_member()
        quiet, voted, liked = (make_post(author.id) for _ in range(3))
        post_repository.list_posts.return_value = [quiet, voted, liked]
        likes = {liked.post_id: 3}
        votes = {voted.post_id: {voted.options[0].option_id: 7}}
        post_repository.count_likes.side_effect = lambda pid: likes.get(pid, 0)
        vote_repository.count_by_option.side_effect = lambda pid: votes.get(pid, {})
        service.best_size = 2

        responses = await service.best_posts()

        assert [r.id for r in responses] == [liked.post_id, voted.post_id]


class TestDeletePost:
    @pytest.mark.asyncio
    async def test_non_author_cannot_delete(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        post = make_post(make_member("author").id)
        post_repository.get.return_value = post

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.delete_post(make_member("intruder"), post.post_id)
        assert exc_info.value.code == ErrorCode.FORBIDDEN_POST_DELETE
        post_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_author_delete_cascades(
        self,
        service: PostService,
        post_repository: Mock,
        vote_repository: Mock,
        bookmark_repository: Mock,
        comment_repository: Mock,
        make_member,
        make_post,
    ) -> None:
        author = make_member()
        post = make_post(author.id, tags=["a", "b"])
        post_repository.get.return_value = post

        await service.delete_post(author, post.post_id)

        comment_repository.delete_all_for_post.assert_awaited_once_with(post.post_id)
        bookmark_repository.delete_all_for_post.assert_awaited_once_with(post.post_id)
        vote_repository.delete_all_for_post.assert_awaited_once_with(post.post_id)
        post_repository.delete.assert_awaited_once_with(post)


class TestLikesAndReports:
    @pytest.mark.asyncio
    async def test_like_twice(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        member = make_member()
        post = make_post(member.id)
        post_repository.get.return_value = post

        await service.like_post(member, post.post_id)
        post_repository.has_like.return_value = True

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.like_post(member, post.post_id)
        assert exc_info.value.code == ErrorCode.ALREADY_LIKE_POST

    @pytest.mark.asyncio
    async def test_like_lost_race(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        member = make_member()
        post_repository.get.return_value = make_post(member.id)
        post_repository.add_like.return_value = False

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.like_post(member, Mock())
        assert exc_info.value.code == ErrorCode.ALREADY_LIKE_POST

    @pytest.mark.asyncio
    async def test_unlike_without_like(
        self, service: PostService, post_repository: Mock, make_member, make_post
    ) -> None:
        member = make_member()
        post_repository.get.return_value = make_post(member.id)
        post_repository.remove_like.return_value = False

        with pytest.raises(BalanceTalkError) as exc_info:
            await service.unlike_post(member, Mock())
        assert exc_info.value.code == ErrorCode.NOT_FOUND_LIKE_POST

    @pytest.mark.asyncio
    async def test_report_post(
        self,
        service: PostService,
        post_repository: Mock,
        report_service: Mock,
        make_member,
        make_post,
    ) -> None:
        author = make_member("author")
        post = make_post(author.id)
        post_repository.get.return_value = post
        reporter = make_member("reporter")

        await service.report_post(
            reporter,
            post.post_id,
            ReportRequest(category=ReportCategory.SPAM, content="ads everywhere"),
        )

        report_service.file_report.assert_awaited_once_with(
            reporter_id=reporter.id,
            author_id=author.id,
            target_type=ReportTarget.POST,
            target_id=post.post_id,
            post_id=post.post_id,
            category=ReportCategory.SPAM,
            content="ads everywhere",
        )
