"""Tests for member roles."""

import pytest

from src.auth.permissions import MemberRole, counts_post_view, is_admin


class TestMemberRole:
    def test_role_values(self) -> None:
        assert MemberRole.USER.value == "USER"
        assert MemberRole.ADMIN.value == "ADMIN"


class TestIsAdmin:
    @pytest.mark.parametrize(
        ("role", "expected"),
        [
            (MemberRole.ADMIN, True),
            ("ADMIN", True),
            (MemberRole.USER, False),
            ("USER", False),
            ("unknown", False),
        ],
    )
    def test_is_admin(self, role: MemberRole | str, expected: bool) -> None:
        assert is_admin(role) is expected


class TestCountsPostView:
    """Only anonymous and USER reads bump the view counter."""

    def test_anonymous_counts(self) -> None:
        assert counts_post_view(None) is True

    def test_user_counts(self) -> None:
        assert counts_post_view(MemberRole.USER) is True

    def test_admin_does_not_count(self) -> None:
        assert counts_post_view(MemberRole.ADMIN) is False
