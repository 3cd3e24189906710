"""Domain error taxonomy.

Every business rule violation raises ``BalanceTalkError`` tagged with an
``ErrorCode``. The code carries its HTTP status and default message; the
exception handler registered in ``src.main`` renders it as JSON.
"""

from enum import Enum

from fastapi import status


class ErrorCode(Enum):
    """Error codes with their HTTP status and default message."""

    # 400
    EXCEED_MAX_DEPTH = (
        status.HTTP_400_BAD_REQUEST,
        "Replies cannot be nested deeper than the allowed depth",
    )
    INVALID_DEADLINE = (
        status.HTTP_400_BAD_REQUEST,
        "Deadline must be in the future",
    )
    EXPIRED_POST_DEADLINE = (
        status.HTTP_400_BAD_REQUEST,
        "Voting on this post has already closed",
    )

    # 401
    AUTHENTICATION_REQUIRED = (
        status.HTTP_401_UNAUTHORIZED,
        "Authentication is required",
    )
    INVALID_TOKEN = (
        status.HTTP_401_UNAUTHORIZED,
        "Token is invalid or expired",
    )
    MISMATCHED_EMAIL_OR_PASSWORD = (
        status.HTTP_401_UNAUTHORIZED,
        "Email or password does not match",
    )

    # 403
    FORBIDDEN_POST_CREATE = (
        status.HTTP_403_FORBIDDEN,
        "Member is not allowed to create posts",
    )
    FORBIDDEN_POST_DELETE = (
        status.HTTP_403_FORBIDDEN,
        "Only the author can delete this post",
    )
    FORBIDDEN_COMMENT_MODIFY = (
        status.HTTP_403_FORBIDDEN,
        "Only the author can modify this comment",
    )
    FORBIDDEN_COMMENT_DELETE = (
        status.HTTP_403_FORBIDDEN,
        "Only the author can delete this comment",
    )
    FORBIDDEN_OWN_REPORT = (
        status.HTTP_403_FORBIDDEN,
        "Members cannot report their own content",
    )
    FORBIDDEN_MEMBER_DELETE = (
        status.HTTP_403_FORBIDDEN,
        "Credentials do not match the current member",
    )
    FORBIDDEN_NOTICE_ACCESS = (
        status.HTTP_403_FORBIDDEN,
        "Only administrators can manage notices",
    )
    FORBIDDEN_ADMIN_JOIN = (
        status.HTTP_403_FORBIDDEN,
        "Administrator accounts cannot be self-registered",
    )

    # 404
    NOT_FOUND_MEMBER = (status.HTTP_404_NOT_FOUND, "Member not found")
    NOT_FOUND_POST = (status.HTTP_404_NOT_FOUND, "Post not found")
    NOT_FOUND_BALANCE_OPTION = (
        status.HTTP_404_NOT_FOUND,
        "Balance option not found",
    )
    NOT_FOUND_VOTE = (status.HTTP_404_NOT_FOUND, "Vote not found")
    NOT_FOUND_COMMENT = (status.HTTP_404_NOT_FOUND, "Comment not found")
    NOT_FOUND_PARENT_COMMENT = (
        status.HTTP_404_NOT_FOUND,
        "Parent comment not found on this post",
    )
    NOT_FOUND_COMMENT_AT_THAT_POST = (
        status.HTTP_404_NOT_FOUND,
        "Comment does not belong to this post",
    )
    NOT_FOUND_FILE = (status.HTTP_404_NOT_FOUND, "File not found")
    NOT_FOUND_LIKE_POST = (status.HTTP_404_NOT_FOUND, "Post like not found")
    NOT_FOUND_LIKE_COMMENT = (status.HTTP_404_NOT_FOUND, "Comment like not found")
    NOT_FOUND_BOOKMARK = (status.HTTP_404_NOT_FOUND, "Bookmark not found")
    NOT_FOUND_NOTICE = (status.HTTP_404_NOT_FOUND, "Notice not found")

    # 409
    ALREADY_REGISTERED_EMAIL = (
        status.HTTP_409_CONFLICT,
        "Email is already registered",
    )
    ALREADY_REGISTERED_NICKNAME = (
        status.HTTP_409_CONFLICT,
        "Nickname is already in use",
    )
    ALREADY_LIKE_POST = (status.HTTP_409_CONFLICT, "Post is already liked")
    ALREADY_LIKE_COMMENT = (status.HTTP_409_CONFLICT, "Comment is already liked")
    ALREADY_VOTE = (status.HTTP_409_CONFLICT, "Member has already voted on this post")
    ALREADY_BOOKMARKED = (status.HTTP_409_CONFLICT, "Post is already bookmarked")

    @property
    def status_code(self) -> int:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]


class BalanceTalkError(Exception):
    """Business rule violation tagged with an error code."""

    def __init__(self, code: ErrorCode, message: str | None = None):
        self.code = code
        self.message = message or code.message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.code.status_code
