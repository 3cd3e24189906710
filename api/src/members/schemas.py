"""Pydantic schemas for members.

Request and response models for join, login and profile management.
"""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.auth.permissions import MemberRole

from .models import Member


# 10 to 20 characters, at least one letter and one digit
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d@$!%*#?&]{10,20}$")

NICKNAME_MIN_LENGTH = 2
NICKNAME_MAX_LENGTH = 10


def validate_password(password: str) -> str:
    """Validate password strength.

    Examples:
        >>> validate_password("balance1234")
        'balance1234'
    """
    if not PASSWORD_PATTERN.match(password):
        msg = (
            "Password must be 10-20 characters with at least one letter and one "
            "digit, using letters, digits or @$!%*#?&"
        )
        raise ValueError(msg)
    return password


def validate_nickname(nickname: str) -> str:
    nickname = nickname.strip()
    if not NICKNAME_MIN_LENGTH <= len(nickname) <= NICKNAME_MAX_LENGTH:
        msg = (
            f"Nickname must be {NICKNAME_MIN_LENGTH}-{NICKNAME_MAX_LENGTH} characters"
        )
        raise ValueError(msg)
    return nickname


# ==============================================================================
# Request Schemas
# ==============================================================================


class JoinRequest(BaseModel):
    """Member registration request."""

    nickname: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., description="Password")
    role: MemberRole = Field(default=MemberRole.USER, description="Member role")

    @field_validator("nickname")
    @classmethod
    def validate_nickname_length(cls, v: str) -> str:
        return validate_nickname(v)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return validate_password(v)


class LoginRequest(BaseModel):
    """Member login request."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class NicknameUpdateRequest(BaseModel):
    nickname: str

    @field_validator("nickname")
    @classmethod
    def validate_nickname_length(cls, v: str) -> str:
        return validate_nickname(v)


class PasswordUpdateRequest(BaseModel):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        return validate_password(v)


class WithdrawRequest(BaseModel):
    """Credentials re-entered to confirm account deletion."""

    email: EmailStr
    password: str


# ==============================================================================
# Response Schemas
# ==============================================================================


class MemberResponse(BaseModel):
    """Public member profile."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    nickname: str
    role: MemberRole
    created_at: datetime

    @classmethod
    def from_member(cls, member: Member) -> "MemberResponse":
        return cls(
            id=member.id,
            email=member.email,
            nickname=member.nickname,
            role=member.role,
            created_at=member.created_at,
        )


class LoginResponse(BaseModel):
    """Issued access token and member summary."""

    token: str
    token_type: str = "X-AUTH-TOKEN"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    member: MemberResponse


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
    success: bool = True
