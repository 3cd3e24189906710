"""FastAPI dependencies for authentication.

Resolves the acting member from the access token header. Routes receive the
``Member`` and hand it to services explicitly.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from src.auth.security import TokenProvider
from src.config.settings import get_settings
from src.core.context import set_member_id
from src.core.errors import BalanceTalkError, ErrorCode
from src.members.dependencies import MemberServiceDep
from src.members.models import Member


def get_token_from_header(request: Request) -> str | None:
    """Extract the raw token from the configured header (X-AUTH-TOKEN)."""
    token = request.headers.get(get_settings().auth_token_header)
    return token.strip() if token and token.strip() else None


def get_token_provider(request: Request) -> TokenProvider:
    """Get the token provider from app state."""
    provider = getattr(request.app.state, "token_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication not available",
        )
    return provider


TokenProviderDep = Annotated[TokenProvider, Depends(get_token_provider)]


async def get_current_member(
    token: Annotated[str | None, Depends(get_token_from_header)],
    token_provider: TokenProviderDep,
    member_service: MemberServiceDep,
) -> Member:
    """Get the authenticated member.

    Raises:
        BalanceTalkError(AUTHENTICATION_REQUIRED): If no token was sent
        BalanceTalkError(INVALID_TOKEN): If the token is malformed, expired
            or signed with an unknown key
        BalanceTalkError(NOT_FOUND_MEMBER): If the token subject no longer
            exists
    """
    if not token:
        raise BalanceTalkError(ErrorCode.AUTHENTICATION_REQUIRED)

    email = token_provider.get_email(token)
    member = await member_service.get_member_by_email(email)
    set_member_id(member.id)
    return member


async def get_current_member_optional(
    token: Annotated[str | None, Depends(get_token_from_header)],
    token_provider: TokenProviderDep,
    member_service: MemberServiceDep,
) -> Member | None:
    """Get the member if a valid token was sent, None otherwise.

    Use this for endpoints that serve anonymous readers too.
    """
    if not token:
        return None

    try:
        email = token_provider.get_email(token)
        member = await member_service.get_member_by_email(email)
    except BalanceTalkError:
        return None

    set_member_id(member.id)
    return member


# ==============================================================================
# Type Aliases for Cleaner Code
# ==============================================================================

CurrentMember = Annotated[Member, Depends(get_current_member)]

OptionalMember = Annotated[Member | None, Depends(get_current_member_optional)]
