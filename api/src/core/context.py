"""Request context tracking using contextvars.

Every request gets an ID and, once authenticated, the acting member's ID.
Both are merged into each log event without being passed around explicitly.
Services never read the member from here: identity is an explicit argument.
"""

from contextvars import ContextVar
from typing import Any
from uuid import UUID, uuid4


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
member_id_var: ContextVar[str | None] = ContextVar("member_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return str(uuid4())


def get_request_id() -> str:
    """Get the current request ID."""
    return request_id_var.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set the request ID for the current context.

    Args:
        request_id: Incoming ID to reuse. A new one is generated when empty.

    Returns:
        The request ID that was set.
    """
    rid = request_id or generate_request_id()
    request_id_var.set(rid)
    return rid


def get_member_id() -> str | None:
    return member_id_var.get()


def set_member_id(member_id: str | UUID | None) -> None:
    """Tag subsequent log events of this request with the member ID."""
    member_id_var.set(str(member_id) if member_id is not None else None)


def get_context() -> dict[str, Any]:
    """Get the populated context variables as a dictionary."""
    context: dict[str, Any] = {}

    request_id = get_request_id()
    if request_id:
        context["request_id"] = request_id

    member_id = get_member_id()
    if member_id:
        context["member_id"] = member_id

    return context


def clear_context() -> None:
    """Reset context variables at the end of a request."""
    request_id_var.set("")
    member_id_var.set(None)


class RequestContext:
    """Context manager scoping log context outside of HTTP requests.

    Usage:
        with RequestContext(member_id=member.id):
            logger.info("post_seeded")  # carries request_id and member_id
    """

    def __init__(
        self,
        request_id: str | None = None,
        member_id: str | UUID | None = None,
    ) -> None:
        self.request_id = request_id
        self.member_id = member_id
        self._tokens: list[tuple[ContextVar, Any]] = []

    def __enter__(self) -> "RequestContext":
        request_id = self.request_id or generate_request_id()
        self._tokens.append((request_id_var, request_id_var.set(request_id)))
        if self.member_id is not None:
            self._tokens.append(
                (member_id_var, member_id_var.set(str(self.member_id)))
            )
        return self

    def __exit__(self, *_: object) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens.clear()
