# Core infrastructure
from src.core.context import (
    RequestContext,
    clear_context,
    get_context,
    get_member_id,
    get_request_id,
    set_member_id,
    set_request_id,
)
from src.core.database import init_async_cassandra, shutdown_async_cassandra
from src.core.errors import BalanceTalkError, ErrorCode
from src.core.logging import configure_structlog, get_logger
from src.core.middleware import RequestContextMiddleware


__all__ = [
    "BalanceTalkError",
    "ErrorCode",
    "RequestContext",
    "RequestContextMiddleware",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_member_id",
    "get_request_id",
    "init_async_cassandra",
    "set_member_id",
    "set_request_id",
    "shutdown_async_cassandra",
]
