"""Database connection module for BalanceTalk."""

from src.core.database.async_cassandra import (
    AsyncCassandraConnection,
    first_row,
    init_async_cassandra,
    shutdown_async_cassandra,
    was_applied,
)


__all__ = [
    "AsyncCassandraConnection",
    "first_row",
    "init_async_cassandra",
    "shutdown_async_cassandra",
    "was_applied",
]
