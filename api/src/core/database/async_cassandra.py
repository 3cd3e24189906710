"""Async Cassandra database connection using cassandra-asyncio-driver.

Provides:
- Cluster and session lifecycle management
- Session with aexecute() for non-blocking queries
- Keyspace and table initialization for every domain module

Cassandra has no multi-row transactions. Uniqueness of pairs such as
(member, post) is held by primary keys, and races are settled with
lightweight transactions (INSERT ... IF NOT EXISTS) read via was_applied().
"""

from typing import Any

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from src.bookmarks.models import BOOKMARKS_TABLES_CQL
from src.comments.models import COMMENTS_TABLES_CQL
from src.config.settings import get_settings
from src.files.models import FILES_TABLES_CQL
from src.members.models import MEMBERS_TABLES_CQL
from src.notices.models import NOTICES_TABLES_CQL
from src.posts.models import POSTS_TABLES_CQL
from src.reports.models import REPORTS_TABLES_CQL
from src.votes.models import VOTES_TABLES_CQL


logger = structlog.get_logger(__name__)


# Module name -> table definitions, in creation order
SCHEMA: dict[str, list[str]] = {
    "members": MEMBERS_TABLES_CQL,
    "files": FILES_TABLES_CQL,
    "posts": POSTS_TABLES_CQL,
    "votes": VOTES_TABLES_CQL,
    "comments": COMMENTS_TABLES_CQL,
    "bookmarks": BOOKMARKS_TABLES_CQL,
    "reports": REPORTS_TABLES_CQL,
    "notices": NOTICES_TABLES_CQL,
}


class AsyncCassandraConnection:
    """Async Cassandra connection manager.

    Connecting is synchronous; queries go through ``session.aexecute()``.
    """

    _cluster: Cluster | None = None
    _session = None  # Session type from cassandra_asyncio

    @classmethod
    def connect(cls):
        """Establish connection to the Cassandra cluster.

        Returns:
            Active Cassandra session with aexecute() support

        Raises:
            ConnectionError: If connection fails
        """
        if cls._session is not None:
            return cls._session

        settings = get_settings()

        auth_provider = None
        if settings.cassandra_username and settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=settings.cassandra_username,
                password=settings.cassandra_password,
            )

        cls._cluster = Cluster(
            contact_points=settings.cassandra_hosts,
            port=settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=settings.cassandra_connect_timeout,
        )

        try:
            cls._session = cls._cluster.connect()
            logger.info(
                "async_cassandra_connected",
                hosts=settings.cassandra_hosts,
                port=settings.cassandra_port,
            )
        except Exception as e:
            logger.error("async_cassandra_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        return cls._session

    @classmethod
    def disconnect(cls) -> None:
        """Close connection to Cassandra."""
        if cls._session is not None:
            cls._session.shutdown()
            cls._session = None
            logger.info("async_cassandra_session_closed")

        if cls._cluster is not None:
            cls._cluster.shutdown()
            cls._cluster = None
            logger.info("async_cassandra_cluster_closed")

    @classmethod
    def is_connected(cls) -> bool:
        """Check if connection is active."""
        return cls._session is not None and not cls._session.is_shutdown


def first_row(result: Any) -> Any:
    """First row of a result set, or None when it is empty."""
    return result[0] if result else None


def was_applied(result: Any) -> bool:
    """Whether a lightweight transaction (IF / IF NOT EXISTS) was applied.

    The first column of an LWT response row is the ``[applied]`` flag.
    """
    row = first_row(result)
    return bool(row[0]) if row is not None else False


async def init_async_keyspace(session, keyspace: str) -> None:
    """Create keyspace if not exists (async)."""
    settings = get_settings()

    if settings.is_production:
        replication = """
            'class': 'NetworkTopologyStrategy',
            'datacenter1': 3
        """
    else:
        replication = """
            'class': 'SimpleStrategy',
            'replication_factor': 1
        """

    cql = f"""
        CREATE KEYSPACE IF NOT EXISTS {keyspace}
        WITH replication = {{{replication}}}
        AND durable_writes = true
    """

    await session.aexecute(cql)
    logger.info("async_keyspace_created", keyspace=keyspace)


async def init_async_tables(session, keyspace: str) -> None:
    """Create the tables of every domain module (async)."""
    for module, statements in SCHEMA.items():
        for cql_template in statements:
            await session.aexecute(cql_template.format(keyspace=keyspace))
        logger.info("async_tables_created", module=module, keyspace=keyspace)


async def init_async_cassandra():
    """Initialize async Cassandra connection and schema.

    Returns:
        Configured Cassandra session with aexecute() support
    """
    settings = get_settings()

    session = AsyncCassandraConnection.connect()

    await init_async_keyspace(session, settings.cassandra_keyspace)
    session.set_keyspace(settings.cassandra_keyspace)
    await init_async_tables(session, settings.cassandra_keyspace)

    logger.info(
        "async_cassandra_initialized",
        keyspace=settings.cassandra_keyspace,
    )

    return session


async def shutdown_async_cassandra() -> None:
    """Shutdown async Cassandra connection."""
    AsyncCassandraConnection.disconnect()
