"""
Database connection factory for pgsql-webhook.

Opens the dedicated asyncpg connection that carries the LISTEN subscription
and verifies it with a round trip before handing it out. Failures are
reported as `DatabaseConnectionError`; retrying is the supervisor's job.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import asyncpg

from pgsql_webhook.errors import DatabaseConnectionError
from pgsql_webhook.utils.logging import get_logger

log = get_logger(__name__)

ConnectFn = Callable[[str], Awaitable[Any]]

# asyncpg.ClientConfigurationError (bad DSN) is an InterfaceError subclass.
CONNECTION_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
)


async def open_connection(dsn: str, connect: ConnectFn = asyncpg.connect) -> Any:
    """
    Acquire a dedicated connection and check that the server answers.

    Parameters
    ----------
    dsn : str
        PostgreSQL connection URL.
    connect : callable
        Coroutine factory used to open the connection; `asyncpg.connect`
        unless a test substitutes its own.

    Returns
    -------
    asyncpg.Connection
        An open connection that has answered `SELECT 1`.

    Raises
    ------
    DatabaseConnectionError
        If the connection cannot be opened or the round trip fails.
    """
    try:
        conn = await connect(dsn)
    except CONNECTION_ERRORS as exc:
        raise DatabaseConnectionError(f"failed to connect: {exc}") from exc

    try:
        await conn.fetchval("SELECT 1")
    except CONNECTION_ERRORS as exc:
        await close_quietly(conn)
        raise DatabaseConnectionError(f"failed to ping: {exc}") from exc

    return conn


async def close_quietly(conn: Any) -> None:
    """Close a connection, logging rather than raising on failure."""
    try:
        await conn.close()
    except CONNECTION_ERRORS as exc:
        log.debug(f"Error while closing connection: {exc}")


__all__ = ["CONNECTION_ERRORS", "ConnectFn", "close_quietly", "open_connection"]
