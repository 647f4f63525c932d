"""
Subscription manager: owns the LISTEN connection and the receive loop.

asyncpg delivers notifications through a listener callback; the callback only
enqueues the payload and the receive loop drains the queue one item at a time,
awaiting the forwarder inline. When nothing arrives within the idle window a
detached `SELECT 1` probe keeps the transport from being closed as idle.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Protocol, Set, Union, runtime_checkable

import asyncpg

from pgsql_webhook.domain.models import BridgeConfig
from pgsql_webhook.errors import DatabaseConnectionError, ReceiveError
from pgsql_webhook.infrastructure.db_factory import (
    CONNECTION_ERRORS,
    ConnectFn,
    close_quietly,
    open_connection,
)
from pgsql_webhook.utils.logging import get_logger

log = get_logger(__name__)

# Shorter than common server/proxy idle timeouts.
IDLE_TIMEOUT_SECONDS = 90.0

PROBE_QUERY = "SELECT 1"


class _ConnectionLost:
    """Queue marker pushed when the connection terminates."""


_CONNECTION_LOST = _ConnectionLost()


@runtime_checkable
class NotificationHandler(Protocol):
    """
    Receiver of raw notification payloads.

    `handle` must contain its own per-event failures; anything it raises
    ends the receive loop.
    """

    async def handle(self, payload: str) -> bool:
        ...


class SubscriptionManager:
    """
    Maintains one LISTEN subscription and feeds its notifications to a handler.

    Parameters
    ----------
    config : BridgeConfig
        Database URL and channel to subscribe to.
    forwarder : NotificationHandler
        Receives every non-empty payload, synchronously within the loop.
    idle_timeout : float
        Seconds without a notification before a liveness probe is sent.
    connect : callable
        Connection factory, `asyncpg.connect` by default.
    """

    def __init__(
        self,
        config: BridgeConfig,
        forwarder: NotificationHandler,
        idle_timeout: float = IDLE_TIMEOUT_SECONDS,
        connect: ConnectFn = asyncpg.connect,
    ) -> None:
        self.config = config
        self.forwarder = forwarder
        self.idle_timeout = idle_timeout
        self._connect = connect
        self._conn: Optional[Any] = None
        self._queue: "asyncio.Queue[Union[str, None, _ConnectionLost]]" = asyncio.Queue()
        self._probes: Set["asyncio.Task[None]"] = set()

    @property
    def connected(self) -> bool:
        return self._conn is not None and not self._conn.is_closed()

    async def connect(self) -> None:
        """
        Open the connection and subscribe to the configured channel.

        Raises
        ------
        DatabaseConnectionError
            If the database is unreachable or LISTEN fails. No subscription
            is active afterwards.
        """
        conn = await open_connection(self.config.database_url, connect=self._connect)
        log.info("Connected to PostgreSQL")

        try:
            conn.add_termination_listener(self._on_termination)
            await conn.add_listener(self.config.channel, self._on_notification)
        except CONNECTION_ERRORS as exc:
            await close_quietly(conn)
            raise DatabaseConnectionError(f"failed to start listener: {exc}") from exc

        self._conn = conn
        log.info(
            f"Listening on channel: {self.config.channel}",
            extra={"channel": self.config.channel},
        )
        log.info("Waiting for notifications...")

    async def run(self) -> None:
        """
        Receive notifications until the connection is lost.

        Never returns normally.

        Raises
        ------
        ReceiveError
            When the connection terminates or is found closed.
        """
        if self._conn is None:
            raise ReceiveError("not connected")

        while True:
            try:
                item = await asyncio.wait_for(self._queue.get(), timeout=self.idle_timeout)
            except asyncio.TimeoutError:
                if not self.connected:
                    raise ReceiveError("connection closed while idle") from None
                self._probe()
                continue

            if isinstance(item, _ConnectionLost):
                raise ReceiveError("connection to PostgreSQL lost")
            if not item:
                continue

            await self.forwarder.handle(item)

    async def close(self) -> None:
        """Drop the subscription and close the connection."""
        for task in list(self._probes):
            task.cancel()
        conn, self._conn = self._conn, None
        if conn is None or conn.is_closed():
            return
        try:
            await conn.remove_listener(self.config.channel, self._on_notification)
        except CONNECTION_ERRORS as exc:
            log.debug(f"Error while removing listener: {exc}")
        await close_quietly(conn)

    def _on_notification(self, connection: Any, pid: int, channel: str, payload: str) -> None:
        self._queue.put_nowait(payload)

    def _on_termination(self, connection: Any) -> None:
        self._queue.put_nowait(_CONNECTION_LOST)

    def _probe(self) -> None:
        if self._probes:
            log.debug("Liveness probe still in flight, skipping")
            return
        # Referenced until done so the task is not garbage collected mid-flight.
        task = asyncio.create_task(self._ping())
        self._probes.add(task)
        task.add_done_callback(self._probes.discard)

    async def _ping(self) -> None:
        conn = self._conn
        if conn is None:
            return
        log.debug("Sending liveness probe")
        try:
            await conn.execute(PROBE_QUERY, timeout=self.idle_timeout)
        except asyncio.TimeoutError:
            # No answer within a whole idle window: treat the socket as half-open.
            log.warning(f"Listener error: liveness probe timed out after {self.idle_timeout:g}s")
            conn.terminate()
            self._queue.put_nowait(_CONNECTION_LOST)
        except CONNECTION_ERRORS as exc:
            log.warning(f"Listener error: {exc}")
            if conn.is_closed():
                self._queue.put_nowait(_CONNECTION_LOST)
        except Exception as exc:  # noqa: BLE001 - nothing awaits this task
            log.exception(f"Listener error: unexpected probe failure: {exc}")


__all__ = [
    "IDLE_TIMEOUT_SECONDS",
    "NotificationHandler",
    "PROBE_QUERY",
    "SubscriptionManager",
]
