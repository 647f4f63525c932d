"""
Supervisory loop: connect, receive, and reconnect after a fixed delay, forever.

Usage (example from CLI):
    from pgsql_webhook.supervisor import supervise

    asyncio.run(supervise(settings.bridge_config(), forwarder))

The loop has no retry limit and no backoff growth; an outage of any length
produces one log line per attempt and recovers once the database is back.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from pgsql_webhook.domain.models import BridgeConfig
from pgsql_webhook.errors import BridgeError
from pgsql_webhook.subscription import NotificationHandler, SubscriptionManager
from pgsql_webhook.utils.logging import get_logger

log = get_logger(__name__)

RECONNECT_DELAY_SECONDS = 5.0

ManagerFactory = Callable[[BridgeConfig, NotificationHandler], SubscriptionManager]
SleepFn = Callable[[float], Awaitable[None]]


async def listen(manager: SubscriptionManager) -> None:
    """Run one connect-and-receive cycle, always releasing the connection."""
    try:
        await manager.connect()
        await manager.run()
    finally:
        await manager.close()


async def supervise(
    config: BridgeConfig,
    forwarder: NotificationHandler,
    reconnect_delay: float = RECONNECT_DELAY_SECONDS,
    manager_factory: ManagerFactory = SubscriptionManager,
    sleep: SleepFn = asyncio.sleep,
) -> None:
    """
    Keep a subscription alive until the process is stopped.

    Parameters
    ----------
    config : BridgeConfig
        Resolved database URL, webhook URL and channel.
    forwarder : NotificationHandler
        Handler shared by every subscription cycle.
    reconnect_delay : float
        Seconds to wait between a failed cycle and the next attempt.
    manager_factory : callable
        Builds a fresh SubscriptionManager for each cycle.
    sleep : callable
        Awaitable sleep used between cycles.
    """
    attempt = 0
    while True:
        attempt += 1
        manager = manager_factory(config, forwarder)
        try:
            await listen(manager)
        except BridgeError as exc:
            log.error(
                f"Error: {exc}. Reconnecting in {reconnect_delay:g} seconds...",
                extra={"attempt": attempt, "error": str(exc)},
            )
        except Exception as exc:  # noqa: BLE001 - the daemon must outlive unexpected failures
            log.exception(
                f"Unexpected error: {exc}. Reconnecting in {reconnect_delay:g} seconds...",
                extra={"attempt": attempt},
            )
        await sleep(reconnect_delay)


__all__ = ["RECONNECT_DELAY_SECONDS", "listen", "supervise"]
