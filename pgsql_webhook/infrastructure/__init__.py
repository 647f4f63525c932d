"""
Infrastructure package for pgsql-webhook.

Centralizes I/O resource construction: the asyncpg connection used for
LISTEN and the httpx client used for webhook delivery. Keep this layer
focused on connectivity, decoupled from the receive/forward logic.
"""

from pgsql_webhook.infrastructure.db_factory import CONNECTION_ERRORS, open_connection
from pgsql_webhook.infrastructure.http_client import (
    DEFAULT_TIMEOUT_SECONDS,
    create_http_client,
)

__all__ = [
    "CONNECTION_ERRORS",
    "DEFAULT_TIMEOUT_SECONDS",
    "create_http_client",
    "open_connection",
]
