"""
pgsql-webhook - forward PostgreSQL LISTEN/NOTIFY change events to an HTTP webhook.

The package subscribes to a notification channel, decodes each JSON change
event published on it, and POSTs the event to a configured endpoint:

- Subscription management with idle liveness probes
- Single-attempt webhook delivery with logged outcomes
- A supervisor that reconnects after a fixed delay, forever
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from pgsql_webhook.config import Settings, get_settings
from pgsql_webhook.domain.models import BridgeConfig, Event
from pgsql_webhook.errors import (
    BridgeError,
    DatabaseConnectionError,
    DecodeError,
    DeliveryError,
    ReceiveError,
)
from pgsql_webhook.forwarder import EventForwarder
from pgsql_webhook.subscription import SubscriptionManager
from pgsql_webhook.supervisor import supervise
from pgsql_webhook.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "BridgeConfig",
    "Event",
    # Errors
    "BridgeError",
    "DatabaseConnectionError",
    "DecodeError",
    "DeliveryError",
    "ReceiveError",
    # Components
    "EventForwarder",
    "SubscriptionManager",
    "supervise",
    # Logging
    "configure_logging",
    "get_logger",
]
