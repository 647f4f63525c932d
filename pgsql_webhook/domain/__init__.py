"""
Domain package for pgsql-webhook.

Exports the change event and the resolved runtime configuration.
Keep this package focused on data definitions and validation concerns.
"""

from pgsql_webhook.domain.models import BridgeConfig, Event

__all__ = [
    "BridgeConfig",
    "Event",
]
