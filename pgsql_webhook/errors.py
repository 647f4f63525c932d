"""
Error taxonomy for the webhook bridge.

Connection-level errors (`DatabaseConnectionError`, `ReceiveError`) escape the
receive loop and are handled by the supervisor. Per-notification errors
(`DecodeError`, `DeliveryError`) are contained by the forwarder and only logged.
"""

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base exception for bridge errors."""


class DatabaseConnectionError(BridgeError):
    """Raised when the database is unreachable or the subscription cannot be set up."""


class ReceiveError(BridgeError):
    """Raised when the connection is lost while waiting for notifications."""


class DecodeError(BridgeError):
    """Raised when a notification payload is not a valid event."""


class DeliveryError(BridgeError):
    """Raised when a webhook delivery attempt fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "BridgeError",
    "DatabaseConnectionError",
    "ReceiveError",
    "DecodeError",
    "DeliveryError",
]
