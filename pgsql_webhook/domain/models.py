"""
Domain models for pgsql-webhook.

`Event` mirrors the JSON document produced by the database trigger and sent
on the notification channel. `BridgeConfig` is the resolved configuration
handed to the subscription manager.
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class BridgeConfig(BaseModel):
    """
    Resolved connection settings, immutable for the process lifetime.
    """

    database_url: str = Field(..., description="Fully formed PostgreSQL connection URL.")
    webhook_url: str = Field(..., description="Destination for POSTed events.")
    channel: str = Field(..., description="LISTEN/NOTIFY channel name.")

    model_config = {
        "frozen": True,
    }


class Event(BaseModel):
    """
    A single change record decoded from a notification payload.

    `data` and `old_data` are opaque JSON values and are passed through
    unmodified. `old_data` is only part of the wire form when it was present
    in the decoded payload.
    """

    operation: str = Field("", description="Operation kind, e.g. INSERT/UPDATE/DELETE.")
    timestamp: str = Field("", description="Source-provided timestamp.")
    table: str = Field("", description="Name of the changed table.")
    data: Any = Field(None, description="New row data.")
    old_data: Any = Field(None, description="Previous row data for update/delete.")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @property
    def has_old_data(self) -> bool:
        return "old_data" in self.model_fields_set

    def to_wire(self) -> Dict[str, Any]:
        """Return the outbound JSON document for this event."""
        payload: Dict[str, Any] = {
            "operation": self.operation,
            "timestamp": self.timestamp,
            "table": self.table,
            "data": self.data,
        }
        if self.has_old_data:
            payload["old_data"] = self.old_data
        return payload


__all__ = ["BridgeConfig", "Event"]
