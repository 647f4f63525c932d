"""
Event forwarder: decodes notification payloads and POSTs them to the webhook.

Each payload gets exactly one delivery attempt. Decode and delivery failures
are logged and the event is dropped; nothing is queued or retried.
"""

from __future__ import annotations

import json
from typing import Optional

import httpx
from pydantic import ValidationError

from pgsql_webhook.domain.models import Event
from pgsql_webhook.errors import DecodeError, DeliveryError
from pgsql_webhook.infrastructure.http_client import DEFAULT_TIMEOUT_SECONDS, create_http_client
from pgsql_webhook.utils.logging import get_logger

log = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


class EventForwarder:
    """
    Turns one raw notification payload into one webhook delivery attempt.

    Parameters
    ----------
    webhook_url : str
        Destination for every delivered event.
    timeout : float
        Per-request timeout in seconds.
    client : httpx.AsyncClient | None
        Client to send with. When omitted the forwarder creates and owns one.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or create_http_client(timeout)

    @staticmethod
    def decode(payload: str) -> Event:
        """
        Parse a notification payload into an Event.

        Raises
        ------
        DecodeError
            If the payload is not JSON or is not an event-shaped object.
        """
        try:
            return Event.model_validate_json(payload)
        except ValidationError as exc:
            raise DecodeError(f"invalid event payload: {exc}") from exc

    async def deliver(self, url: str, event: Event) -> None:
        """
        POST the event to `url` once.

        Raises
        ------
        DeliveryError
            On serialisation failure, transport failure or a non-2xx status.
        """
        try:
            body = json.dumps(event.to_wire())
        except (TypeError, ValueError) as exc:
            raise DeliveryError(f"failed to marshal event: {exc}") from exc

        try:
            response = await self._client.post(
                url,
                content=body,
                headers={"Content-Type": JSON_CONTENT_TYPE},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise DeliveryError(f"failed to post: {exc!r}") from exc

        if not response.is_success:
            raise DeliveryError(
                f"bad status code: {response.status_code}", status_code=response.status_code
            )

    async def handle(self, payload: str) -> bool:
        """
        Run one receive-and-forward cycle for a payload.

        Returns True when the webhook accepted the event, False when the
        event was dropped.
        """
        log.info(f"Received notification: {payload}")

        try:
            event = self.decode(payload)
        except DecodeError as exc:
            log.warning(f"Failed to parse notification: {exc}")
            return False

        try:
            await self.deliver(self.webhook_url, event)
        except DeliveryError as exc:
            log.warning(
                f"Failed to send webhook: {exc}",
                extra={
                    "operation": event.operation,
                    "table": event.table,
                    "status_code": exc.status_code,
                },
            )
            return False

        log.info(
            f"Webhook sent: {event.operation} on {event.table}",
            extra={"operation": event.operation, "table": event.table},
        )
        return True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["EventForwarder", "JSON_CONTENT_TYPE"]
