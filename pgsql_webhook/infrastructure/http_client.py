"""
HTTP client construction for webhook delivery.

Uses httpx with a bounded timeout. No retries are configured, so each
delivery is exactly one request.
"""

from __future__ import annotations

import httpx

# Default timeout for webhook requests (seconds)
DEFAULT_TIMEOUT_SECONDS = 10.0


def create_http_client(timeout: float = DEFAULT_TIMEOUT_SECONDS) -> httpx.AsyncClient:
    """Build the async client used for webhook POSTs."""
    return httpx.AsyncClient(timeout=timeout)


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "create_http_client"]
