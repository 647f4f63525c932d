from __future__ import annotations

import asyncio
import sys
from urllib.parse import urlsplit, urlunsplit

import typer

from pgsql_webhook.config import Settings, get_settings
from pgsql_webhook.domain.models import BridgeConfig
from pgsql_webhook.forwarder import EventForwarder
from pgsql_webhook.supervisor import supervise
from pgsql_webhook.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(help="Forward PostgreSQL NOTIFY events to an HTTP webhook.")


def _mask_password(url: str) -> str:
    """Replace the password in a connection URL with asterisks."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    userinfo = f"{parts.username or ''}:***"
    # Host part kept verbatim so IPv6 brackets and the port survive.
    host = parts.netloc.rpartition("@")[2]
    return urlunsplit(parts._replace(netloc=f"{userinfo}@{host}"))


async def _serve(config: BridgeConfig) -> None:
    forwarder = EventForwarder(config.webhook_url)
    try:
        await supervise(config, forwarder)
    finally:
        await forwarder.aclose()


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings: Settings = get_settings()
    config = settings.bridge_config()
    typer.echo(
        f"DB={_mask_password(config.database_url)} | "
        f"webhook={config.webhook_url} channel={config.channel}"
    )


@app.command()
def run() -> None:
    """
    Listen on the configured channel and forward events until stopped.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    config = settings.bridge_config()

    log.info("Starting pgsql-webhook")
    log.info(f"Webhook URL: {config.webhook_url}")
    log.info(f"Channel: {config.channel}")

    asyncio.run(_serve(config))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
