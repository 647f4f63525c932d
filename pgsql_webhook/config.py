"""
Configuration settings for pgsql-webhook.

Uses Pydantic Settings to load environment variables for the database
connection, the webhook destination, the notification channel and logging.
Empty environment values are treated as unset so the defaults apply.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pgsql_webhook.domain.models import BridgeConfig

DEFAULT_WEBHOOK_URL = "http://localhost:1880/authentik-webhook"
DEFAULT_CHANNEL = "authentik_changes"


class Settings(BaseSettings):
    # Database
    database_url_override: Optional[str] = Field(None, alias="DATABASE_URL")
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("password", alias="DB_PASSWORD")
    db_name: str = Field("postgres", alias="DB_NAME")
    db_sslmode: str = Field("disable", alias="DB_SSLMODE")

    # Bridge
    webhook_url: str = Field(DEFAULT_WEBHOOK_URL, alias="WEBHOOK_URL")
    channel: str = Field(DEFAULT_CHANNEL, alias="CHANNEL")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        """
        Connection URL for the listener.

        DATABASE_URL wins when set; otherwise the URL is assembled from the
        DB_* values with user and password form-encoded.
        """
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgres://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}?sslmode={self.db_sslmode}"
        )

    def bridge_config(self) -> BridgeConfig:
        return BridgeConfig(
            database_url=self.database_url,
            webhook_url=self.webhook_url,
            channel=self.channel,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings", "DEFAULT_WEBHOOK_URL", "DEFAULT_CHANNEL"]
