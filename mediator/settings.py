"""Runtime configuration for the mediator service."""
from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class MediatorSettings(BaseSettings):
    """Environment-aware settings for the proxy and catalogue endpoints."""

    host: str = Field("0.0.0.0", description="Interface the HTTP server binds to.")
    port: int = Field(
        1507,
        validation_alias=AliasChoices("MEDIATOR_PORT", "PORT"),
        description="Port the HTTP server listens on.",
    )
    fetch_timeout: float = Field(
        15.0, gt=0, description="Upper bound in seconds for an upstream fetch."
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT, description="User-Agent presented to upstream servers."
    )
    public_url: str | None = Field(
        default=None,
        description="Externally visible base URL; derived from each request when unset.",
    )
    default_playlist_url: str = Field(
        "https://iptv-org.github.io/iptv/categories/animation.m3u",
        description="Channel playlist served when no url is given.",
    )
    static_dir: str = Field(
        "client/dist", description="Directory holding the built web client."
    )
    log_level: str = Field("INFO", description="Root logging level.")

    model_config = SettingsConfigDict(
        env_prefix="MEDIATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
