"""Application factory for the mediator service."""
from __future__ import annotations

import logging
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from .fetcher import UpstreamFetcher
from .routers import catalogue, proxy
from .settings import MediatorSettings

logger = logging.getLogger(__name__)


def mount_client(app: FastAPI, static_dir: Path) -> None:
    """Serve the web client build; unknown paths get ``index.html`` for client-side routing."""

    root = static_dir.resolve()
    index = root / "index.html"

    @app.get("/{path:path}", include_in_schema=False)
    async def client(path: str) -> FileResponse:
        candidate = (root / path).resolve()
        if path and candidate.is_relative_to(root) and candidate.is_file():
            return FileResponse(candidate)
        return FileResponse(index)


def create_app(
    settings: MediatorSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    ``transport`` replaces the network transport used for upstream requests.
    """

    resolved_settings = settings or MediatorSettings()

    app = FastAPI(title="IPTV Mediator", version="0.1.0")
    app.state.settings = resolved_settings
    app.state.fetcher = UpstreamFetcher(
        timeout=resolved_settings.fetch_timeout,
        user_agent=resolved_settings.user_agent,
        transport=transport,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    for router in (catalogue.router, proxy.router):
        app.include_router(router)

    static_dir = Path(resolved_settings.static_dir)
    if (static_dir / "index.html").is_file():
        mount_client(app, static_dir)
    else:
        logger.debug("No client build at %s, serving API only", static_dir)

    return app
