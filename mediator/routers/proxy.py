"""Stream proxy endpoint."""
from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask

from ..classifier import MediaKind, classify
from ..dependencies import get_fetcher, get_settings
from ..fetcher import FetchError, FetchTimeout, UpstreamFetcher
from ..rewriter import rewrite_manifest
from ..settings import MediatorSettings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["proxy"])

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
MANIFEST_MEDIA_TYPE = "application/vnd.apple.mpegurl"


def _error(message: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code, headers=CORS_HEADERS)


def is_absolute_http_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def proxy_base_for(request: Request, settings: MediatorSettings) -> str:
    """URL of this endpoint as the client must see it in rewritten manifests."""
    if settings.public_url:
        return f"{settings.public_url.rstrip('/')}/proxy"
    return str(request.url_for("proxy"))


@router.get("/proxy", name="proxy")
async def proxy(
    request: Request,
    url: str | None = None,
    settings: MediatorSettings = Depends(get_settings),
    fetcher: UpstreamFetcher = Depends(get_fetcher),
) -> Response:
    """Relay ``url``, rewriting HLS manifests and streaming everything else."""

    if not url:
        return _error("Missing url parameter", 400)
    # An unencoded "+" in the query arrives as a space.
    target_url = url.replace(" ", "+")
    if not is_absolute_http_url(target_url):
        return _error("Invalid url parameter", 400)

    try:
        upstream = await fetcher.fetch(target_url)
    except FetchTimeout as exc:
        logger.warning("Proxy timeout for %s: %s", target_url, exc)
        return _error("Gateway Timeout", 504)
    except FetchError as exc:
        logger.error("Proxy error for %s: %s", target_url, exc)
        return _error("Proxy error", 500)

    headers = dict(CORS_HEADERS)
    content_type = upstream.content_type
    if content_type:
        headers["Content-Type"] = content_type

    if classify(content_type, target_url) is MediaKind.MANIFEST:
        try:
            text = await upstream.read_text()
        except FetchTimeout as exc:
            logger.warning("Manifest timeout for %s: %s", target_url, exc)
            return _error("Gateway Timeout", 504)
        except FetchError as exc:
            logger.error("Failed reading manifest %s: %s", target_url, exc)
            return _error("Proxy error", 500)
        headers.setdefault("Content-Type", MANIFEST_MEDIA_TYPE)
        body = rewrite_manifest(text, upstream.url, proxy_base_for(request, settings))
        return Response(body, status_code=upstream.status_code, headers=headers)

    async def relay():
        try:
            async for chunk in upstream.iter_bytes():
                yield chunk
        except httpx.HTTPError as exc:
            # Headers are already out; dropping the connection is the only signal left.
            logger.warning("Stream from %s interrupted: %s", target_url, exc)
            raise
        finally:
            await upstream.aclose()

    # The background close covers clients that leave before the body is iterated.
    return StreamingResponse(
        relay(),
        status_code=upstream.status_code,
        headers=headers,
        background=BackgroundTask(upstream.aclose),
    )
