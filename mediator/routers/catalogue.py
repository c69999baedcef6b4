"""Category and channel listing endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..catalogue import CATEGORIES, parse_channels
from ..dependencies import get_fetcher, get_settings
from ..fetcher import FetchError, UpstreamFetcher
from ..settings import MediatorSettings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalogue"])


@router.get("/categories")
def list_categories() -> list[dict[str, str]]:
    return [category.to_dict() for category in CATEGORIES]


@router.get("/playlist")
async def get_playlist(
    url: str | None = None,
    settings: MediatorSettings = Depends(get_settings),
    fetcher: UpstreamFetcher = Depends(get_fetcher),
):
    """Fetch a channel playlist and return its channels as JSON."""

    playlist_url = url or settings.default_playlist_url
    logger.info("Fetching playlist: %s", playlist_url)

    try:
        upstream = await fetcher.fetch(playlist_url)
        if upstream.status_code >= 400:
            await upstream.aclose()
            raise FetchError(f"upstream answered {upstream.status_code}")
        text = await upstream.read_text()
        channels = parse_channels(text)
    except FetchError as exc:
        logger.error("Error fetching playlist %s: %s", playlist_url, exc)
        return JSONResponse({"error": "Failed to fetch playlist"}, status_code=500)

    return {"count": len(channels), "channels": [channel.to_dict() for channel in channels]}
