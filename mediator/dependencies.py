"""FastAPI dependencies for the mediator routers."""
from fastapi import Request

from .fetcher import UpstreamFetcher
from .settings import MediatorSettings


def get_settings(request: Request) -> MediatorSettings:
    return request.app.state.settings


def get_fetcher(request: Request) -> UpstreamFetcher:
    """Resolve the upstream fetcher configured by the application factory."""
    return request.app.state.fetcher
