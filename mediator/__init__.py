"""IPTV Mediator: channel catalogue and HLS relay proxy."""
from .app import create_app

__all__ = ["create_app"]
