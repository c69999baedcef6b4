"""Shared fixtures for the mediator tests."""
from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mediator import create_app
from mediator.settings import MediatorSettings


@pytest.fixture()
def settings(tmp_path: Path) -> MediatorSettings:
    """Settings with no client build and a short fetch timeout."""

    return MediatorSettings(static_dir=str(tmp_path / "dist"), fetch_timeout=2.0)


@pytest.fixture()
def client(settings: MediatorSettings) -> TestClient:
    return TestClient(create_app(settings))
