"""Pytest fixtures for relay tests."""

from __future__ import annotations

from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from plugin_relay.app import create_app
from plugin_relay.completion import CompletionClient
from plugin_relay.config import Settings
from plugin_relay.schemas import UploadResult

AUTH_TOKEN = "test-upload-token"


def make_settings(**overrides) -> Settings:
    values = {
        "cloudinary_cloud_name": "demo-cloud",
        "cloudinary_api_key": "123456",
        "cloudinary_api_secret": "shh",
        "auth_token": AUTH_TOKEN,
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def upload_result() -> UploadResult:
    return UploadResult(
        url="https://res.cloudinary.com/demo-cloud/image/upload/v1/figma-exports/photo.png",
        public_id="figma-exports/photo",
        width=640,
        height=480,
        format="png",
        bytes=2048,
        created_at="2024-05-01T10:00:00Z",
        caption="A red bicycle",
        alt="Bicycle leaning on a wall",
        context={"custom": {"caption": "A red bicycle", "MPVID": "MPV-42"}},
        tags=["figma", "metadata-export", "MPV-42"],
    )


@pytest.fixture
def asset_store(upload_result: UploadResult) -> MagicMock:
    store = MagicMock()
    store.upload = AsyncMock(return_value=upload_result)
    return store


@pytest.fixture
def build_client(asset_store: MagicMock) -> Callable[..., TestClient]:
    """Return a factory creating a client around a freshly built app."""

    def _build(
        settings: Optional[Settings] = None,
        transport: Optional[httpx.MockTransport] = None,
        raise_server_exceptions: bool = True,
    ) -> TestClient:
        settings = settings or make_settings()
        app = create_app(
            settings,
            asset_store=asset_store,
            completion_client=CompletionClient(settings, transport=transport),
        )
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _build


@pytest.fixture
def client(build_client) -> TestClient:
    return build_client()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {AUTH_TOKEN}"}
