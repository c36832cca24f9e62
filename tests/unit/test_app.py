"""Tests for the application factory, health check and configuration."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from pydantic import ValidationError

from plugin_relay import app as app_module
from plugin_relay.config import MAX_UPLOAD_BYTES, load_settings
from plugin_relay.errors import ForbiddenError, UnauthorizedError
from plugin_relay.logging import get_logger
from plugin_relay.security import check_token, extract_bearer_token

from .conftest import make_settings

CLOUDINARY_ENV = ["CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"]


class TestHealth:
    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"]
        assert data["timestamp"]

    def test_health_does_not_touch_providers(self, client, asset_store) -> None:
        asset_store.upload.side_effect = RuntimeError("provider down")
        assert client.get("/health").json()["success"] is True
        assert asset_store.upload.await_count == 0


class TestRouting:
    def test_unknown_endpoint(self, client) -> None:
        response = client.get("/nope")
        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Endpoint not found"
        assert "POST /upload - Upload images" in data["available_endpoints"]

    @pytest.mark.parametrize(
        "method, path",
        [("GET", "/upload"), ("POST", "/health"), ("GET", "/api/claude")],
    )
    def test_unrouted_method_lists_endpoints(self, client, method, path) -> None:
        response = client.request(method, path)
        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Endpoint not found"
        assert data["available_endpoints"] == app_module.AVAILABLE_ENDPOINTS

    def test_http_exception_headers_preserved(self, settings, asset_store) -> None:
        app = app_module.create_app(settings, asset_store=asset_store)

        @app.get("/limited")
        async def limited():
            raise HTTPException(status_code=429, detail="Slow down", headers={"Retry-After": "5"})

        response = TestClient(app).get("/limited")
        assert response.status_code == 429
        assert response.headers["retry-after"] == "5"
        assert response.json() == {"success": False, "error": "Slow down"}

    def test_cors_preflight(self, client) -> None:
        response = client.options(
            "/upload",
            headers={
                "Origin": "https://www.figma.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestBearerToken:
    @pytest.mark.parametrize(
        "header, expected",
        [
            (None, None),
            ("", None),
            ("Bearer", None),
            ("Bearer abc", "abc"),
            ("Token abc", "abc"),
            ("Bearer abc def", "abc"),
        ],
    )
    def test_extract(self, header, expected) -> None:
        assert extract_bearer_token(header) == expected

    def test_check_token(self) -> None:
        check_token("secret", "secret")
        with pytest.raises(UnauthorizedError):
            check_token(None, "secret")
        with pytest.raises(ForbiddenError):
            check_token("other", "secret")
        with pytest.raises(ForbiddenError):
            check_token("secret", None)


class TestSettings:
    def test_defaults(self) -> None:
        settings = make_settings()
        assert settings.upload_folder == "figma-exports"
        assert settings.upload_max_bytes == MAX_UPLOAD_BYTES == 10 * 1024 * 1024
        assert settings.port == 3000
        assert settings.is_development is False

    def test_settings_are_immutable(self) -> None:
        settings = make_settings()
        with pytest.raises(ValidationError):
            settings.upload_folder = "elsewhere"

    def test_missing_credentials(self, monkeypatch) -> None:
        for name in CLOUDINARY_ENV:
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ValidationError):
            load_settings(_env_file=None)

    def test_blank_credentials(self) -> None:
        with pytest.raises(ValidationError):
            make_settings(cloudinary_api_secret="  ")

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "env-cloud")
        monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
        monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")
        monkeypatch.setenv("UPLOAD_FOLDER", "plugin-uploads")
        monkeypatch.setenv("CAPTION_KEYS", '["Title (caption)"]')
        settings = load_settings(_env_file=None)
        assert settings.cloudinary_cloud_name == "env-cloud"
        assert settings.upload_folder == "plugin-uploads"
        assert settings.caption_keys == ["Title (caption)"]


class TestMain:
    def test_exits_when_credentials_missing(self, monkeypatch, tmp_path) -> None:
        for name in CLOUDINARY_ENV:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as exc_info:
            app_module.main()
        assert exc_info.value.code == 1


class TestLogging:
    def test_create_app_configures_log_level(self, asset_store) -> None:
        settings = make_settings(log_level="DEBUG")
        with patch.object(app_module, "configure_logging") as mock_configure:
            app_module.create_app(settings, asset_store=asset_store)
        mock_configure.assert_called_once_with("DEBUG")

    def test_get_logger_binds_initial_values(self) -> None:
        with patch("structlog.get_logger") as mock_get_logger:
            get_logger("plugin_relay.test", request_id="abc")
        mock_get_logger.assert_called_once_with("plugin_relay.test")
        mock_get_logger.return_value.bind.assert_called_once_with(request_id="abc")
