"""Text-generation client for the Anthropic Messages API."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .errors import NetworkError, UpstreamError
from .logging import get_logger

LOGGER = get_logger(__name__)

PROVIDER = "Anthropic"
MESSAGES_PATH = "/v1/messages"


def _build_headers(api_key: str, version: str) -> Dict[str, str]:
    return {
        "User-Agent": "plugin-relay/1.0",
        "content-type": "application/json",
        "x-api-key": api_key,
        "anthropic-version": version,
    }


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_text(payload: Dict[str, Any]) -> str:
    """Return the trimmed text of the first content block."""

    if not isinstance(payload, dict):
        raise ValueError("Response body is not an object")
    content = payload.get("content")
    if not isinstance(content, list) or not content:
        raise ValueError("Response contained no content blocks")
    first = content[0]
    text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(text, str):
        raise ValueError("First content block has no text")
    return text.strip()


class CompletionClient:
    """Sends one message to the provider using the caller's API key."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._base_url = settings.anthropic_base_url.rstrip("/")
        self._model = settings.anthropic_model
        self._max_tokens = settings.anthropic_max_tokens
        self._version = settings.anthropic_version
        self._timeout = settings.upstream_timeout_seconds
        self._transport = transport

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def complete(self, prompt: str, api_key: str) -> str:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers=_build_headers(api_key, self._version),
                transport=self._transport,
            ) as client:
                response = await client.post(MESSAGES_PATH, json=self.build_payload(prompt))
        except httpx.HTTPError as exc:
            LOGGER.error("Completion provider unreachable", error=str(exc))
            raise NetworkError(PROVIDER, str(exc), error="Failed to reach completion provider") from exc

        if not response.is_success:
            body = _error_body(response)
            LOGGER.warning("Completion provider returned error", status=response.status_code)
            raise UpstreamError(
                PROVIDER,
                response.reason_phrase or "error",
                code=str(response.status_code),
                status_code=response.status_code,
                body=body,
                error="Upstream API error",
            )

        try:
            return extract_text(response.json())
        except ValueError as exc:
            LOGGER.error("Completion response could not be parsed", error=str(exc))
            raise NetworkError(PROVIDER, str(exc), error="Invalid response from completion provider") from exc


__all__ = ["CompletionClient", "extract_text"]
