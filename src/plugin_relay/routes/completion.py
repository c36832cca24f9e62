"""Text-generation relay.

This route is not gated by the bearer token: callers authenticate to the
provider with their own key, which is forwarded for the single upstream call
and then dropped.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends

from ..dependencies import get_completion_relay
from ..errors import RelayError
from ..logging import get_logger
from ..relay import CompletionRelay
from ..responses import completion_error_response
from ..schemas import CompletionRequest, CompletionResponse

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["completion"])


@router.post("/claude", response_model=CompletionResponse)
async def complete(
    body: Optional[CompletionRequest] = None,
    relay: CompletionRelay = Depends(get_completion_relay),
) -> Any:
    """
    Forward a prompt to the completion provider and return the generated text.

    Request body:
    {
        "prompt": "...",
        "fieldType": "title",
        "targetLocale": "de-DE",
        "apiKey": "<provider key>"
    }
    """
    try:
        text = await relay.complete(body or CompletionRequest())
    except RelayError as exc:
        LOGGER.warning("Completion failed", status=exc.status_code, error=exc.error)
        return completion_error_response(exc)
    return CompletionResponse(text=text)
