"""Liveness endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from ..schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report that the relay process is up; upstream providers are not probed."""
    return HealthResponse(
        message="Plugin relay server is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
