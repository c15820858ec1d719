"""Admin health endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..auction.registry import AuctionRegistry

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_registry(request: Request) -> AuctionRegistry:
    return request.app.state.registry


@router.get("/health")
async def health(
    request: Request,
    registry: AuctionRegistry = Depends(_get_registry),
) -> dict[str, Any]:
    start_time = getattr(request.app.state, "start_time", None)
    uptime = int((datetime.now(timezone.utc) - start_time).total_seconds()) if start_time else 0
    open_items = await registry.list_open_items()
    return {
        "status": "healthy",
        "uptime_seconds": uptime,
        "version": request.app.version,
        "open_items": len(open_items),
        "presentation_backend": request.app.state.server_config.presentation.backend,
    }
