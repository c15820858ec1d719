"""Expose currently loaded server config for debugging."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..config import ServerConfig

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_config(request: Request) -> ServerConfig:
    return request.app.state.server_config


@router.get("/config")
async def config(
    request: Request,
    config: ServerConfig = Depends(_get_config),
) -> dict:
    return {
        "default_duration_hours": config.auction.default_duration_hours,
        "max_duration_hours": config.auction.max_duration_hours,
        "presentation_backend": config.presentation.backend,
        "presentation_options": dict(config.presentation.options),
        "log_level": config.logging.level,
        "version": request.app.version,
    }
