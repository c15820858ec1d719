"""Configuration helpers for the bidding server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

_DEFAULT_SERVER_CONFIG = Path(__file__).resolve().parent / "server.yaml"


@dataclass(frozen=True)
class AuctionConfig:
    default_duration_hours: float
    max_duration_hours: float | None


@dataclass(frozen=True)
class PresentationConfig:
    backend: str
    options: Mapping[str, Any]


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class ServerConfig:
    listen: Mapping[str, Any]
    auction: AuctionConfig
    presentation: PresentationConfig
    logging: LoggingConfig


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return yaml.safe_load(path.read_text()) or {}


def parse_server_config(data: Mapping[str, Any]) -> ServerConfig:
    auction = data.get("auction", {})
    max_duration = auction.get("max_duration_hours")
    presentation = dict(data.get("presentation") or {})
    backend = str(presentation.pop("backend", "log"))
    logging_section = data.get("logging", {})
    return ServerConfig(
        listen=data.get("listen", {}),
        auction=AuctionConfig(
            default_duration_hours=float(auction.get("default_duration_hours", 24)),
            max_duration_hours=float(max_duration) if max_duration is not None else None,
        ),
        presentation=PresentationConfig(backend=backend, options=presentation),
        logging=LoggingConfig(level=str(logging_section.get("level", "INFO")).upper()),
    )


@lru_cache(maxsize=1)
def get_server_config() -> ServerConfig:
    path = Path(os.getenv("BIDDING_CONFIG_PATH", _DEFAULT_SERVER_CONFIG))
    return parse_server_config(_load_yaml(path))
