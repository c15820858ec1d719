from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request, status
from jsonschema import ValidationError

from .admin import config as admin_config
from .admin import health as admin_health
from .admin import stats as admin_stats
from .auction.models import InvalidItemError
from .auction.registry import AuctionRegistry
from .config import ServerConfig, get_server_config
from .presentation.refresher import PageRefresher
from .validation.validator import SchemaRegistry, get_schema_registry

logger = logging.getLogger(__name__)


def build_registry(server_config: ServerConfig) -> AuctionRegistry:
    max_hours = server_config.auction.max_duration_hours
    return AuctionRegistry(
        max_duration=timedelta(hours=max_hours) if max_hours is not None else None,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    server_config = get_server_config()
    logging.getLogger("bidding_platform").setLevel(server_config.logging.level)
    schema_registry = get_schema_registry()
    registry = build_registry(server_config)
    refresher = PageRefresher(
        registry.list_open_items,
        backend=server_config.presentation.backend,
        options=dict(server_config.presentation.options),
    )
    registry.subscribe(refresher.refresh)

    app.state.server_config = server_config
    app.state.schema_registry = schema_registry
    app.state.registry = registry
    app.state.refresher = refresher
    app.state.start_time = datetime.now(timezone.utc)
    logger.info("bidding platform started, presentation=%s", server_config.presentation.backend)

    yield

    await refresher.drain()


app = FastAPI(
    title="Online Bidding Platform",
    version="1.0.0",
    docs_url="/docs",
    lifespan=lifespan,
)

app.include_router(admin_health.router)
app.include_router(admin_stats.router)
app.include_router(admin_config.router)


# Dependency helpers ---------------------------------------------------------


def get_server_settings(request: Request) -> ServerConfig:
    return request.app.state.server_config


def get_schema_service(request: Request) -> SchemaRegistry:
    return request.app.state.schema_registry


def get_registry(request: Request) -> AuctionRegistry:
    return request.app.state.registry


# Routes ---------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root(settings: ServerConfig = Depends(get_server_settings)) -> dict[str, Any]:
    return {
        "service": "bidding-platform",
        "version": app.version,
        "auction": {
            "default_duration_hours": settings.auction.default_duration_hours,
            "max_duration_hours": settings.auction.max_duration_hours,
        },
        "presentation": settings.presentation.backend,
    }


@app.get("/ping", tags=["meta"])
async def ping() -> dict[str, Any]:
    return {"status": "ok", "version": app.version}


@app.post("/items", tags=["items"], status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: dict[str, Any] = Body(...),
    registry: AuctionRegistry = Depends(get_registry),
    schemas: SchemaRegistry = Depends(get_schema_service),
    settings: ServerConfig = Depends(get_server_settings),
) -> dict[str, int]:
    try:
        schemas.validate("item_create", payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc.message)) from exc
    hours = payload.get("duration_hours", settings.auction.default_duration_hours)
    try:
        duration = timedelta(hours=hours)
    except OverflowError as exc:
        raise HTTPException(status_code=422, detail="duration_hours out of range") from exc
    try:
        item_id = await registry.add_item(payload["name"], payload["starting_price"], duration)
    except InvalidItemError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"item_id": item_id}


@app.get("/items", tags=["items"])
async def list_open_items(
    registry: AuctionRegistry = Depends(get_registry),
) -> list[dict[str, Any]]:
    return [item.to_dict() for item in await registry.list_open_items()]


@app.get("/items/{item_id}", tags=["items"])
async def get_item(
    item_id: int,
    registry: AuctionRegistry = Depends(get_registry),
) -> dict[str, Any]:
    item = await registry.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="item not found")
    return item.to_dict()


@app.post("/items/{item_id}/bids", tags=["bids"])
async def place_bid(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    registry: AuctionRegistry = Depends(get_registry),
    schemas: SchemaRegistry = Depends(get_schema_service),
) -> dict[str, Any]:
    try:
        schemas.validate("bid", payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc.message)) from exc
    accepted, item = await registry.submit_bid(item_id, payload["bidder_id"], payload["amount"])
    return {
        "accepted": accepted,
        "item": item.to_dict() if item else None,
    }


@app.post("/items/{item_id}/close", tags=["items"])
async def close_item(
    item_id: int,
    registry: AuctionRegistry = Depends(get_registry),
) -> dict[str, bool]:
    return {"closed": await registry.close_item(item_id)}


@app.post("/users", tags=["users"], status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: dict[str, Any] = Body(...),
    registry: AuctionRegistry = Depends(get_registry),
    schemas: SchemaRegistry = Depends(get_schema_service),
) -> dict[str, str]:
    try:
        schemas.validate("user_registration", payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc.message)) from exc
    await registry.register_user(payload["bidder_id"])
    return {"status": "registered", "bidder_id": payload["bidder_id"]}
