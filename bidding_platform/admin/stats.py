"""Operational stats endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from ..auction.registry import AuctionRegistry

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_registry(request: Request) -> AuctionRegistry:
    return request.app.state.registry


@router.get("/stats")
async def stats(registry: AuctionRegistry = Depends(_get_registry)) -> dict[str, Any]:
    counters = await registry.stats()
    items = await registry.list_items()
    leaders: dict[str, int] = {}
    for item in items:
        if item.current_leader:
            leaders[item.current_leader] = leaders.get(item.current_leader, 0) + 1
    bids_per_item = (
        round(counters["total_bids"] / counters["total_items"], 4)
        if counters["total_items"]
        else 0.0
    )
    return {
        **counters,
        "bids_per_item": bids_per_item,
        "items_led_by_bidder": dict(sorted(leaders.items())),
    }
