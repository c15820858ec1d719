"""In-memory registry owning every auction item and registered bidder."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Callable

from .fsm import ItemStatus
from .models import AuctionItem, InvalidItemError, ItemSnapshot, utcnow, validate_price

logger = logging.getLogger(__name__)

RefreshListener = Callable[[], None]


class AuctionRegistry:
    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utcnow,
        max_duration: timedelta | None = None,
    ) -> None:
        self._clock = clock
        self._max_duration = max_duration
        self._items: dict[int, AuctionItem] = {}
        self._item_locks: dict[int, asyncio.Lock] = {}
        self._users: set[str] = set()
        self._listeners: list[RefreshListener] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    def subscribe(self, listener: RefreshListener) -> None:
        self._listeners.append(listener)

    async def add_item(self, name: str, starting_price: float, duration: timedelta) -> int:
        if not name:
            raise InvalidItemError("item name is required")
        price = validate_price(starting_price)
        if duration <= timedelta(0):
            raise InvalidItemError("duration must be positive")
        if self._max_duration is not None and duration > self._max_duration:
            raise InvalidItemError(f"duration exceeds maximum of {self._max_duration}")
        try:
            deadline = self._clock() + duration
        except OverflowError as exc:
            raise InvalidItemError("duration out of range") from exc
        async with self._lock:
            item_id = self._next_id
            self._next_id += 1
            item = AuctionItem(item_id, name, price, deadline)
            self._items[item_id] = item
            self._item_locks[item_id] = asyncio.Lock()
        logger.info("item %s created name=%r deadline=%s", item_id, name, item.deadline.isoformat())
        self._notify()
        return item_id

    async def place_bid(self, item_id: int, bidder_id: str, amount: float) -> bool:
        accepted, _ = await self.submit_bid(item_id, bidder_id, amount)
        return accepted

    async def submit_bid(
        self, item_id: int, bidder_id: str, amount: float
    ) -> tuple[bool, ItemSnapshot | None]:
        """Place a bid and return the outcome with the item state it produced."""
        item = self._items.get(item_id)
        if item is None:
            logger.debug("bid on unknown item %s from %s", item_id, bidder_id)
            return False, None
        async with self._item_locks[item_id]:
            accepted = item.place_bid(bidder_id, amount, now=self._clock())
            snapshot = item.snapshot()
        if not accepted:
            logger.debug("bid rejected item=%s bidder=%s amount=%s", item_id, bidder_id, amount)
            return False, snapshot
        logger.info("bid accepted item=%s bidder=%s amount=%s", item_id, bidder_id, amount)
        self._notify()
        return True, snapshot

    async def close_item(self, item_id: int) -> bool:
        item = self._items.get(item_id)
        if item is None:
            return False
        async with self._item_locks[item_id]:
            changed = item.close()
        if changed:
            logger.info("item %s closed", item_id)
            self._notify()
        return True

    async def register_user(self, bidder_id: str) -> None:
        async with self._lock:
            self._users.add(bidder_id)

    async def list_open_items(self) -> list[ItemSnapshot]:
        async with self._lock:
            return [
                item.snapshot()
                for item in self._items.values()
                if item.status is ItemStatus.OPEN
            ]

    async def list_items(self) -> list[ItemSnapshot]:
        async with self._lock:
            return [item.snapshot() for item in self._items.values()]

    async def get_item(self, item_id: int) -> ItemSnapshot | None:
        item = self._items.get(item_id)
        return item.snapshot() if item else None

    async def users(self) -> list[str]:
        async with self._lock:
            return sorted(self._users)

    async def stats(self) -> dict[str, Any]:
        async with self._lock:
            items = list(self._items.values())
            user_count = len(self._users)
        now = self._clock()
        open_items = [item for item in items if item.status is ItemStatus.OPEN]
        return {
            "total_items": len(items),
            "open_items": len(open_items),
            "closed_items": len(items) - len(open_items),
            "expired_open_items": sum(1 for item in open_items if item.is_expired(now)),
            "total_bids": sum(len(item.bids) for item in items),
            "registered_users": user_count,
        }

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.error("refresh listener %r failed", listener, exc_info=True)
