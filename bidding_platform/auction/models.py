"""Auction item state and the single-item bidding rule."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .fsm import ItemEvent, ItemStatus, transition


class InvalidItemError(ValueError):
    """Raised when an item is constructed with a bad price or duration."""


@dataclass(frozen=True)
class Bid:
    bidder_id: str
    amount: float
    placed_at: datetime


@dataclass(frozen=True)
class ItemSnapshot:
    """Read-only view of an item handed to the presentation layer."""

    id: int
    name: str
    current_price: float
    current_leader: str | None
    deadline: datetime
    status: ItemStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "current_price": self.current_price,
            "current_leader": self.current_leader,
            "deadline": self.deadline.isoformat().replace("+00:00", "Z"),
            "status": self.status.value,
        }


def validate_price(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidItemError("starting price must be a number")
    try:
        price = float(value)
    except OverflowError as exc:
        raise InvalidItemError("starting price out of range") from exc
    if not math.isfinite(price):
        raise InvalidItemError("starting price must be finite")
    if price < 0:
        raise InvalidItemError("starting price must not be negative")
    return price


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuctionItem:
    def __init__(
        self,
        item_id: int,
        name: str,
        starting_price: float,
        deadline: datetime,
    ) -> None:
        if deadline.tzinfo is None:
            raise InvalidItemError("deadline must include timezone information")
        self._id = item_id
        self._name = name
        self._starting_price = validate_price(starting_price)
        self._current_price = self._starting_price
        self._current_leader: str | None = None
        self._deadline = deadline.astimezone(timezone.utc)
        self._status = ItemStatus.OPEN
        self._bids: list[Bid] = []

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def starting_price(self) -> float:
        return self._starting_price

    @property
    def current_price(self) -> float:
        return self._current_price

    @property
    def current_leader(self) -> str | None:
        return self._current_leader

    @property
    def deadline(self) -> datetime:
        return self._deadline

    @property
    def status(self) -> ItemStatus:
        return self._status

    @property
    def bids(self) -> tuple[Bid, ...]:
        return tuple(self._bids)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utcnow()) >= self._deadline

    def place_bid(self, bidder_id: str, amount: float, *, now: datetime | None = None) -> bool:
        """Accept the bid iff the item is open, unexpired and outbid strictly.

        A rejected bid leaves the item untouched and is reported as ``False``.
        """
        ref = now or utcnow()
        if self._status is not ItemStatus.OPEN or self.is_expired(ref):
            return False
        if isinstance(amount, bool):
            return False
        try:
            value = float(amount)
        except (TypeError, ValueError, OverflowError):
            return False
        if not math.isfinite(value) or value <= self._current_price:
            return False
        self._current_price = value
        self._current_leader = bidder_id
        self._bids.append(Bid(bidder_id=bidder_id, amount=value, placed_at=ref))
        return True

    def close(self) -> bool:
        """Mark the item closed. Returns whether the status changed."""
        previous = self._status
        self._status = transition(previous, ItemEvent.CLOSE)
        return previous is not self._status

    def snapshot(self) -> ItemSnapshot:
        return ItemSnapshot(
            id=self._id,
            name=self._name,
            current_price=self._current_price,
            current_leader=self._current_leader,
            deadline=self._deadline,
            status=self._status,
        )
