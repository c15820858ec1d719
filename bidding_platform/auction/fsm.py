"""Auction item finite state machine."""

from __future__ import annotations

from enum import Enum


class ItemStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ItemEvent(str, Enum):
    CLOSE = "close"


_TRANSITIONS = {
    (ItemStatus.OPEN, ItemEvent.CLOSE): ItemStatus.CLOSED,
    # Closing twice is a no-op.
    (ItemStatus.CLOSED, ItemEvent.CLOSE): ItemStatus.CLOSED,
}


def transition(current: ItemStatus, event: ItemEvent) -> ItemStatus:
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError as exc:
        raise ValueError(f"invalid transition from {current} via {event}") from exc
