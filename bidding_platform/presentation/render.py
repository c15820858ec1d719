"""Render open-item snapshots for the presentation layer."""

from __future__ import annotations

from html import escape
from typing import Iterable

import orjson

from ..auction.models import ItemSnapshot

_ORJSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2

_PAGE_HEAD = """<!DOCTYPE html>
<html>
<head>
    <title>Online Bidding Platform</title>
    <link rel="stylesheet" href="styles.css">
</head>
<body>
    <div class="container">
        <h1>Active Auctions</h1>
        <div class="items-grid">
"""

_PAGE_TAIL = """        </div>
    </div>
    <script src="script.js"></script>
</body>
</html>
"""


def render_item_card(item: ItemSnapshot) -> str:
    leader = escape(item.current_leader or "")
    min_bid = f"{item.current_price + 0.01:.2f}"
    return "\n".join(
        [
            "<div class='item-card'>",
            f"<h2>{escape(item.name)}</h2>",
            f"<p>Current Bid: ${item.current_price:.2f}</p>",
            f"<p>Highest Bidder: {leader}</p>",
            f"<p>Ends: {item.deadline.strftime('%Y-%m-%d %H:%M UTC')}</p>",
            f"<form class='bid-form' action='/items/{item.id}/bids' method='POST'>",
            "<input type='text' name='bidder_id' placeholder='Your Name' required>",
            f"<input type='number' name='amount' placeholder='Your Bid' step='0.01' min='{min_bid}' required>",
            "<button type='submit'>Place Bid</button>",
            "</form>",
            "</div>",
        ]
    )


def render_html(items: Iterable[ItemSnapshot]) -> str:
    cards = "".join(render_item_card(item) + "\n" for item in items)
    return _PAGE_HEAD + cards + _PAGE_TAIL


def render_json(items: Iterable[ItemSnapshot]) -> bytes:
    return orjson.dumps({"items": [item.to_dict() for item in items]}, option=_ORJSON_OPTIONS)
