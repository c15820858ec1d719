"""Seed a registry with the demo auctions and render the open-items page."""

import asyncio
import logging
from datetime import timedelta

from bidding_platform.auction.registry import AuctionRegistry
from bidding_platform.presentation.refresher import PageRefresher


async def main(output_path: str = "items.html") -> None:
    registry = AuctionRegistry()
    refresher = PageRefresher(
        registry.list_open_items, backend="html", options={"output_path": output_path}
    )
    registry.subscribe(refresher.refresh)
    await registry.add_item("Vintage Watch", 100.0, timedelta(hours=24))
    await registry.add_item("Gaming Console", 250.0, timedelta(hours=48))
    await registry.register_user("john_doe")
    await registry.place_bid(1, "john_doe", 150.0)
    await refresher.drain()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
