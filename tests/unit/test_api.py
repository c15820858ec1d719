"""HTTP tests for the bidding routes and admin endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bidding_platform.config import get_server_config
from bidding_platform.main import app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("BIDDING_CONFIG_PATH", raising=False)
    get_server_config.cache_clear()
    with TestClient(app) as test_client:
        yield test_client


def create_item(client, **overrides):
    body = {"name": "Vintage Watch", "starting_price": 100.0, "duration_hours": 24}
    body.update(overrides)
    return client.post("/items", json=body)


class TestItems:
    def test_create_items_assigns_sequential_ids(self, client):
        first = create_item(client)
        second = create_item(client, name="Gaming Console", starting_price=250.0)
        assert first.status_code == 201
        assert first.json() == {"item_id": 1}
        assert second.json() == {"item_id": 2}

    def test_duration_hours_optional(self, client):
        response = create_item(client, duration_hours=None)
        assert response.status_code == 422

        body = {"name": "Lamp", "starting_price": 5}
        assert client.post("/items", json=body).status_code == 201

    @pytest.mark.parametrize(
        "overrides",
        [
            {"starting_price": -1},
            {"duration_hours": 0},
            {"name": ""},
            {"starting_price": "cheap"},
            {"duration_hours": 100000},
        ],
    )
    def test_invalid_item_rejected(self, client, overrides):
        response = create_item(client, **overrides)
        assert response.status_code == 422
        assert client.get("/items").json() == []

    def test_list_open_items(self, client):
        create_item(client)
        create_item(client, name="Gaming Console")
        client.post("/items/1/close")

        items = client.get("/items").json()
        assert [item["name"] for item in items] == ["Gaming Console"]
        assert items[0]["status"] == "open"
        assert items[0]["current_leader"] is None

    def test_get_item(self, client):
        create_item(client)
        assert client.get("/items/1").json()["current_price"] == 100.0
        assert client.get("/items/9").status_code == 404

    def test_close_unknown_item(self, client):
        assert client.post("/items/3/close").json() == {"closed": False}


class TestBids:
    def test_bid_scenario(self, client):
        create_item(client)

        first = client.post("/items/1/bids", json={"bidder_id": "bidderA", "amount": 150.0})
        assert first.status_code == 200
        assert first.json()["accepted"] is True
        assert first.json()["item"]["current_leader"] == "bidderA"

        tie = client.post("/items/1/bids", json={"bidder_id": "bidderB", "amount": 150.0})
        assert tie.json()["accepted"] is False
        assert tie.json()["item"]["current_leader"] == "bidderA"

        higher = client.post("/items/1/bids", json={"bidder_id": "bidderB", "amount": 160.0})
        assert higher.json()["accepted"] is True
        assert higher.json()["item"]["current_price"] == 160.0

    def test_bid_on_unknown_item(self, client):
        response = client.post("/items/5/bids", json={"bidder_id": "alice", "amount": 10})
        assert response.status_code == 200
        assert response.json() == {"accepted": False, "item": None}

    def test_bid_on_closed_item(self, client):
        create_item(client)
        client.post("/items/1/close")
        response = client.post("/items/1/bids", json={"bidder_id": "alice", "amount": 1e6})
        assert response.json()["accepted"] is False

    def test_oversized_bid_amount_rejected(self, client):
        create_item(client)
        response = client.post("/items/1/bids", json={"bidder_id": "alice", "amount": 10**400})
        assert response.status_code == 200
        assert response.json()["accepted"] is False
        assert response.json()["item"]["current_price"] == 100.0

    def test_oversized_starting_price_rejected(self, client):
        response = create_item(client, starting_price=10**400)
        assert response.status_code == 422
        assert client.get("/items").json() == []

    def test_malformed_bid(self, client):
        create_item(client)
        response = client.post("/items/1/bids", json={"bidder_id": "alice"})
        assert response.status_code == 422


class TestUsers:
    def test_register_user_twice(self, client):
        for _ in range(2):
            response = client.post("/users", json={"bidder_id": "john_doe"})
            assert response.status_code == 201
        assert client.get("/admin/stats").json()["registered_users"] == 1

    def test_missing_bidder_id(self, client):
        assert client.post("/users", json={}).status_code == 422


class TestAdmin:
    def test_health(self, client):
        body = client.get("/admin/health").json()
        assert body["status"] == "healthy"
        assert body["presentation_backend"] == "log"
        assert body["open_items"] == 0

        create_item(client)
        create_item(client, name="Gaming Console")
        client.post("/items/2/close")
        assert client.get("/admin/health").json()["open_items"] == 1

    def test_stats(self, client):
        create_item(client)
        create_item(client, name="Gaming Console")
        client.post("/items/1/bids", json={"bidder_id": "alice", "amount": 101})
        client.post("/items/2/bids", json={"bidder_id": "alice", "amount": 101})

        body = client.get("/admin/stats").json()
        assert body["total_items"] == 2
        assert body["total_bids"] == 2
        assert body["bids_per_item"] == 1.0
        assert body["items_led_by_bidder"] == {"alice": 2}

    def test_config(self, client):
        body = client.get("/admin/config").json()
        assert body["default_duration_hours"] == 24.0
        assert body["max_duration_hours"] == 720.0

    def test_root_and_ping(self, client):
        assert client.get("/").json()["service"] == "bidding-platform"
        assert client.get("/ping").json()["status"] == "ok"
