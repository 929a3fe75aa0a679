"""
Idempotency-Key replay on order-creating endpoints
"""
import pytest

from ordering.main import app
from ordering.middleware.idempotency import IN_FLIGHT, record_key


class MemoryRedis:
    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, nx=False, ex=None):
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    async def delete(self, key):
        self.data.pop(key, None)


@pytest.fixture
def redis(monkeypatch) -> MemoryRedis:
    fake = MemoryRedis()
    monkeypatch.setattr(app.state, "redis", fake, raising=False)
    return fake


CART = {
    "items": [{"menu_item_id": "item-1", "name": "Chả Giò", "price": 7.99, "quantity": 1}],
    "total": 11.98,
}


async def test_repeated_checkout_with_same_key_creates_one_order(client, gateway, redis):
    headers = {"Idempotency-Key": "checkout-abc"}
    first = await client.post("/checkout-session", json=CART, headers=headers)
    second = await client.post("/checkout-session", json=CART, headers=headers)

    assert first.status_code == second.status_code == 200
    assert second.headers.get("X-Idempotency-Replay") == "true"
    assert second.json() == first.json()
    assert len(gateway.calls) == 1
    assert len((await client.get("/orders")).json()) == 1


async def test_requests_without_key_are_not_cached(client, redis):
    await client.post("/checkout-session", json=CART)
    await client.post("/checkout-session", json=CART)
    assert redis.data == {}
    assert len((await client.get("/orders")).json()) == 2


async def test_key_still_in_flight_is_conflict(client, gateway, redis):
    redis.data[record_key("/checkout-session", "checkout-busy")] = IN_FLIGHT
    r = await client.post("/checkout-session", json=CART, headers={"Idempotency-Key": "checkout-busy"})
    assert r.status_code == 409
    assert gateway.calls == []


async def test_same_key_with_different_cart_is_rejected(client, gateway, redis):
    headers = {"Idempotency-Key": "checkout-reused"}
    await client.post("/checkout-session", json=CART, headers=headers)
    other = {**CART, "total": 99.00}
    r = await client.post("/checkout-session", json=other, headers=headers)
    assert r.status_code == 422
    assert len(gateway.calls) == 1


async def test_processor_failure_releases_the_key(client, gateway, redis):
    headers = {"Idempotency-Key": "checkout-retry"}
    gateway.fail = True
    r = await client.post("/checkout-session", json=CART, headers=headers)
    assert r.status_code == 502
    assert redis.data == {}

    gateway.fail = False
    r = await client.post("/checkout-session", json=CART, headers=headers)
    assert r.status_code == 200
    assert "X-Idempotency-Replay" not in r.headers
