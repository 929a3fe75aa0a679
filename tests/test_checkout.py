"""
Checkout session builder — pricing, order-before-session ordering, failures
"""
from decimal import Decimal

from conftest import FakeGateway
from ordering.api.deps import get_payment_gateway
from ordering.main import app
from ordering.schemas.order import CartLine
from ordering.services.checkout import (
    addon_surcharge,
    build_line_items,
    compute_total,
)

FEE = Decimal("3.99")


def _line(**overrides) -> CartLine:
    data = {"menu_item_id": "item-pho-tai", "name": "Phở Tái", "price": "10.00", "quantity": 2}
    data.update(overrides)
    return CartLine(**data)


def _cart(**overrides) -> dict:
    line = {"menu_item_id": "item-pho-tai", "name": "Phở Tái", "price": 10.00, "quantity": 2,
            "addons": ["Fried Egg"], "spice_level": "hot"}
    line.update(overrides)
    return {"items": [line], "total": 25.49, "special_instructions": "No cilantro"}


# ─── Pricing ──────────────────────────────────────────────────────────────────

def test_total_includes_addon_and_delivery_fee():
    assert compute_total([_line(addons=["Fried Egg"])], FEE) == Decimal("25.49")


def test_unknown_addon_costs_nothing():
    with_unknown = compute_total([_line(addons=["Nonexistent"])], FEE)
    without = compute_total([_line()], FEE)
    assert with_unknown == without == Decimal("23.99")
    assert addon_surcharge(["Nonexistent"]) == Decimal("0")


def test_addon_surcharge_sums_every_known_addon():
    line = _line(price="12.99", quantity=1, addons=["Extra Meat", "Spring Roll"])
    assert addon_surcharge(line.addons) == Decimal("6.49")
    assert compute_total([line], FEE) == Decimal("23.47")


def test_line_items_in_cents_with_delivery_fee_last():
    items = build_line_items([_line(addons=["Fried Egg"], spice_level="mild")], FEE, "usd")
    assert [i["price_data"]["unit_amount"] for i in items] == [1000, 150, 399]
    assert [i["quantity"] for i in items] == [2, 1, 1]
    assert items[0]["price_data"]["product_data"]["description"] == "Spice: mild | Add-ons: Fried Egg"
    assert items[-1]["price_data"]["product_data"]["name"] == "Delivery Fee"
    charged = sum(i["price_data"]["unit_amount"] * i["quantity"] for i in items)
    assert charged == 2549


# ─── Endpoint ─────────────────────────────────────────────────────────────────

async def test_checkout_persists_pending_order_before_session(client, gateway):
    r = await client.post("/checkout-session", json=_cart(), headers={"origin": "https://pho.example"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["session_id"] == "cs_test_123"
    assert body["url"].startswith("https://checkout.stripe.test/")
    assert Decimal(body["computed_total"]) == Decimal("25.49")

    order_id = body["order_id"]
    call = gateway.calls[0]
    assert call["metadata"]["orderId"] == order_id
    assert call["success_url"] == (
        f"https://pho.example/success?session_id={{CHECKOUT_SESSION_ID}}&order_id={order_id}"
    )
    assert call["cancel_url"] == "https://pho.example/?canceled=true"

    order = (await client.get(f"/orders/{order_id}")).json()
    assert order["status"] == "pending"
    assert order["payment_status"] is None
    assert Decimal(order["total"]) == Decimal("25.49")
    assert order["special_instructions"] == "No cilantro"
    item = order["items"][0]
    assert Decimal(item["unit_price"]) == Decimal("10.00")
    assert item["quantity"] == 2
    assert item["addons"] == ["Fried Egg"]
    assert item["spice_level"] == "hot"


async def test_processor_failure_keeps_orphan_pending_order(client):
    app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway(fail=True)

    r = await client.post("/checkout-session", json=_cart())
    assert r.status_code == 502

    orders = (await client.get("/orders")).json()
    assert len(orders) == 1
    assert orders[0]["status"] == "pending"
    assert orders[0]["payment_status"] is None


async def test_client_total_is_stored_verbatim(client):
    payload = _cart()
    payload["total"] = 1.00
    r = await client.post("/checkout-session", json=payload)
    assert r.status_code == 200
    body = r.json()
    assert Decimal(body["computed_total"]) == Decimal("25.49")

    order = (await client.get(f"/orders/{body['order_id']}")).json()
    assert Decimal(order["total"]) == Decimal("1.00")


async def test_zero_quantity_rejected_without_mutation(client, gateway):
    r = await client.post("/checkout-session", json=_cart(quantity=0))
    assert r.status_code == 400
    assert any(e["field"].endswith("quantity") for e in r.json()["errors"])
    assert gateway.calls == []
    assert (await client.get("/orders")).json() == []


async def test_negative_price_and_empty_cart_rejected(client):
    assert (await client.post("/checkout-session", json=_cart(price=-1))).status_code == 400
    assert (await client.post("/checkout-session", json={"items": [], "total": 3.99})).status_code == 400
