"""
Orders API — creation, operator override, manual advance, user orders (JWT)
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from conftest import checkout_completed_event, sign_payload

ORDER_BODY = {
    "items": [
        {"menu_item_id": "item-com-tam", "name": "Cơm Tấm Sườn", "unit_price": 12.99, "quantity": 1,
         "spice_level": "medium", "addons": ["Fried Egg"]},
    ],
    "total": 18.48,
    "customer_name": "Lan Nguyen",
    "customer_email": "lan@example.com",
}


def _token(sub: str, secret: str = "test-jwt-secret", expires_in: int = 300) -> str:
    exp = datetime.now(tz=timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode({"sub": sub, "exp": exp}, secret, algorithm="HS256")


async def _create(client, **overrides) -> dict:
    r = await client.post("/orders", json={**ORDER_BODY, **overrides})
    assert r.status_code == 201, r.text
    return r.json()


async def test_create_order_defaults_to_pending(client):
    order = await _create(client)
    assert order["status"] == "pending"
    assert order["payment_status"] is None
    assert order["created_at"]
    assert order["updated_at"]


async def test_unknown_order_is_404(client):
    assert (await client.get("/orders/does-not-exist")).status_code == 404
    assert (await client.put("/orders/does-not-exist", json={"status": "ready"})).status_code == 404


async def test_list_orders_newest_first_with_status_filter(client):
    first = await _create(client)
    second = await _create(client)
    await client.put(f"/orders/{first['id']}", json={"status": "ready"})

    all_ids = [o["id"] for o in (await client.get("/orders")).json()]
    assert set(all_ids) == {first["id"], second["id"]}

    ready = (await client.get("/orders", params={"status": "ready"})).json()
    assert [o["id"] for o in ready] == [first["id"]]


async def test_override_to_current_status_is_noop(client):
    order = await _create(client)
    r = await client.put(f"/orders/{order['id']}", json={"status": "pending"})
    assert r.status_code == 200
    assert r.json() == order
    assert (await client.get(f"/orders/{order['id']}/history")).json() == []


async def test_override_can_jump_and_move_backward(client):
    order = await _create(client)
    r = await client.put(f"/orders/{order['id']}", json={"status": "delivered"})
    assert r.json()["status"] == "delivered"
    r = await client.put(f"/orders/{order['id']}", json={"status": "preparing"})
    assert r.json()["status"] == "preparing"

    history = (await client.get(f"/orders/{order['id']}/history")).json()
    assert [(h["from_status"], h["to_status"], h["source"]) for h in history] == [
        ("pending", "delivered", "override"),
        ("delivered", "preparing", "override"),
    ]


async def test_override_rejects_unknown_status(client):
    order = await _create(client)
    r = await client.put(f"/orders/{order['id']}", json={"status": "cancelled"})
    assert r.status_code == 400
    assert (await client.get(f"/orders/{order['id']}")).json()["status"] == "pending"


async def test_advance_follows_table_until_terminal(client):
    order = await _create(client)
    seen = []
    for _ in range(3):
        r = await client.post(f"/orders/{order['id']}/advance")
        assert r.status_code == 200
        seen.append(r.json()["status"])
    assert seen == ["preparing", "ready", "delivered"]

    r = await client.post(f"/orders/{order['id']}/advance")
    assert r.status_code == 409


async def test_status_changes_do_not_require_payment(client):
    order = await _create(client)
    r = await client.put(f"/orders/{order['id']}", json={"status": "delivered"})
    assert r.json()["status"] == "delivered"
    assert r.json()["payment_status"] is None


async def test_payment_confirmation_reasserts_pending(client):
    order = await _create(client)
    await client.post(f"/orders/{order['id']}/advance")
    payload = checkout_completed_event(order["id"])
    await client.post("/payment-webhook", content=payload, headers={"stripe-signature": sign_payload(payload)})

    after = (await client.get(f"/orders/{order['id']}")).json()
    assert (after["status"], after["payment_status"]) == ("pending", "paid")


async def test_invalid_order_body_lists_field_errors(client):
    r = await client.post("/orders", json={"items": [{"name": "", "unit_price": -2, "quantity": 0}], "total": 1})
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"body.items.0.name", "body.items.0.unit_price", "body.items.0.quantity"} <= fields
    assert (await client.get("/orders")).json() == []


# ─── JWT-protected user routes ────────────────────────────────────────────────

async def test_user_orders_requires_bearer_token(client):
    r = await client.get("/user/orders")
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


async def test_user_orders_rejects_bad_token(client):
    r = await client.get("/user/orders", headers={"Authorization": f"Bearer {_token('u1', secret='nope')}"})
    assert r.status_code == 401
    r = await client.get("/user/orders", headers={"Authorization": f"Bearer {_token('u1', expires_in=-60)}"})
    assert r.status_code == 401


async def test_user_orders_filtered_by_subject(client):
    mine = await _create(client, user_id="user-1")
    await _create(client, user_id="user-2")
    await _create(client)

    r = await client.get("/user/orders", headers={"Authorization": f"Bearer {_token('user-1')}"})
    assert r.status_code == 200
    assert [o["id"] for o in r.json()] == [mine["id"]]


async def test_public_routes_do_not_need_token(client):
    assert (await client.get("/")).status_code == 200
    assert (await client.get("/orders")).status_code == 200
