"""
Shared fixtures: in-memory SQLite stands in for PostgreSQL, the Stripe
session call and the email API are replaced by recording fakes.
"""
import hashlib
import hmac
import json
import os
import time

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("METRICS_ENABLED", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from ordering.api.deps import get_notifier, get_payment_gateway  # noqa: E402
from ordering.db.database import AsyncSessionLocal, Base, engine  # noqa: E402
from ordering.db.order_store import OrderStore  # noqa: E402
from ordering.main import app  # noqa: E402
from ordering.services.payments import (  # noqa: E402
    CheckoutSession,
    PaymentProviderError,
    StripePaymentGateway,
)

WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]


class FakeGateway(StripePaymentGateway):
    """Real signature verification, recorded (or failing) session creation."""

    def __init__(self, fail: bool = False):
        super().__init__(secret_key="sk_test_fake", webhook_secret=WEBHOOK_SECRET)
        self.fail = fail
        self.calls: list[dict] = []

    async def create_session(self, line_items, success_url, cancel_url, metadata, customer_email=None):
        self.calls.append({
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "customer_email": customer_email,
        })
        if self.fail:
            raise PaymentProviderError("card processor unavailable")
        return CheckoutSession(session_id="cs_test_123", url="https://checkout.stripe.test/pay/cs_test_123")


class FakeNotifier:
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.confirmations: list[tuple[str, str]] = []
        self.status_updates: list[tuple[str, str, str]] = []
        self.direct: list[dict] = []

    async def send_confirmation(self, to, number, items, total, **details):
        self.direct.append({"to": to, "number": number, "items": items, "total": total, **details})
        return self.succeed

    async def send_order_confirmation(self, to, order):
        self.confirmations.append((to, order.id))
        return self.succeed

    async def send_status_update(self, to, order_id, status):
        self.status_updates.append((to, order_id, status))
        return self.succeed

    async def aclose(self):
        pass


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header the way Stripe does."""
    ts = timestamp or int(time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def checkout_completed_event(order_id: str | None, email: str | None = "diner@example.com") -> bytes:
    session = {
        "id": "cs_test_123",
        "object": "checkout.session",
        "metadata": {"orderId": order_id} if order_id else {},
        "customer_details": {"email": email, "name": "Lan Nguyen"} if email else None,
    }
    return json.dumps({
        "id": "evt_test_1",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    }).encode("utf-8")


@pytest_asyncio.fixture(autouse=True)
async def tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session():
    async with AsyncSessionLocal() as s:
        yield s


@pytest.fixture
def store(session) -> OrderStore:
    return OrderStore(session)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest_asyncio.fixture
async def client(gateway, notifier):
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
