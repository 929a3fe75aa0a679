"""
Ordering Service — FastAPI dependencies

Process-lifetime clients (Stripe gateway, email notifier) are built in the
app lifespan and read from app.state; per-request objects wrap the session.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.core.config import get_settings
from ordering.db.database import get_db
from ordering.db.order_store import OrderStore
from ordering.services.checkout import CheckoutSessionBuilder
from ordering.services.confirmation import PaymentConfirmationHandler
from ordering.services.notifier import EmailNotifier
from ordering.services.payments import StripePaymentGateway
from ordering.services.progression import AutoProgressionEngine, dwell_from_settings

settings = get_settings()


def get_payment_gateway(request: Request) -> StripePaymentGateway:
    return request.app.state.payments


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


def get_order_store(db: AsyncSession = Depends(get_db)) -> OrderStore:
    return OrderStore(db)


def get_checkout_builder(
    store: OrderStore = Depends(get_order_store),
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
) -> CheckoutSessionBuilder:
    return CheckoutSessionBuilder(
        store,
        gateway,
        delivery_fee=settings.DELIVERY_FEE,
        currency=settings.STRIPE_CURRENCY,
        trust_client_total=settings.TRUST_CLIENT_TOTAL,
    )


def get_confirmation_handler(
    store: OrderStore = Depends(get_order_store),
    notifier: EmailNotifier = Depends(get_notifier),
) -> PaymentConfirmationHandler:
    return PaymentConfirmationHandler(store, notifier)


def get_progression_engine(
    store: OrderStore = Depends(get_order_store),
    notifier: EmailNotifier = Depends(get_notifier),
) -> AutoProgressionEngine:
    return AutoProgressionEngine(
        store,
        dwell_seconds=dwell_from_settings(settings),
        notifier=notifier,
        notify=settings.NOTIFY_ON_PROGRESS,
    )
