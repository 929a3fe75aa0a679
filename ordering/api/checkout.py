"""
Ordering Service — Checkout and payment webhook routes
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ordering.api.deps import get_checkout_builder, get_confirmation_handler, get_payment_gateway
from ordering.core.config import get_settings
from ordering.schemas.order import CheckoutRequest, CheckoutResponse
from ordering.services.checkout import CheckoutSessionBuilder
from ordering.services.confirmation import PaymentConfirmationHandler
from ordering.services.payments import (
    InvalidPayloadError,
    InvalidSignatureError,
    PaymentProviderError,
    StripePaymentGateway,
)

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter(tags=["checkout"])


@router.post("/checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(
    payload: CheckoutRequest,
    request: Request,
    builder: CheckoutSessionBuilder = Depends(get_checkout_builder),
):
    """
    Persist a pending order, then open a Stripe Checkout session for it.
    The client redirects the browser to the returned url.
    """
    origin = request.headers.get("origin") or settings.APP_URL
    try:
        result = await builder.checkout(payload, origin=origin)
    except PaymentProviderError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Unable to create checkout session: {exc}",
        )
    return CheckoutResponse(
        session_id=result.session_id,
        url=result.url,
        order_id=result.order_id,
        computed_total=result.computed_total,
    )


@router.post("/payment-webhook")
async def payment_webhook(
    request: Request,
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
    handler: PaymentConfirmationHandler = Depends(get_confirmation_handler),
):
    """
    Stripe webhook receiver. The signature is checked over the raw body before
    any field is trusted. Always 200 once handled so Stripe does not retry;
    a 5xx on store failure lets Stripe's own retry policy kick in.
    """
    payload = await request.body()
    try:
        event = gateway.verify_event(payload, request.headers.get("stripe-signature"))
    except InvalidSignatureError as exc:
        logger.warning("Webhook signature verification failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature.")
    except InvalidPayloadError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON payload.")

    try:
        result = await handler.handle(event)
    except Exception:
        logger.exception("Webhook handler failed for event type=%s", event.get("type"))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook handler failed.")

    return {"received": True, "event": result.event_type, "handled": result.handled}
