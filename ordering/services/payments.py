"""
Ordering Service — Stripe payment gateway

Outbound: create a hosted Checkout session for a priced cart.
Inbound:  verify the Stripe-Signature header over the raw webhook body.

The Stripe SDK is synchronous; session creation runs in a worker thread so
the event loop is never blocked on the processor.
"""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import stripe

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """The processor could not create a session (network, auth or API error)."""


class InvalidSignatureError(Exception):
    """Webhook signature missing or not valid for the configured secret."""


class InvalidPayloadError(Exception):
    """Webhook body is not valid JSON."""


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str


class StripePaymentGateway:
    """Constructed once at startup and injected into the checkout/webhook routes."""

    def __init__(self, secret_key: str, webhook_secret: str, timeout: float = 10.0):
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    async def create_session(
        self,
        line_items: list[dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        customer_email: str | None = None,
    ) -> CheckoutSession:
        params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "billing_address_collection": "auto",
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create, api_key=self._secret_key, **params
            )
        except stripe.StripeError as exc:
            detail = getattr(exc, "user_message", None) or str(exc)
            raise PaymentProviderError(detail) from exc

        sid = getattr(session, "id", None)
        url = getattr(session, "url", None)
        if not sid or not url:
            raise PaymentProviderError("Stripe did not return a session URL.")
        return CheckoutSession(session_id=sid, url=url)

    def verify_event(self, payload: bytes, sig_header: str | None) -> dict[str, Any]:
        """Return the event as a plain dict once its signature checks out."""
        if not sig_header:
            raise InvalidSignatureError("Missing Stripe-Signature header.")
        # Stripe signs UTF-8 text; a body that is not UTF-8 can not carry a valid signature
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidSignatureError("Webhook body is not UTF-8.") from exc
        try:
            stripe.Webhook.construct_event(payload=text, sig_header=sig_header, secret=self._webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise InvalidSignatureError(str(exc)) from exc
        except ValueError as exc:
            raise InvalidPayloadError(str(exc)) from exc
        return json.loads(text)
