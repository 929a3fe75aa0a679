"""
Ordering Service — Payment confirmation handler

Sole writer of ``payment_status``. Consumes a verified Stripe event:
  checkout.session.completed → status=pending, payment_status=paid,
                               stripe_session_id recorded

Redelivered events overwrite the same values, so no dedup state is kept.
The confirmation email only goes out on the first transition to paid.
"""
import logging
from dataclasses import dataclass
from typing import Any

from ordering.db.order_store import OrderStore
from ordering.models.order import OrderStatus, PaymentStatus, StatusChangeSource
from ordering.services.notifier import EmailNotifier

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass(frozen=True)
class ConfirmationResult:
    event_type: str
    handled: bool
    order_id: str | None = None
    notified: bool = False


class PaymentConfirmationHandler:
    def __init__(self, store: OrderStore, notifier: EmailNotifier | None = None):
        self.store = store
        self.notifier = notifier

    async def handle(self, event: dict[str, Any]) -> ConfirmationResult:
        event_type = event.get("type", "")
        if event_type != CHECKOUT_COMPLETED:
            logger.info("Ignoring Stripe event type=%s", event_type)
            return ConfirmationResult(event_type=event_type, handled=False)

        session = (event.get("data") or {}).get("object") or {}
        order_id = (session.get("metadata") or {}).get("orderId")
        if not order_id:
            logger.error("Stripe session %s completed without orderId metadata", session.get("id"))
            return ConfirmationResult(event_type=event_type, handled=False)

        existing = await self.store.find_by_id(order_id)
        if existing is None:
            logger.error("Stripe session %s references unknown order %s", session.get("id"), order_id)
            return ConfirmationResult(event_type=event_type, handled=False, order_id=order_id)

        details = session.get("customer_details") or {}
        email = details.get("email")
        fields: dict[str, Any] = {
            "status": OrderStatus.PENDING.value,
            "payment_status": PaymentStatus.PAID.value,
            "stripe_session_id": session.get("id"),
        }
        if email:
            fields["customer_email"] = email
        if details.get("name") and not existing.customer_name:
            fields["customer_name"] = details["name"]

        already_paid = existing.payment_status == PaymentStatus.PAID.value
        order = await self.store.update_by_id(order_id, source=StatusChangeSource.PAYMENT.value, **fields)
        logger.info("Order %s payment confirmed (session %s)", order_id, session.get("id"))

        notified = False
        recipient = email or order.customer_email
        if self.notifier and recipient and not already_paid:
            notified = await self.notifier.send_order_confirmation(recipient, order)
            if not notified:
                logger.warning("Confirmation email for order %s was not delivered", order_id)

        return ConfirmationResult(event_type=event_type, handled=True, order_id=order_id, notified=notified)
