"""
Ordering Service — Transactional email sink

Fire-and-forget: every send returns True/False and never raises, so a mail
outage can not fail a checkout, a webhook acknowledgment or a sweep.
"""
import logging
from decimal import Decimal
from html import escape

import httpx

from ordering.models.order import Order, OrderStatus
from ordering.services.checkout import CENT, addon_surcharge

logger = logging.getLogger(__name__)

STATUS_MESSAGES: dict[str, tuple[str, str, str]] = {
    OrderStatus.PENDING.value: ("⏳", "Order Received", "We have received your order and will start preparing it soon!"),
    OrderStatus.PREPARING.value: ("👨‍🍳", "Cooking in Progress", "Our chefs are preparing your meal!"),
    OrderStatus.READY.value: ("✅", "Order Ready", "Your order is ready and will be delivered shortly!"),
    OrderStatus.DELIVERED.value: ("🎉", "Order Delivered", "Your order has been delivered! Enjoy your meal!"),
}


def order_number(order_id: str) -> str:
    return order_id[-6:].upper()


def item_subtotal(item: dict) -> Decimal:
    # Same pricing as the checkout charge: add-ons once per line
    price = Decimal(str(item["unit_price"]))
    return (price * item["quantity"] + addon_surcharge(item.get("addons"))).quantize(CENT)


def _item_line(item: dict) -> str:
    details = f"${Decimal(str(item['unit_price'])):.2f} each"
    if item.get("spice_level"):
        details += f" • Spice Level: {item['spice_level']}"
    if item.get("addons"):
        details += f" • Add-ons: {escape(', '.join(item['addons']))}"
    return (
        f"<div><strong>{item['quantity']}x {escape(item['name'])} - ${item_subtotal(item):.2f}</strong>"
        f"<br>{details}</div>"
    )


def render_confirmation(
    number: str,
    items: list[dict],
    total: Decimal,
    customer_name: str | None = None,
    subtotal: Decimal | None = None,
    delivery_fee: Decimal | None = None,
    special_instructions: str | None = None,
    track_url: str | None = None,
) -> str:
    """HTML body of the order confirmation.

    Subtotal defaults to the sum of the line subtotals; delivery fee defaults
    to whatever separates that from the total.
    """
    if subtotal is None:
        subtotal = sum((item_subtotal(i) for i in items), Decimal("0"))
    if delivery_fee is None:
        delivery_fee = max(Decimal(total) - subtotal, Decimal("0"))
    greeting = f"Thank you, {escape(customer_name)}!" if customer_name else "Thank you!"

    parts = [
        "<h1>🍜 Phở Paradise</h1>",
        f"<h2>{greeting} 🎉</h2>",
        "<p>We've received your order and our chefs are getting started.</p>",
        f"<h3>Order #{escape(number)}</h3>",
        "".join(_item_line(i) for i in items),
    ]
    if special_instructions:
        parts.append(f"<p><strong>Special Instructions:</strong><br>{escape(special_instructions)}</p>")
    parts.append(
        f"<p>Subtotal: ${Decimal(subtotal):.2f}<br>"
        f"Delivery Fee: ${Decimal(delivery_fee):.2f}<br>"
        f"<strong>Total: ${Decimal(total):.2f}</strong></p>"
    )
    if track_url:
        parts.append(f'<p><a href="{track_url}">Track Your Order</a></p>')
    return "".join(parts)


class EmailNotifier:
    def __init__(self, api_url: str, api_key: str, sender: str, app_url: str, timeout: float = 5.0):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.app_url = app_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout)

    async def send(self, to: str, subject: str, html: str) -> bool:
        if not self.api_key:
            logger.info("Email disabled (no EMAIL_API_KEY); skipping '%s' to %s", subject, to)
            return False
        try:
            r = await self._client.post(
                self.api_url,
                json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Email API unreachable: %s", exc)
            return False
        if not r.is_success:
            logger.warning("Email API rejected '%s' to %s: %s %s", subject, to, r.status_code, r.text[:200])
            return False
        logger.info("Email '%s' sent to %s", subject, to)
        return True

    async def send_confirmation(self, to: str, number: str, items: list[dict], total: Decimal, **details) -> bool:
        html = render_confirmation(number, items, total, **details)
        return await self.send(to, f"Order Confirmation #{number} - Phở Paradise", html)

    async def send_order_confirmation(self, to: str, order: Order) -> bool:
        return await self.send_confirmation(
            to,
            order_number(order.id),
            order.items,
            order.total,
            customer_name=order.customer_name,
            special_instructions=order.special_instructions,
            track_url=f"{self.app_url}/orders/{order.id}",
        )

    async def send_status_update(self, to: str, order_id: str, status: str) -> bool:
        emoji, title, message = STATUS_MESSAGES.get(status, STATUS_MESSAGES[OrderStatus.PENDING.value])
        number = order_number(order_id)
        html = (
            f"<h1>{emoji} {title}</h1>"
            f"<h2>Order #{number}</h2>"
            f"<p>{message}</p>"
            f'<p><a href="{self.app_url}/orders/{order_id}">Track Your Order</a></p>'
        )
        return await self.send(to, f"{emoji} Order Update #{number} - {title}", html)

    async def aclose(self) -> None:
        await self._client.aclose()
