"""
Ordering Service — Checkout session builder

Flow:
  1. Price every cart line (base price, add-on surcharges, delivery fee)
  2. Persist Order(pending) — BEFORE the processor is contacted
  3. Open a Stripe Checkout session carrying the order id in metadata and
     in the success URL
  4. Return {session_id, url, order_id, computed_total}

If step 3 fails the pending order stays in the store (orphan order, logged).
"""
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ordering.db.order_store import OrderStore
from ordering.models.order import Order, OrderStatus
from ordering.schemas.order import CartLine, CheckoutRequest, OrderItemSchema
from ordering.services.payments import PaymentProviderError, StripePaymentGateway

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

ADDON_PRICES: dict[str, Decimal] = {
    "Extra Meat": Decimal("3.50"),
    "Extra Vegetables": Decimal("2.00"),
    "Extra Noodles": Decimal("2.50"),
    "Fried Egg": Decimal("1.50"),
    "Spring Roll": Decimal("2.99"),
}


def addon_surcharge(addons: list[str] | None) -> Decimal:
    # Unknown add-on names cost nothing
    return sum((ADDON_PRICES.get(name, Decimal("0")) for name in addons or []), Decimal("0"))


def line_subtotal(line: CartLine) -> Decimal:
    return line.price * line.quantity + addon_surcharge(line.addons)


def compute_total(lines: list[CartLine], delivery_fee: Decimal) -> Decimal:
    subtotal = sum((line_subtotal(line) for line in lines), Decimal("0"))
    return (subtotal + delivery_fee).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def line_description(line: CartLine) -> str:
    description = line.description or ""
    if line.spice_level:
        description += f" | Spice: {line.spice_level}"
    if line.addons:
        description += f" | Add-ons: {', '.join(line.addons)}"
    return description.strip(" |")


def build_line_items(lines: list[CartLine], delivery_fee: Decimal, currency: str) -> list[dict]:
    """Stripe ``line_items``: one base line per cart line, one add-on line
    per cart line with a non-zero surcharge, then the delivery fee."""
    line_items: list[dict] = []
    for line in lines:
        product_data = {"name": line.name}
        description = line_description(line)
        if description:
            product_data["description"] = description
        line_items.append({
            "price_data": {
                "currency": currency,
                "product_data": product_data,
                "unit_amount": to_cents(line.price),
            },
            "quantity": line.quantity,
        })
        surcharge = addon_surcharge(line.addons)
        if surcharge > 0:
            line_items.append({
                "price_data": {
                    "currency": currency,
                    "product_data": {"name": f"{line.name} add-ons", "description": ", ".join(line.addons)},
                    "unit_amount": to_cents(surcharge),
                },
                "quantity": 1,
            })

    line_items.append({
        "price_data": {
            "currency": currency,
            "product_data": {"name": "Delivery Fee", "description": "Standard delivery to your location"},
            "unit_amount": to_cents(delivery_fee),
        },
        "quantity": 1,
    })
    return line_items


@dataclass(frozen=True)
class CheckoutResult:
    session_id: str
    url: str
    order_id: str
    computed_total: Decimal


class CheckoutSessionBuilder:
    def __init__(
        self,
        store: OrderStore,
        gateway: StripePaymentGateway,
        delivery_fee: Decimal,
        currency: str = "usd",
        trust_client_total: bool = True,
    ):
        self.store = store
        self.gateway = gateway
        self.delivery_fee = delivery_fee
        self.currency = currency
        self.trust_client_total = trust_client_total

    async def checkout(self, payload: CheckoutRequest, origin: str) -> CheckoutResult:
        computed = compute_total(payload.items, self.delivery_fee)
        if computed != payload.total:
            logger.warning(
                "Client total %s differs from computed total %s (trust_client_total=%s)",
                payload.total, computed, self.trust_client_total,
            )

        order = Order(
            items=[
                OrderItemSchema(
                    menu_item_id=line.menu_item_id,
                    name=line.name,
                    unit_price=line.price,
                    quantity=line.quantity,
                    spice_level=line.spice_level,
                    addons=line.addons,
                ).model_dump(mode="json", exclude_none=True)
                for line in payload.items
            ],
            total=payload.total if self.trust_client_total else computed,
            status=OrderStatus.PENDING.value,
            special_instructions=payload.special_instructions,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            customer_phone=payload.customer_phone,
        )
        order_id = await self.store.create(order)

        origin = origin.rstrip("/")
        try:
            session = await self.gateway.create_session(
                line_items=build_line_items(payload.items, self.delivery_fee, self.currency),
                success_url=f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}&order_id={order_id}",
                cancel_url=f"{origin}/?canceled=true",
                metadata={
                    "orderId": order_id,
                    "specialInstructions": payload.special_instructions or "",
                    "totalAmount": str(payload.total),
                },
                customer_email=payload.customer_email,
            )
        except PaymentProviderError:
            logger.error("Checkout session failed; order %s left pending without payment", order_id)
            raise

        logger.info("Checkout session %s created for order %s", session.session_id, order_id)
        return CheckoutResult(
            session_id=session.session_id,
            url=session.url,
            order_id=order_id,
            computed_total=computed,
        )
