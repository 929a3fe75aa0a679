"""
Ordering Service — Order DB models

[TRANSACTIONAL DATA] — orders and their status audit trail.
Orders are never deleted.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import JSON, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ordering.db.database import Base


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class OrderStatus(str, PyEnum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"


class PaymentStatus(str, PyEnum):
    PAID = "paid"


class StatusChangeSource(str, PyEnum):
    ADVANCE = "advance"
    OVERRIDE = "override"
    AUTO = "auto"
    PAYMENT = "payment"


class Order(Base):
    """
    [TRANSACTIONAL DATA]
    One customer purchase. ``items`` keeps the priced line breakdown as JSON
    (prices serialized as decimal strings).
    """
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    items: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), index=True, default=OrderStatus.PENDING.value, nullable=False
    )
    payment_status: Mapped[str | None] = mapped_column(String(16), nullable=True)
    stripe_session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    special_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=True)

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status} payment={self.payment_status}>"


class OrderStatusEvent(Base):
    """
    [TRANSACTIONAL DATA]
    Audit trail for every status-affecting write (advance, override, sweep, payment).
    """
    __tablename__ = "order_status_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    from_status: Mapped[str] = mapped_column(String(16), nullable=False)
    to_status: Mapped[str] = mapped_column(String(16), nullable=False)
    source: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
