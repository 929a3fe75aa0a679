"""
Ordering Service — Order record store

Thin persistence interface over the ``orders`` table:
  create / find_by_id / find / update_by_id

Every update is a single-row overwrite of the given fields plus
``updated_at``; there are no multi-document transactions.
"""
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ordering.models.order import Order, OrderStatusEvent, utcnow

logger = logging.getLogger(__name__)

_FILTERABLE = {"status", "payment_status", "user_id", "customer_email", "stripe_session_id"}


class OrderStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, order: Order) -> str:
        now = utcnow()
        order.created_at = order.created_at or now
        order.updated_at = order.updated_at or order.created_at
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)
        return order.id

    async def find_by_id(self, order_id: str) -> Order | None:
        result = await self.db.execute(select(Order).where(Order.id == order_id))
        return result.scalar_one_or_none()

    async def find(
        self,
        filters: dict[str, Any] | None = None,
        exclude: dict[str, Any] | None = None,
        newest_first: bool = True,
    ) -> list[Order]:
        """Equality match on ``filters``, inequality on ``exclude``."""
        query = select(Order)
        for field, value in (filters or {}).items():
            query = query.where(self._column(field) == value)
        for field, value in (exclude or {}).items():
            query = query.where(self._column(field) != value)
        order_by = Order.created_at.desc() if newest_first else Order.created_at.asc()
        result = await self.db.execute(query.order_by(order_by))
        return list(result.scalars().all())

    async def update_by_id(
        self,
        order_id: str,
        now: datetime | None = None,
        source: str | None = None,
        **fields: Any,
    ) -> Order | None:
        """Overwrite ``fields`` on one order and refresh ``updated_at``.

        When ``source`` is given and the write touches ``status``, an audit
        row is recorded alongside it.
        """
        order = await self.find_by_id(order_id)
        if order is None:
            return None

        previous_status = order.status
        fields["updated_at"] = now or utcnow()
        await self.db.execute(update(Order).where(Order.id == order_id).values(**fields))

        if source and "status" in fields:
            self.db.add(OrderStatusEvent(
                order_id=order_id,
                from_status=previous_status,
                to_status=fields["status"],
                source=source,
                created_at=fields["updated_at"],
            ))

        await self.db.commit()
        await self.db.refresh(order)
        return order

    async def history(self, order_id: str) -> list[OrderStatusEvent]:
        result = await self.db.execute(
            select(OrderStatusEvent)
            .where(OrderStatusEvent.order_id == order_id)
            .order_by(OrderStatusEvent.created_at.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    def _column(field: str):
        if field not in _FILTERABLE:
            raise ValueError(f"Cannot filter orders by '{field}'.")
        return getattr(Order, field)
