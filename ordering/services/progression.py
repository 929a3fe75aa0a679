"""
Ordering Service — Auto-progression engine (kitchen simulation)

sweep() is a stateless pass over persisted orders: every non-delivered order
whose dwell time in its current status has elapsed moves one step along
NEXT_STATUS. No timer lives here; the /auto-progress route and the Celery
beat task decide the cadence.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from ordering.core.status_machine import next_status
from ordering.db.order_store import OrderStore
from ordering.models.order import Order, OrderStatus, StatusChangeSource, utcnow
from ordering.services.notifier import EmailNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    examined: int
    advanced: int


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def last_change(order: Order) -> datetime:
    return as_utc(order.updated_at or order.created_at)


class AutoProgressionEngine:
    def __init__(
        self,
        store: OrderStore,
        dwell_seconds: dict[str, float],
        notifier: EmailNotifier | None = None,
        notify: bool = True,
    ):
        self.store = store
        self.dwell_seconds = dwell_seconds
        self.notifier = notifier
        self.notify = notify

    def is_due(self, order: Order, now: datetime) -> bool:
        elapsed = (as_utc(now) - last_change(order)).total_seconds()
        return elapsed >= self.dwell_seconds.get(order.status, 0.0)

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        now = now or utcnow()
        orders = await self.store.find(exclude={"status": OrderStatus.DELIVERED.value}, newest_first=False)

        advanced = 0
        for order in orders:
            if not self.is_due(order, now):
                continue

            target = next_status(order.status).value
            updated = await self.store.update_by_id(
                order.id, now=now, source=StatusChangeSource.AUTO.value, status=target
            )
            if updated is None:
                continue
            advanced += 1
            logger.info("Order %s progressed to %s", order.id, target)

            if self.notify and self.notifier and updated.customer_email:
                await self.notifier.send_status_update(updated.customer_email, updated.id, target)

        logger.info("Processed %d orders, updated %d", len(orders), advanced)
        return SweepResult(examined=len(orders), advanced=advanced)


def dwell_from_settings(settings) -> dict[str, float]:
    return {
        OrderStatus.PENDING.value: settings.DWELL_PENDING_SECONDS,
        OrderStatus.PREPARING.value: settings.DWELL_PREPARING_SECONDS,
        OrderStatus.READY.value: settings.DWELL_READY_SECONDS,
    }
