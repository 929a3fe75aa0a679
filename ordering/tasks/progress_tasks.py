"""
Ordering Service — Celery tasks (scheduled auto-progression)

Worker processes run the same sweep as GET /auto-progress. Celery tasks are
not async-native, so each run gets its own event loop and a NullPool engine
that is disposed afterwards.
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ordering.core.celery_app import celery_app
from ordering.core.config import get_settings
from ordering.db.order_store import OrderStore
from ordering.services.notifier import EmailNotifier
from ordering.services.progression import AutoProgressionEngine, SweepResult, dwell_from_settings

settings = get_settings()
logger = logging.getLogger(__name__)


async def _run_sweep() -> SweepResult:
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    notifier = EmailNotifier(
        api_url=settings.EMAIL_API_URL,
        api_key=settings.EMAIL_API_KEY,
        sender=settings.EMAIL_FROM,
        app_url=settings.APP_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            progression = AutoProgressionEngine(
                OrderStore(session),
                dwell_seconds=dwell_from_settings(settings),
                notifier=notifier,
                notify=settings.NOTIFY_ON_PROGRESS,
            )
            return await progression.sweep()
    finally:
        await notifier.aclose()
        await engine.dispose()


@celery_app.task(name="auto_progress_orders", acks_late=True)
def auto_progress_orders() -> dict:
    """One sweep; overlapping runs are tolerated (last writer wins)."""
    result = asyncio.run(_run_sweep())
    logger.info("Scheduled sweep examined %d orders, advanced %d", result.examined, result.advanced)
    return {"examined": result.examined, "updated_count": result.advanced}
