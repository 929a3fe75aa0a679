"""
Ordering Service — Celery application

Uses Redis as both broker and result backend. Beat drives the kitchen
simulation by scheduling one auto-progression sweep per interval.
"""
from celery import Celery

from ordering.core.config import get_settings

settings = get_settings()

celery_app = Celery(
    "ordering",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["ordering.tasks.progress_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    beat_schedule={
        "auto-progress-orders": {
            "task": "auto_progress_orders",
            "schedule": settings.AUTO_PROGRESS_INTERVAL_SECONDS,
        },
    },
)
