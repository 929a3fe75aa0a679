"""
Ordering Service — Redis connection (idempotency records, health check)

Built once in the app lifespan and kept on app.state.redis.
"""
import redis.asyncio as aioredis
from fastapi import Request

from ordering.core.config import Settings


def create_redis(settings: Settings) -> aioredis.Redis:
    return aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.HEALTH_CHECK_TIMEOUT,
        health_check_interval=30,
    )


def get_redis(request: Request) -> aioredis.Redis:
    return request.app.state.redis
