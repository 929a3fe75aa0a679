"""
Ordering Service — Idempotency Key Middleware

A double-submitted checkout must not leave two pending orders and two Stripe
sessions behind. With an Idempotency-Key header on POST /orders or
POST /checkout-session:
  - the first request claims the key in Redis, runs, and its response is kept
  - a retry with the same key and body replays the kept response
  - a retry while the first one is still running gets 409
  - the same key with a different body gets 422
A 5xx response releases the key so the client may retry.
"""
import hashlib
import json
from dataclasses import asdict, dataclass

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ordering.core.config import get_settings
from ordering.core.redis_client import get_redis

settings = get_settings()

REPLAY_HEADER = "X-Idempotency-Replay"
IN_FLIGHT = "in-flight"
IDEMPOTENT_ROUTES = frozenset({("POST", "/orders"), ("POST", "/checkout-session")})


@dataclass
class StoredResponse:
    fingerprint: str
    status_code: int
    body: str
    media_type: str | None = None


def record_key(path: str, key: str) -> str:
    return f"idempotent:{path}:{key}"


def fingerprint(body: bytes) -> str:
    return hashlib.sha256(body).hexdigest()


class IdempotencyMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path.rstrip("/") or "/"
        key = request.headers.get("Idempotency-Key")
        if not key or (request.method, path) not in IDEMPOTENT_ROUTES:
            return await call_next(request)

        redis = get_redis(request)
        redis_key = record_key(path, key)
        digest = fingerprint(await request.body())

        claimed = await redis.set(redis_key, IN_FLIGHT, nx=True, ex=settings.IDEMPOTENCY_KEY_TTL_SECONDS)
        if not claimed:
            return self._replay(await redis.get(redis_key), digest)

        try:
            response = await call_next(request)
        except Exception:
            await redis.delete(redis_key)
            raise

        body = b"".join([chunk async for chunk in response.body_iterator])
        if response.status_code >= 500:
            await redis.delete(redis_key)
        else:
            stored = StoredResponse(
                fingerprint=digest,
                status_code=response.status_code,
                body=body.decode("utf-8", errors="replace"),
                media_type=response.media_type,
            )
            await redis.set(redis_key, json.dumps(asdict(stored)), ex=settings.IDEMPOTENCY_KEY_TTL_SECONDS)

        return Response(
            content=body,
            status_code=response.status_code,
            media_type=response.media_type,
            headers=dict(response.headers),
        )

    @staticmethod
    def _replay(raw: str | None, digest: str) -> Response:
        # None: the claim expired between SET NX and GET
        if raw is None or raw == IN_FLIGHT:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "A request with this Idempotency-Key is still being processed."},
            )
        stored = StoredResponse(**json.loads(raw))
        if stored.fingerprint != digest:
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={"detail": "Idempotency-Key was already used with a different request body."},
            )
        return Response(
            content=stored.body,
            status_code=stored.status_code,
            media_type=stored.media_type,
            headers={REPLAY_HEADER: "true"},
        )
