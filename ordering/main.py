"""
Ordering Service — FastAPI application entrypoint
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from ordering.api import checkout, emails, health, menu, orders, progress, user
from ordering.core.config import get_settings
from ordering.core.redis_client import create_redis
from ordering.db.database import Base, engine
from ordering.middleware.auth import JWTAuthMiddleware
from ordering.middleware.idempotency import IdempotencyMiddleware
from ordering.services.notifier import EmailNotifier
from ordering.services.payments import StripePaymentGateway

settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create tables, build long-lived clients once
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.payments = StripePaymentGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
        timeout=settings.STRIPE_TIMEOUT_SECONDS,
    )
    app.state.redis = create_redis(settings)
    app.state.notifier = EmailNotifier(
        api_url=settings.EMAIL_API_URL,
        api_key=settings.EMAIL_API_KEY,
        sender=settings.EMAIL_FROM,
        app_url=settings.APP_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.warning("STRIPE_WEBHOOK_SECRET is empty; every webhook will be rejected")
    yield
    # Shutdown
    await app.state.notifier.aclose()
    await app.state.redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="Phở Paradise Ordering",
    description="Menu catalog, Stripe checkout, order lifecycle and kitchen auto-progression.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are 400 with one entry per offending field."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Invalid request.",
            "errors": [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in jsonable_encoder(exc.errors())
            ],
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(IdempotencyMiddleware)
app.add_middleware(JWTAuthMiddleware)

if settings.METRICS_ENABLED:
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(menu.router)
app.include_router(orders.router)
app.include_router(checkout.router)
app.include_router(progress.router)
app.include_router(user.router)
app.include_router(emails.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}
