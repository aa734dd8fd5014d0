import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from .routers.estimate import router as estimate_router

# Core modules
from .core.config import settings
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint
from .data.base import Dataset
from .data.loader import dataset_source
from .notify.base import NotificationPort
from .notify.mailer import notifier as build_notifier

logger = logging.getLogger(__name__)

async def load_dataset() -> Dataset:
    """
    Single mutation point of the service: build the snapshot once.
    Any failure degrades to an empty dataset so estimates still fall back
    to the constant floor price.
    """
    try:
        return await dataset_source().load()
    except Exception:
        logger.warning("dataset preload failed; serving with an empty dataset", exc_info=True)
        return Dataset.empty()

def create_app(dataset: Dataset | None = None, notifier: NotificationPort | None = None) -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    Passing a dataset skips the start-up load.
    """
    configure_logging()  # Set up JSON logs + request-id filter

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.dataset is None:
            app.state.dataset = await load_dataset()
        yield

    app = FastAPI(
        title="Satei Valuation API",
        version="0.1.0",
        description="Land/building price estimates from survey interpolation, comparable deals and market correction.",
        lifespan=lifespan,
    )
    app.state.dataset = dataset
    app.state.notifier = notifier or build_notifier()
    app.state.started = time.monotonic()

    # CORS: allow the front-end origins to call the API.
    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",") if o.strip()] or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag","X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    # Meta routes
    @app.get("/v1/health", tags=["meta"])
    def health():
        return {"status": "ok", "uptime": round(time.monotonic() - app.state.started, 3)}

    @app.get("/v1/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        # Standard Prometheus scrape endpoint
        app.add_route("/v1/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(estimate_router, prefix="/v1", tags=["estimate"])

    return app

app = create_app()
