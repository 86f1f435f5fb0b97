"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.routes import router
from src.config import get_settings
from src.diagnostics.engine import DiagnosticsEngine
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    setup_logging(settings.log_level)
    logger.info("starting diagnostics service")

    engine = DiagnosticsEngine(settings)

    app.state.settings = settings
    app.state.engine = engine

    logger.info(
        "diagnostics service ready",
        extra={
            "scanners": engine.registry.names(),
            "max_pages": settings.max_pages,
            "fetch_timeout_seconds": settings.fetch_timeout_seconds,
        },
    )

    yield

    logger.info("shutting down diagnostics service")


app = FastAPI(title="AI Readiness Diagnostics", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
