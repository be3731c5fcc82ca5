# alphadash/main.py
from __future__ import annotations

import os
import time
from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request
from loguru import logger

from alphadash import APP_VERSION
from alphadash.api.routes.data import router as data_router
from alphadash.api.routes.health import router as health_router
from alphadash.api.routes.strategy import router as strategy_router
from alphadash.data.provider import DatasetProvider
from alphadash.logging_utils import logging_context, setup_logging
from alphadash.settings import Settings, get_settings

__all__ = ["app", "create_app"]


def create_app(
    provider: Optional[DatasetProvider] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API around an explicitly supplied (or settings-derived) provider."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logger.info(
            "alpha-dash {} source={} env={}",
            APP_VERSION,
            app.state.provider.source,
            os.getenv("ENV", "local"),
        )
        yield

    app = FastAPI(title="alpha-dash", version=APP_VERSION, lifespan=lifespan)
    app.state.provider = provider or DatasetProvider.from_settings(settings)
    app.state.strategy_settings = settings.strategy

    app.include_router(health_router, prefix="/health", tags=["health"])
    app.include_router(data_router)
    app.include_router(strategy_router)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        with logging_context(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start) * 1000.0
                logger.exception(
                    "request method={} path={} status=500 duration_ms={:.2f}",
                    request.method,
                    request.url.path,
                    duration_ms,
                )
                raise

            duration_ms = (time.perf_counter() - start) * 1000.0
            response.headers["X-Request-ID"] = request_id
            logger.info(
                "request method={} path={} status={} duration_ms={:.2f}",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
            return response

    return app


setup_logging()
app = create_app()
