from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from stats_per_request.api.middleware.stats_per_request import StatsPerRequestMiddleware
from stats_per_request.api.v1.routers import health
from stats_per_request.application.dto.stats import StatsConfig
from stats_per_request.application.ports.clock import Clock
from stats_per_request.application.ports.metrics import MetricsWriter
from stats_per_request.config import settings
from stats_per_request.infrastructure.metrics.factory import build_metrics_writer
from stats_per_request.services.stats_service import RequestStatsRecorder

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info(
        "Recording %s for app=%s",
        app.state.recorder.config.metric_name,
        app.state.recorder.config.app_name,
    )

    yield

    await app.state.metrics_writer.aclose()
    logger.info("Metrics sink closed")


def create_app(
    config: StatsConfig | None = None,
    writer: MetricsWriter | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Stats Per Request",
        version="0.9.0",
        lifespan=lifespan,
    )

    if config is None:
        config = StatsConfig.from_settings(settings)
    if writer is None:
        writer = build_metrics_writer(settings)

    recorder = RequestStatsRecorder(config, writer, clock)
    app.state.metrics_writer = writer
    app.state.recorder = recorder

    app.add_middleware(StatsPerRequestMiddleware, recorder=recorder)

    app.include_router(health.router)

    return app
