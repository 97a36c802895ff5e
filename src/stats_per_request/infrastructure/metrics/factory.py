from __future__ import annotations

import logging

from stats_per_request.application.exceptions import ConfigurationError
from stats_per_request.application.ports.metrics import MetricsWriter
from stats_per_request.config import Settings
from stats_per_request.infrastructure.metrics.influx_file import InfluxFileMetricsWriter
from stats_per_request.infrastructure.metrics.redis_stream import RedisStreamMetricsWriter
from stats_per_request.infrastructure.metrics.simple import (
    LoggingMetricsWriter,
    NullMetricsWriter,
)


def build_metrics_writer(settings: Settings) -> MetricsWriter:
    sink = settings.STATS_SINK
    if sink == "null":
        return NullMetricsWriter()
    if sink == "log":
        return LoggingMetricsWriter(logging.INFO)
    if sink == "influx_file":
        return InfluxFileMetricsWriter(settings.STATS_FILE)
    if sink == "redis":
        return RedisStreamMetricsWriter.from_url(
            settings.REDIS_URL,
            settings.STATS_REDIS_STREAM,
            maxlen=settings.STATS_REDIS_MAXLEN,
        )
    raise ConfigurationError(f"Unknown stats sink: {sink!r}")
