"""Per-request stats: elapsed time, tags, one metric sample, slow-request log."""
from __future__ import annotations

import logging

from stats_per_request.application.dto.stats import MetricSample, RequestInfo, StatsConfig
from stats_per_request.application.ports.clock import Clock, PerfCounterClock
from stats_per_request.application.ports.metrics import FieldValue, MetricsWriter
from stats_per_request.domain.path_cleanup import apply_path_cleanups

logger = logging.getLogger(__name__)

HEADER_NOT_SET = "not_set"
TINY_ELAPSED = 0.0001


def format_request_time(elapsed: float) -> FieldValue:
    # Tiny floats would otherwise end up in scientific notation at the sink.
    if elapsed < TINY_ELAPSED:
        return f"{elapsed:.5f}"
    return elapsed


def build_tags(
    config: StatsConfig,
    request: RequestInfo,
    status: int,
    path: str,
) -> dict[str, str]:
    tags = {
        "status": str(status),
        "method": request.method,
        "app": config.app_name,
        "path": path,
    }
    for header in config.add_headers:
        value = request.headers.get(header)
        tags[f"header_{header.lower()}"] = HEADER_NOT_SET if value is None else value
    return tags


class RequestStatsRecorder:
    """Measures a request and reports it to a :class:`MetricsWriter`.

    Holds no per-request state, so one instance serves concurrent requests.
    Failures of the writer (or of the slow-request log) are logged and
    swallowed; errors of the wrapped application are never touched here.
    """

    def __init__(
        self,
        config: StatsConfig,
        writer: MetricsWriter,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._writer = writer
        self._clock = clock or PerfCounterClock()

    @property
    def config(self) -> StatsConfig:
        return self._config

    def start(self) -> float:
        return self._clock.monotonic()

    def build_sample(self, request: RequestInfo, status: int, elapsed: float) -> MetricSample:
        path = apply_path_cleanups(request.path, self._config.path_cleanups)
        return MetricSample(
            name=self._config.metric_name,
            fields={"hit": 1, "request_time": format_request_time(elapsed)},
            tags=build_tags(self._config, request, status, path),
        )

    async def record(self, request: RequestInfo, status: int, started: float) -> None:
        elapsed = round(self._clock.monotonic() - started, 6)
        sample = self.build_sample(request, status, elapsed)

        try:
            await self._writer.write(sample.name, sample.fields, sample.tags)
            long_request = self._config.long_request
            if long_request and elapsed > long_request:
                logger.warning(
                    "Long request, took %f: %s %s",
                    elapsed,
                    request.method,
                    request.request_uri,
                )
        except Exception as exc:
            logger.error("Could not write stats: %s", exc)
