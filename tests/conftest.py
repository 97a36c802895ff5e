"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import pytest

from stats_per_request.application.dto.stats import MetricSample, RequestInfo, StatsConfig
from stats_per_request.application.ports.metrics import FieldValue


@dataclass
class FakeClock:
    """Returns the queued readings in order, repeating the last one."""

    readings: list[float] = field(default_factory=lambda: [0.0])

    def monotonic(self) -> float:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


def clock_for(elapsed: float, start: float = 1000.0) -> FakeClock:
    return FakeClock([start, start + elapsed])


@dataclass
class RecordingMetricsWriter:
    samples: list[MetricSample] = field(default_factory=list)
    closed: bool = False

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        self.samples.append(MetricSample(name=name, fields=dict(fields), tags=dict(tags)))

    async def ping(self) -> None:
        pass

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class FailingMetricsWriter:
    error: Exception = field(default_factory=lambda: ConnectionError("sink unreachable"))
    attempts: int = 0

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        self.attempts += 1
        raise self.error

    async def ping(self) -> None:
        raise self.error

    async def aclose(self) -> None:
        pass


@dataclass
class FakeRedis:
    """Records XADD calls the way redis.asyncio.Redis receives them."""

    entries: list[dict[str, Any]] = field(default_factory=list)
    pinged: bool = False
    closed: bool = False

    async def xadd(self, name: str, fields: dict[str, str], **kwargs: Any) -> str:
        self.entries.append({"stream": name, "fields": fields, **kwargs})
        return f"{len(self.entries)}-0"

    async def ping(self) -> bool:
        self.pinged = True
        return True

    async def aclose(self) -> None:
        self.closed = True


def make_request(
    *,
    method: str = "GET",
    path: str = "/some/path",
    query: str = "",
    headers: dict[str, str] | None = None,
) -> RequestInfo:
    return RequestInfo(
        method=method,
        path=path,
        request_uri=f"{path}?{query}" if query else path,
        headers=headers or {},
    )


@pytest.fixture
def writer() -> RecordingMetricsWriter:
    return RecordingMetricsWriter()


@pytest.fixture
def your_app_config() -> StatsConfig:
    return StatsConfig(app_name="YourApp")
