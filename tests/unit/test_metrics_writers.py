from __future__ import annotations

import logging

import pytest

from stats_per_request.application.exceptions import ConfigurationError
from stats_per_request.config import Settings
from stats_per_request.infrastructure.metrics.factory import build_metrics_writer
from stats_per_request.infrastructure.metrics.influx_file import InfluxFileMetricsWriter
from stats_per_request.infrastructure.metrics.redis_stream import RedisStreamMetricsWriter
from stats_per_request.infrastructure.metrics.simple import (
    LoggingMetricsWriter,
    NullMetricsWriter,
)
from tests.conftest import FakeRedis

FIELDS = {"hit": 1, "request_time": 0.02476}
TAGS = {"status": "400", "method": "GET", "app": "YourApp", "path": "/some/path"}


@pytest.mark.asyncio
async def test_influx_file_appends_lines(tmp_path):
    writer = InfluxFileMetricsWriter(tmp_path / "yourapp.stats")

    await writer.write("http_request", FIELDS, TAGS)
    await writer.write("http_request", FIELDS, {**TAGS, "status": "200"})

    lines = (tmp_path / "yourapp.stats").read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith(
        "http_request,app=YourApp,method=GET,path=/some/path,status=400 "
        "hit=1i,request_time=0.02476 "
    )
    assert ",status=200 " in lines[1]
    await writer.ping()


@pytest.mark.asyncio
async def test_influx_file_ping_fails_without_directory(tmp_path):
    writer = InfluxFileMetricsWriter(tmp_path / "missing" / "yourapp.stats")

    with pytest.raises(FileNotFoundError):
        await writer.ping()


@pytest.mark.asyncio
async def test_redis_stream_writer_xadds_line():
    redis = FakeRedis()
    writer = RedisStreamMetricsWriter(redis, "stats.http_request", maxlen=500)  # type: ignore[arg-type]

    await writer.write("http_request", FIELDS, TAGS)
    await writer.ping()
    await writer.aclose()

    assert len(redis.entries) == 1
    entry = redis.entries[0]
    assert entry["stream"] == "stats.http_request"
    assert entry["fields"]["line"].startswith("http_request,app=YourApp,")
    assert entry["maxlen"] == 500
    assert entry["approximate"] is True
    assert redis.pinged is True
    assert redis.closed is True


@pytest.mark.asyncio
async def test_logging_writer_logs_line(caplog):
    caplog.set_level(logging.INFO)

    await LoggingMetricsWriter().write("http_request", FIELDS, TAGS)

    assert len(caplog.records) == 1
    assert caplog.records[0].getMessage().startswith("http_request,app=YourApp,")


@pytest.mark.asyncio
async def test_null_writer_accepts_everything():
    writer = NullMetricsWriter()
    await writer.write("http_request", FIELDS, TAGS)
    await writer.ping()
    await writer.aclose()


def test_factory_picks_sink(tmp_path):
    assert isinstance(build_metrics_writer(Settings(STATS_SINK="null")), NullMetricsWriter)
    assert isinstance(build_metrics_writer(Settings(STATS_SINK="log")), LoggingMetricsWriter)

    file_writer = build_metrics_writer(
        Settings(STATS_SINK="influx_file", STATS_FILE=str(tmp_path / "x.stats"))
    )
    assert isinstance(file_writer, InfluxFileMetricsWriter)
    assert file_writer.path == tmp_path / "x.stats"

    redis_writer = build_metrics_writer(
        Settings(STATS_SINK="redis", REDIS_URL="redis://localhost:6379/9")
    )
    assert isinstance(redis_writer, RedisStreamMetricsWriter)


def test_factory_rejects_unknown_sink():
    with pytest.raises(ConfigurationError):
        build_metrics_writer(Settings.model_construct(STATS_SINK="kafka"))
