"""Redis Streams sink: one XADD per sample, capped with an approximate MAXLEN."""
from __future__ import annotations

import logging
from typing import Mapping

import redis.asyncio as aioredis

from stats_per_request.application.ports.metrics import FieldValue
from stats_per_request.infrastructure.metrics.line_protocol import encode_line

logger = logging.getLogger(__name__)


class RedisStreamMetricsWriter:
    """Implements application.ports.metrics.MetricsWriter."""

    def __init__(
        self,
        redis: aioredis.Redis,
        stream: str,
        *,
        maxlen: int | None = 100_000,
    ) -> None:
        self._redis = redis
        self._stream = stream
        self._maxlen = maxlen

    @classmethod
    def from_url(cls, url: str, stream: str, *, maxlen: int | None = 100_000) -> RedisStreamMetricsWriter:
        redis = aioredis.from_url(url, decode_responses=True)
        logger.info("Redis stats sink on stream=%s", stream)
        return cls(redis, stream, maxlen=maxlen)

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        await self._redis.xadd(
            self._stream,
            {"line": encode_line(name, fields, tags)},
            maxlen=self._maxlen,
            approximate=True,
        )

    async def ping(self) -> None:
        await self._redis.ping()

    async def aclose(self) -> None:
        await self._redis.aclose()
        logger.info("Redis stats sink closed")
