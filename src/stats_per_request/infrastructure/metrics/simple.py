from __future__ import annotations

import logging
from typing import Mapping

from stats_per_request.application.ports.metrics import FieldValue
from stats_per_request.infrastructure.metrics.line_protocol import encode_line

logger = logging.getLogger(__name__)


class NullMetricsWriter:
    """Discards every sample."""

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        return None

    async def ping(self) -> None:
        return None

    async def aclose(self) -> None:
        return None


class LoggingMetricsWriter:
    """Logs each sample as a line-protocol record."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        logger.log(self._level, "%s", encode_line(name, fields, tags))

    async def ping(self) -> None:
        return None

    async def aclose(self) -> None:
        return None
