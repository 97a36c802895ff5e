"""Appends samples as InfluxDB line protocol to a local file."""
from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import Mapping

from stats_per_request.application.ports.metrics import FieldValue
from stats_per_request.infrastructure.metrics.line_protocol import encode_line

logger = logging.getLogger(__name__)


class InfluxFileMetricsWriter:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        logger.info("Writing stats to %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _append(self, line: str) -> None:
        with self._lock, self._path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        await asyncio.to_thread(self._append, encode_line(name, fields, tags))

    async def ping(self) -> None:
        if not self._path.parent.is_dir():
            raise FileNotFoundError(f"stats directory {self._path.parent} does not exist")

    async def aclose(self) -> None:
        return None
