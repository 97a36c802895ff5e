from __future__ import annotations

from typing import Mapping, Protocol

FieldValue = int | float | str


class MetricsWriter(Protocol):
    """Sink for metric samples. Implementations must allow concurrent writes."""

    async def write(
        self,
        name: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None: ...

    async def ping(self) -> None: ...

    async def aclose(self) -> None: ...
