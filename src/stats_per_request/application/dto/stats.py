from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping

from stats_per_request.application.exceptions import ConfigurationError
from stats_per_request.application.ports.metrics import FieldValue
from stats_per_request.domain.path_cleanup import (
    BUILTIN_CLEANUPS,
    PathCleanup,
    replace_idish,
)

if TYPE_CHECKING:
    from stats_per_request.config import Settings

DEFAULT_APP_NAME = "unknown"
DEFAULT_METRIC_NAME = "http_request"
DEFAULT_LONG_REQUEST = 5.0


@dataclass(frozen=True, slots=True)
class StatsConfig:
    """Per-middleware configuration, fixed once the middleware is built.

    ``path_cleanups`` run in order on every request path; an empty tuple
    keeps raw paths. ``long_request`` of 0 turns slow-request logging off.
    """

    app_name: str = DEFAULT_APP_NAME
    metric_name: str = DEFAULT_METRIC_NAME
    path_cleanups: tuple[PathCleanup, ...] = (replace_idish,)
    add_headers: tuple[str, ...] = ()
    long_request: float = DEFAULT_LONG_REQUEST

    def __post_init__(self) -> None:
        if not self.app_name:
            object.__setattr__(self, "app_name", DEFAULT_APP_NAME)
        if not self.metric_name:
            object.__setattr__(self, "metric_name", DEFAULT_METRIC_NAME)
        if self.long_request < 0:
            raise ConfigurationError(
                f"long_request must be >= 0, got {self.long_request}"
            )
        object.__setattr__(self, "path_cleanups", tuple(self.path_cleanups))
        object.__setattr__(self, "add_headers", tuple(self.add_headers))

    @classmethod
    def from_settings(cls, settings: Settings) -> StatsConfig:
        return cls(
            app_name=settings.STATS_APP_NAME,
            metric_name=settings.STATS_METRIC_NAME,
            path_cleanups=load_path_cleanups(settings.STATS_PATH_CLEANUPS),
            add_headers=tuple(settings.STATS_ADD_HEADERS),
            long_request=settings.STATS_LONG_REQUEST,
        )


@dataclass(frozen=True, slots=True)
class RequestInfo:
    """Read-only view of an incoming request."""

    method: str
    path: str
    request_uri: str
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class MetricSample:
    name: str
    fields: dict[str, FieldValue]
    tags: dict[str, str]


def load_path_cleanup(ref: str) -> PathCleanup:
    """Resolve a built-in cleanup name or a ``package.module:function`` ref."""
    if ref in BUILTIN_CLEANUPS:
        return BUILTIN_CLEANUPS[ref]

    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(f"Unknown path cleanup: {ref!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import path cleanup {ref!r}: {exc}") from exc

    cleanup = getattr(module, attr, None)
    if not callable(cleanup):
        raise ConfigurationError(f"Path cleanup {ref!r} is not callable")
    return cleanup


def load_path_cleanups(refs: Iterable[str]) -> tuple[PathCleanup, ...]:
    return tuple(load_path_cleanup(ref) for ref in refs)
