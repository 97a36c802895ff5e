from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    STATS_APP_NAME: str = "unknown"
    STATS_METRIC_NAME: str = "http_request"
    # Built-in names or "package.module:function" refs; [] keeps raw paths.
    STATS_PATH_CLEANUPS: list[str] = ["replace_idish"]
    STATS_ADD_HEADERS: list[str] = []
    STATS_LONG_REQUEST: float = 5.0

    STATS_SINK: Literal["null", "log", "influx_file", "redis"] = "log"
    STATS_FILE: str = "stats_per_request.stats"

    REDIS_URL: str = "redis://localhost:6379/0"
    STATS_REDIS_STREAM: str = "stats.http_request"
    STATS_REDIS_MAXLEN: int = 100_000

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
