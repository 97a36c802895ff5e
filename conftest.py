"""Root conftest: loads .env.test before stats_per_request.config is imported."""
from __future__ import annotations

import os
from pathlib import Path

_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    for raw in _env_test.read_text().splitlines():
        entry = raw.strip()
        if not entry or entry.startswith("#"):
            continue
        key, _, value = entry.partition("=")
        os.environ.setdefault(key.strip(), value.strip())

# Never let a developer's .env point the test run at a real sink.
os.environ.setdefault("STATS_SINK", "null")
