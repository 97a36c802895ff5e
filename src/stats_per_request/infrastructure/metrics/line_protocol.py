"""InfluxDB line protocol encoding for metric samples."""
from __future__ import annotations

import re
import time
from typing import Mapping

from stats_per_request.application.ports.metrics import FieldValue

_NUMERIC = re.compile(r"-?[0-9]+(\.[0-9]+)?")

# Line protocol cannot escape line breaks outside string fields.
_MEASUREMENT_ESCAPES = str.maketrans({",": r"\,", " ": r"\ ", "\n": r"\ ", "\r": r"\ "})
_KEY_ESCAPES = str.maketrans(
    {",": r"\,", "=": r"\=", " ": r"\ ", "\n": r"\ ", "\r": r"\ "}
)
_STRING_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"})


def _field_value(value: FieldValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    if _NUMERIC.fullmatch(value):
        return value
    return f'"{value.translate(_STRING_ESCAPES)}"'


def encode_line(
    name: str,
    fields: Mapping[str, FieldValue],
    tags: Mapping[str, str],
    timestamp_ns: int | None = None,
) -> str:
    """Render one sample, e.g.

    http_request,app=YourApp,method=GET,path=/some/path,status=400 hit=1i,request_time=0.02476 1519658691411352000
    """
    if timestamp_ns is None:
        timestamp_ns = time.time_ns()

    head = name.translate(_MEASUREMENT_ESCAPES)
    for key in sorted(tags):
        value = tags[key]
        if value == "":
            continue
        head += f",{key.translate(_KEY_ESCAPES)}={value.translate(_KEY_ESCAPES)}"

    body = ",".join(
        f"{key.translate(_KEY_ESCAPES)}={_field_value(fields[key])}"
        for key in sorted(fields)
    )
    return f"{head} {body} {timestamp_ns}"
