from __future__ import annotations

import datetime as dt
from typing import Optional


def parse_bool(value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return default
        return text in {"1", "true", "yes", "y", "on"}
    return default


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def latest(*values: Optional[dt.datetime]) -> Optional[dt.datetime]:
    present = [value for value in values if value is not None]
    return max(present) if present else None


def mtime(path) -> dt.datetime:
    return dt.datetime.fromtimestamp(path.stat().st_mtime)
