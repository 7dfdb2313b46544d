"""Validation helpers for rows fetched from the store.

Repositories build domain dataclasses through these so that a missing column
or a value of the wrong kind fails loudly at the fetch boundary instead of
deep inside a template.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.exceptions import RecordSchemaError
from ..database.mysql_base import normalize_mysql_datetime


def _get(row: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in row:
        raise RecordSchemaError(f"{kind}: missing column {key!r}")
    return row[key]


def req_int(row: Mapping[str, Any], key: str, kind: str) -> int:
    value = _get(row, key, kind)
    if isinstance(value, bool) or value is None:
        raise RecordSchemaError(f"{kind}.{key}: expected integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise RecordSchemaError(f"{kind}.{key}: expected integer, got {value!r}") from e


def req_str(row: Mapping[str, Any], key: str, kind: str) -> str:
    value = _get(row, key, kind)
    if not isinstance(value, str) or not value:
        raise RecordSchemaError(f"{kind}.{key}: expected non-empty string, got {value!r}")
    return value


def opt_str(row: Mapping[str, Any], key: str) -> Optional[str]:
    value = row.get(key)
    if value is None or value == "":
        return None
    return str(value)


def req_datetime(row: Mapping[str, Any], key: str, kind: str) -> datetime:
    value = _get(row, key, kind)
    try:
        parsed = normalize_mysql_datetime(value)
    except (TypeError, ValueError) as e:
        raise RecordSchemaError(f"{kind}.{key}: {e}") from e
    if parsed is None:
        raise RecordSchemaError(f"{kind}.{key}: expected datetime, got None")
    return parsed
