"""
Cell codec for spreadsheet-backed collections.

Each cell holds one JSON value. Dates and datetimes, which JSON cannot
represent, are wrapped in single-key marker objects so they decode back
to the same Python types:

    datetime -> {"$datetime": "2025-01-31T10:00:00+00:00"}
    date     -> {"$date": "1990-01-01"}

An empty cell decodes to None.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID


DATETIME_MARKER = "$datetime"
DATE_MARKER = "$date"


def _encode_default(obj: Any) -> Any:
    # datetime is a subclass of date, so it must be checked first
    if isinstance(obj, datetime):
        return {DATETIME_MARKER: obj.isoformat()}
    if isinstance(obj, date):
        return {DATE_MARKER: obj.isoformat()}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (UUID, Decimal)):
        return str(obj)
    raise TypeError(f"Cannot store value of type {type(obj).__name__}")


def _decode_object(obj: dict) -> Any:
    if len(obj) == 1:
        if DATETIME_MARKER in obj:
            return datetime.fromisoformat(obj[DATETIME_MARKER])
        if DATE_MARKER in obj:
            return date.fromisoformat(obj[DATE_MARKER])
    return obj


def encode_cell(value: Any) -> str:
    """Encode a Python value into a cell string."""
    if value is None:
        return ""
    return json.dumps(value, default=_encode_default, ensure_ascii=False)


def decode_cell(cell: str) -> Any:
    """Decode a cell string back into a Python value."""
    if cell == "":
        return None
    return json.loads(cell, object_hook=_decode_object)
