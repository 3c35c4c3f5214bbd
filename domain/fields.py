"""
Column-level coercions shared by the record mappers.

Relational drivers hand back numerics as ``Decimal`` or text, dates as native
``date``/``datetime`` objects or strings, and times as ``time`` objects. The
helpers below turn those encodings into the canonical representation (read
direction) and back into bindable driver values (write direction).

Read helpers raise ``ValueError``/``TypeError`` on values they cannot coerce;
the per-entity mappers turn that into a ``ValidationError`` for the row.
"""

import math
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

INLINE_PAYLOAD_PREFIX = "data:"


class _Unset:
    """Marker for "column not part of this write"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


def is_inline_payload(value: Any) -> bool:
    """True for inline-encoded binary payloads (``data:`` URIs)."""
    return isinstance(value, str) and value.lstrip()[:5].lower() == INLINE_PAYLOAD_PREFIX


# ---------------------------------------------------------------------------
# Read direction: raw column value -> canonical value
# ---------------------------------------------------------------------------


def parse_number(value: Any) -> float:
    """Coerce int/float/Decimal/numeric text to a finite float."""
    if isinstance(value, bool):
        raise TypeError("boolean is not a numeric value")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, Decimal):
        try:
            number = float(value)
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"invalid decimal {value!r}") from exc
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise TypeError(f"unsupported numeric type {type(value).__name__}")
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


def number_or_zero(value: Any) -> float:
    """Numeric column whose absence means zero (meal energy and macros)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    return parse_number(value)


def optional_number(value: Any) -> Optional[float]:
    """Numeric column where NULL means the value is unknown."""
    if value is None:
        return None
    return parse_number(value)


def optional_integer(value: Any) -> Optional[int]:
    if value is None:
        return None
    number = parse_number(value)
    if not number.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(number)


def required_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return value


def optional_text(value: Any) -> Optional[str]:
    """Optional text column; blank legacy values read as absent."""
    if value is None:
        return None
    text = required_text(value)
    return text if text.strip() else None


def optional_image_reference(value: Any) -> Optional[str]:
    """Image/avatar reference; inline payloads never surface as a reference."""
    text = optional_text(value)
    if text is None or not text.strip() or is_inline_payload(text):
        return None
    return text


def calendar_date(value: Any) -> str:
    """Normalize a DATE value to ``YYYY-MM-DD``.

    Native values keep their calendar date; strings keep their date-only prefix
    (anything after ``T`` or a space is a time-of-day or zone component).
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        prefix = value.strip().split("T", 1)[0].split(" ", 1)[0]
        # Validates the shape; raises ValueError otherwise
        return date.fromisoformat(prefix).isoformat()
    raise TypeError(f"unsupported date type {type(value).__name__}")


def optional_calendar_date(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return calendar_date(value)


def timestamp(value: Any) -> Optional[str]:
    """Normalize a TIMESTAMP value to a full ISO-8601 instant in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, date):
        return timestamp(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    if isinstance(value, str):
        return value.strip() or None
    raise TypeError(f"unsupported timestamp type {type(value).__name__}")


def time_of_day(value: Any) -> str:
    """Normalize a TIME value to ``HH:MM[:SS]`` text."""
    if value is None:
        return ""
    if isinstance(value, time):
        return value.replace(tzinfo=None).isoformat()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return ""
        return time.fromisoformat(text).isoformat()
    raise TypeError(f"unsupported time type {type(value).__name__}")


# ---------------------------------------------------------------------------
# Write direction: canonical value -> bindable driver value
# ---------------------------------------------------------------------------


def date_argument(value: Any) -> Any:
    """``YYYY-MM-DD`` text becomes a ``date``.

    Raises:
        ValueError: if the text is not an ISO calendar date
    """
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        return date.fromisoformat(calendar_date(value))
    return value


def time_argument(value: Any) -> Any:
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            return value
    return value


def zero_if_missing(value: Any) -> Any:
    return 0 if value is None else value


def image_argument(value: Any) -> Optional[str]:
    if value is None or is_inline_payload(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def passthrough(value: Any) -> Any:
    return value
