"""
app/validators/value_parser.py

Parsing of loosely typed export cells into numbers, order ids and dates.

Every parser returns ``None`` for a value it cannot interpret; callers skip
that contribution and keep scanning.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from app.domain.order_analysis import UNKNOWN_MONTH, Quantity

# Spreadsheet day serials are counted from this date (Lotus 1900 leap-year bug included).
SPREADSHEET_EPOCH = date(1899, 12, 30)

# Exclusive bounds. Small integers are almost never dates.
SERIAL_LOWER_BOUND = 60
SERIAL_UPPER_BOUND = 60000

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M %z",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return str(value).strip() == ""


def parse_number(value: Any) -> float | None:
    """
    Parse a finite number from an int, float or numeric string.

    Blank cells, booleans, NaN and infinities are not numbers.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return _finite_float(value)

    raw_value = str(value).strip()
    if not raw_value:
        return None
    try:
        decimal_value = Decimal(raw_value)
    except (InvalidOperation, ValueError):
        return None
    return _finite_float(decimal_value)


def _finite_float(value: int | float | Decimal) -> float | None:
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_quantity(value: Any) -> Quantity | None:
    """
    Parse a quantity; whole numbers come back as ``int``.
    """

    number = parse_number(value)
    if number is None:
        return None
    return as_quantity(number)


def as_quantity(number: float) -> Quantity:
    if float(number).is_integer():
        return int(number)
    return number


def normalize_order_id(value: Any) -> str | None:
    """
    String form of an order identifier, or ``None`` when it is blank.

    Spreadsheet readers hand back ``1001.0`` for an integer id cell; that is
    rendered as ``"1001"``.
    """

    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_text(value: Any) -> str:
    """
    Case- and whitespace-normalized text used for keyword matching.
    """

    if is_blank(value):
        return ""
    return str(value).strip().lower()


def parse_date(value: Any) -> date | None:
    """
    Convert a created-at cell into a calendar date.

    Numeric cells strictly between 60 and 60000 are spreadsheet day serials;
    the fractional time of day is dropped. Any other number is not a date.
    Strings are parsed as ISO 8601
    first, then against ``DATE_FORMATS``. The wall-clock date is kept as
    written, without converting between time zones.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)):
        serial = _finite_float(value)
        return _parse_serial(serial) if serial is not None else None
    return _parse_date_string(str(value))


def month_key(value: Any) -> str:
    """
    ``YYYY-MM`` bucket for a created-at cell, ``"Unknown"`` when unparseable.
    """

    parsed = parse_date(value)
    if parsed is None:
        return UNKNOWN_MONTH
    return f"{parsed.year:04d}-{parsed.month:02d}"


def _parse_serial(serial: float) -> date | None:
    if not SERIAL_LOWER_BOUND < serial < SERIAL_UPPER_BOUND:
        return None
    return SPREADSHEET_EPOCH + timedelta(days=math.floor(serial))


def _parse_date_string(raw_value: str) -> date | None:
    raw = raw_value.strip()
    if not raw:
        return None

    normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        return datetime.fromisoformat(normalized).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    return None