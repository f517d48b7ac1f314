from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def iso_date(d: date) -> str:
    # Calendar date only; datetimes lose their time component.
    if isinstance(d, datetime):
        d = d.date()
    return d.isoformat()


def parse_date(value: Any) -> Optional[date]:
    """
    Accepts a date, a datetime or an ISO string.

    The remote store sometimes returns DATE columns as full timestamps
    ("2024-01-05T00:00:00.000Z"); only the calendar part is kept.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def non_empty(text: Any) -> bool:
    return bool(text is not None and str(text).strip())


def try_parse_decimal(x: Any) -> tuple[bool, Optional[Decimal]]:
    if x is None or isinstance(x, bool):
        return False, None
    try:
        val = Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return False, None
    if not val.is_finite():
        return False, None
    return True, val


def to_decimal(x: Any) -> Optional[Decimal]:
    ok, val = try_parse_decimal(x)
    return val if ok else None


# Quantities typed by staff: plain digits with an optional fraction, no
# sign or exponent, at most 9 integer digits and 3 decimal places.
PLAIN_QUANTITY_RE = re.compile(r"^[0-9]{1,9}(\.[0-9]{1,3})?$")


def is_plain_positive_quantity(x: Any) -> bool:
    if x is None or isinstance(x, bool):
        return False
    text = str(x).strip()
    if not PLAIN_QUANTITY_RE.match(text):
        return False
    return Decimal(text) > 0


def json_number(d: Decimal) -> int | float:
    # JSON has no decimal type: integral values go out as ints.
    if d == d.to_integral_value():
        return int(d)
    return float(d)
