"""Lenient value coercion for invoice fields.

Invoice amounts arrive as numbers or as free-form strings such as
``"$1,250.00"`` or ``"IQD 250000"``. Timestamps arrive as ISO-8601 strings,
sometimes date-only. None of these helpers raise: unreadable input becomes
0 (amounts) or None (timestamps).
"""

from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_NUMERIC_PREFIX = re.compile(r"-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")


def parse_amount(value: object) -> float:
    """Parse a monetary amount, falling back to 0.

    Strings are stripped of every character except ASCII digits, ``.`` and
    ``-``; the longest leading number of what remains is used, so
    ``"1.2.3"`` reads as 1.2 and ``"--5"`` as 0.

    Args:
        value: Raw amount (number, string or anything else).

    Returns:
        Parsed amount, 0.0 when nothing numeric could be read.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float | Decimal):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(_NON_NUMERIC.sub("", value))
        if match is None:
            return 0.0
        number = float(match.group())
        if not math.isfinite(number):
            return 0.0
        return number or 0.0
    return 0.0


def parse_timestamp(value: object) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime.

    Naive values are taken as UTC. Date-only values map to midnight UTC.

    Args:
        value: datetime, date or ISO-8601 string.

    Returns:
        Aware UTC datetime, or None if the value is missing or unreadable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        return None


def round_half_up(value: float, decimals: int = 2) -> float | int:
    """Round half away from zero.

    Args:
        value: Number to round.
        decimals: Decimal places; 0 returns an int.

    Returns:
        Rounded number.
    """
    if not math.isfinite(value):
        return 0 if decimals == 0 else 0.0
    try:
        quantum = Decimal(1).scaleb(-decimals)
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return 0 if decimals == 0 else 0.0
    if decimals == 0:
        return int(rounded)
    return float(rounded)


def round2(value: float) -> float:
    """Round a monetary value or percentage to cents."""
    return float(round_half_up(value, 2))
