from __future__ import annotations

import re
from datetime import date, datetime

# Leading numeric prefix, e.g. "120 pages" -> 120, "NT$150" is not numeric.
_leading_int = re.compile(r"^\s*([+-]?\d+)")
_leading_float = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")
# Year first, month and day with or without zero padding: 2024-01-05, 2024/1/5
_ymd = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")

TRUTHY_FLAGS = frozenset({"true", "1", "是"})


def empty_to_none(value: str | None) -> str | None:
    """Trim ``value``; blank or whitespace-only means "not provided"."""
    if value is None:
        return None
    s = value.strip()
    return s or None


def parse_positive_int(value: str | None) -> int | None:
    """Return the leading integer of ``value`` when it is strictly positive.

    Anything else (blank, non-numeric, zero, negative) is dropped silently;
    callers treat the field as omitted rather than invalid.
    """
    s = empty_to_none(value)
    if s is None:
        return None
    m = _leading_int.match(s)
    if not m:
        return None
    n = int(m.group(1))
    return n if n > 0 else None


def parse_positive_float(value: str | None) -> float | None:
    """Float counterpart of :func:`parse_positive_int` (same omission rule)."""
    s = empty_to_none(value)
    if s is None:
        return None
    m = _leading_float.match(s)
    if not m:
        return None
    n = float(m.group(1))
    return n if n > 0 else None


def parse_active_flag(value: str | None) -> bool | None:
    """Tri-state flag: None when the column is blank, else truthy-word check."""
    s = empty_to_none(value)
    if s is None:
        return None
    return s in TRUTHY_FLAGS


def parse_loose_date(value: str) -> date:
    """Coerce a free-form CSV date to a calendar date.

    Accepts ``YYYY-MM-DD`` and ``YYYY/MM/DD`` (month and day may be
    unpadded) and ISO datetimes. Raises ``ValueError`` for anything else.
    """
    s = (value or "").strip()
    if not s:
        raise ValueError("Date is empty")
    m = _ymd.match(s)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            raise ValueError(f"Invalid date: {s!r}") from None
    candidate = s.replace("/", "-")
    try:
        return datetime.fromisoformat(candidate.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Invalid date: {s!r}") from None
