# dates.py
"""Date and time encodings understood by the planning service.

Dates are ``MM/DD/YYYY``, times are ``h:mm am``. Parsers raise
ValueError on input they cannot interpret.
"""

from __future__ import annotations

import re
from datetime import date, datetime

import dateparser

DATE_FORMAT = "%m/%d/%Y"

_TIME_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm|a|p)?$")


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "pm" if value.hour >= 12 else "am"
    return f"{hour}:{value.minute:02d} {suffix}"


def normalize_date(text: str) -> str:
    """Parse a free-form date and return it as ``MM/DD/YYYY``."""
    if not text or not text.strip():
        raise ValueError("Empty date")
    dt = dateparser.parse(
        text.strip(),
        languages=["en"],
        settings={
            "PREFER_DATES_FROM": "future",
            "DATE_ORDER": "MDY",
            "REQUIRE_PARTS": ["day", "month"],
        },
    )
    if dt is None:
        raise ValueError(f"Unparseable date: {text!r}")
    return format_date(dt.date())


def month_number(name: str) -> int:
    """Convert a month name, abbreviation or number to 1-12."""
    name = name.strip().rstrip(".")
    if name.isdigit():
        month = int(name)
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range: {name!r}")
        return month
    dt = dateparser.parse(
        name,
        languages=["en"],
        settings={"REQUIRE_PARTS": ["month"]},
    )
    if dt is None:
        raise ValueError(f"Unknown month: {name!r}")
    return dt.month


def date_from_month_day(month: str, day: str, today: date) -> str:
    """Rebuild a full date from a month name and day without a year.

    A month earlier than the current one is taken to mean next year.
    """
    month_idx = month_number(month)
    day = day.strip()
    if not day.isdigit():
        raise ValueError(f"Invalid day: {day!r}")
    if len(day) == 1:
        day = "0" + day

    year = today.year
    if month_idx < today.month:
        year += 1

    # rejects impossible days such as 02/30
    return format_date(date(year, month_idx, int(day)))


def normalize_time(text: str) -> str:
    """Parse ``7:02 pm``, ``7:02 p.m.``, ``7pm`` or ``19:02`` into ``h:mm am``."""
    cleaned = text.replace(".", "").strip().lower()
    match = _TIME_RE.match(cleaned)
    if match is None:
        raise ValueError(f"Unparseable time: {text!r}")

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if minute > 59:
        raise ValueError(f"Minute out of range: {text!r}")

    if meridiem:
        if not 1 <= hour <= 12:
            raise ValueError(f"Hour out of range: {text!r}")
        suffix = "pm" if meridiem.startswith("p") else "am"
        return f"{hour}:{minute:02d} {suffix}"

    if hour > 23:
        raise ValueError(f"Hour out of range: {text!r}")
    return format_time(datetime(2000, 1, 1, hour, minute))
