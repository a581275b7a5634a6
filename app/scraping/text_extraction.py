"""
Pure text extraction helpers shared by the follower scraper and review collector.

Nothing in this module performs I/O. Every parser returns ``None`` (or zero for
the advisory review total) instead of raising on malformed input.
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

_COUNT_CHARS = re.compile(r"[^\d.,KM]")
_COUNT_TOKEN = re.compile(r"(\d[\d,]*(?:\.\d+)?|\.\d+)\s*([KM])?(?![A-Z])")
_SUFFIX_MULTIPLIERS = {"K": 1_000, "M": 1_000_000}

_QUANTITY = re.compile(r"(\d+)")
_RATING = re.compile(r"(\d+(?:\.\d+)?)")
_TOTAL_REVIEWS = re.compile(r"(\d[\d,]*)\s*reviews?\b", flags=re.IGNORECASE)

DATE_KEYWORDS = ("ago", "year", "month", "week", "day", "hour", "minute")
_DATE_UNITS = ("year", "month", "week", "day", "hour", "minute")


def parse_abbreviated_count(text: str | None) -> int | None:
    """
    Convert follower text such as ``"12.3K"`` or ``"1,234 followers"`` to an int.

    A ``K`` or ``M`` directly after the number multiplies by one thousand or one
    million and the product is floored. Text without any digit yields ``None``.
    """

    if not text:
        return None

    upper = text.upper()
    if not any(char.isdigit() for char in _COUNT_CHARS.sub("", upper)):
        return None

    match = _COUNT_TOKEN.search(upper)
    if match is None:
        return None

    number, suffix = match.group(1), match.group(2)
    try:
        amount = Decimal(number.replace(",", ""))
    except InvalidOperation:
        return None

    if suffix:
        amount *= _SUFFIX_MULTIPLIERS[suffix]
    return int(amount)


def _shift_months(value: datetime, months: int) -> datetime:
    total = value.year * 12 + (value.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def parse_relative_date(text: str | None, now: datetime | None = None) -> str | None:
    """
    Convert relative text such as ``"2 months ago"`` to an ISO-8601 timestamp.

    The quantity defaults to one when the text has no digits ("a year ago").
    Month and year offsets clamp to the last day of the target month. Text
    without a recognized unit keyword returns ``None``.
    """

    if not text:
        return None

    reference = now or datetime.now(timezone.utc)
    lowered = text.lower()
    quantity_match = _QUANTITY.search(lowered)
    quantity = int(quantity_match.group(1)) if quantity_match else 1

    for unit in _DATE_UNITS:
        if unit not in lowered:
            continue
        if unit == "year":
            shifted = _shift_months(reference, quantity * 12)
        elif unit == "month":
            shifted = _shift_months(reference, quantity)
        elif unit == "week":
            shifted = reference - timedelta(weeks=quantity)
        elif unit == "day":
            shifted = reference - timedelta(days=quantity)
        elif unit == "hour":
            shifted = reference - timedelta(hours=quantity)
        else:
            shifted = reference - timedelta(minutes=quantity)
        return shifted.isoformat()

    return None


def is_relative_date_text(text: str | None) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(keyword in lowered for keyword in DATE_KEYWORDS)


def parse_rating(aria_label: str | None) -> float | None:
    """
    Read the leading numeric value of a star-rating ARIA label ("4 stars").
    """

    if not aria_label:
        return None
    match = _RATING.search(aria_label)
    if match is None:
        return None
    return float(match.group(1))


def parse_total_reviews(text: str | None) -> int:
    """
    Best-effort "N reviews" count from page text. Advisory only.
    """

    if not text:
        return 0
    match = _TOTAL_REVIEWS.search(text)
    if match is None:
        return 0
    return int(match.group(1).replace(",", ""))


def hash_content(text: str) -> int:
    """
    31-multiplier rolling hash over UTF-16 code units, wrapped to signed 32 bits.

    Used only to suppress duplicate review cards within one collection session.
    """

    value = 0
    encoded = text.encode("utf-16-le")
    for index in range(0, len(encoded), 2):
        unit = encoded[index] | (encoded[index + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value
