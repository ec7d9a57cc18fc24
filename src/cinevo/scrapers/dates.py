"""Date parsing for the listings site's day headings and overview columns."""

import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from cinevo.config import settings

MONTH_MAP = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4,
    "may": 5, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTHS = r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"

# "Wednesday, 17 Dec", "Wednesday 17 December"
WEEKDAY_DATE_RE = re.compile(
    r"(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),?\s*(\d{1,2})\s+" + _MONTHS,
    re.IGNORECASE,
)
# "17 Dec", "17 December 2025"
DAY_MONTH_RE = re.compile(r"(\d{1,2})\s+" + _MONTHS + r"\w*\s*(\d{4})?", re.IGNORECASE)
# Overview column header: "Wed, 17 Dec"
COLUMN_HEADER_RE = re.compile(r"(\w{3}),?\s*(\d{1,2})\s+(\w{3})")

# Headings further than this in the past are taken to belong to next year
ROLLOVER_WINDOW = timedelta(days=60)


def site_today() -> date:
    """Today's date in the listings site's timezone."""
    return datetime.now(ZoneInfo(settings.site_timezone)).date()


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def resolve_heading_year(month: int, day: int, today: date) -> date | None:
    """
    Pick the year for a month/day seen in a day heading.

    The current year is used unless that places the date more than
    60 days before ``today``, in which case the next year is assumed.
    """
    candidate = _safe_date(today.year, month, day)
    if candidate is not None and candidate >= today - ROLLOVER_WINDOW:
        return candidate
    return _safe_date(today.year + 1, month, day)


def parse_heading_date(text: str, today: date | None = None) -> date | None:
    """
    Parse a day heading such as "Wednesday, 17 Dec" or "17 December 2025".

    Returns None when the text carries no recognisable date.
    """
    today = today or site_today()

    m = WEEKDAY_DATE_RE.search(text)
    if m:
        month = MONTH_MAP[m.group(3).lower()[:3]]
        return resolve_heading_year(month, int(m.group(2)), today)

    m = DAY_MONTH_RE.search(text)
    if m:
        day = int(m.group(1))
        month = MONTH_MAP[m.group(2).lower()[:3]]
        if m.group(3):
            return _safe_date(int(m.group(3)), month, day)
        return resolve_heading_year(month, day, today)

    return None


def parse_column_date(text: str, today: date | None = None) -> date | None:
    """
    Parse an overview column header like "Wed, 17 Dec".

    A month earlier than the current one is read as next year's only
    while the current month is November or December.
    """
    today = today or site_today()

    m = COLUMN_HEADER_RE.search(text)
    if not m:
        return None

    month = MONTH_MAP.get(m.group(3).lower())
    if month is None:
        return None

    year = today.year
    if month < today.month and today.month >= 11:
        year += 1
    return _safe_date(year, month, int(m.group(2)))
