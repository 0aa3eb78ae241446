"""Calendar day and month encodings.

Days are stored as 8-character ``YYYYMMDD`` strings and months are identified by
the integer ``YYYYMM``. Month membership is decided by string prefix, so
``month_prefix(202501)`` matches every day id starting with ``"202501"``.
"""

from collections.abc import Iterator
from datetime import date


def format_date_to_id(d: date) -> str:
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


def parse_id_to_date(date_id: str) -> date:
    date_id = str(date_id)
    if len(date_id) != 8 or not date_id.isdigit():
        raise ValueError(f"Invalid date id: {date_id!r}")
    return date(int(date_id[:4]), int(date_id[4:6]), int(date_id[6:8]))


def month_id_of(d: date) -> int:
    return d.year * 100 + d.month


def month_id_from_date_id(date_id: str) -> int:
    return int(str(date_id)[:6])


def current_month_id(today: date | None = None) -> int:
    return month_id_of(today or date.today())


def next_month_id(month_id: int) -> int:
    year, month = divmod(month_id, 100)
    if month == 12:
        return (year + 1) * 100 + 1
    return month_id + 1


def iter_months(start: int, stop: int) -> Iterator[int]:
    """Yield month ids from ``start`` up to but excluding ``stop``."""
    month = start
    while month < stop:
        yield month
        month = next_month_id(month)


def month_prefix(month_id: int) -> str:
    return f"{month_id}%"


def parse_month(text: str | None) -> int | None:
    """Parse ``YYYY-MM`` (or ``YYYYMM``) into a month id."""
    if not text:
        return None
    text = text.strip()
    try:
        if "-" in text:
            parts = text.split("-")
            year = int(parts[0])
            month = int(parts[1])
        elif len(text) == 6 and text.isdigit():
            year, month = int(text[:4]), int(text[4:])
        else:
            return None
        if not (1 <= month <= 12) or year < 1:
            return None
        return year * 100 + month
    except (ValueError, IndexError):
        return None


def month_label(month_id: int) -> str:
    year, month = divmod(month_id, 100)
    return date(year, month, 1).strftime("%B %Y")
