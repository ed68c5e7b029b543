import calendar
import datetime
from typing import List


def date_key(value: datetime.date) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for ``value``.

    Datetimes are keyed by their own wall-clock fields. They are never
    normalized to UTC first, since that can move the day by one.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def today_key() -> str:
    return date_key(datetime.date.today())


def parse_date_key(key: str) -> datetime.date:
    """Return the date for a canonical key or raise ``ValueError``."""
    try:
        parsed = datetime.datetime.strptime(key, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"invalid date key: {key!r}")
    if date_key(parsed) != key:
        raise ValueError(f"invalid date key: {key!r}")
    return parsed


def as_date_key(value: "str | datetime.date") -> str:
    if isinstance(value, str):
        parse_date_key(value)
        return value
    return date_key(value)


def days_in_month(year: int, month: int) -> List[datetime.date]:
    _first_weekday, count = calendar.monthrange(year, month)
    return [datetime.date(year, month, day) for day in range(1, count + 1)]


def last_n_days(n: int, today: datetime.date | None = None) -> List[datetime.date]:
    """Return the ``n`` calendar days ending today, oldest first."""
    end = today or datetime.date.today()
    return [end - datetime.timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
