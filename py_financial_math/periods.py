"""
py_financial_math/periods.py
Bucket keys and labels for the equity curve.
"""
import math
from datetime import date, timedelta
from enum import Enum
from typing import Iterator, Union

from .core import parse_date

INVALID_KEY = "Invalid"
START_KEY = "Start"

START_LABELS = {"zh": "起始", "en": "Start"}


class Granularity(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @staticmethod
    def coerce(value: Union[str, 'Granularity', None]) -> 'Granularity':
        """ Unknown values fall back to DAILY. """
        if isinstance(value, Granularity):
            return value
        try:
            return Granularity(str(value).lower())
        except ValueError:
            return Granularity.DAILY


# Periods per year for the Sharpe-like ratio
ANNUALIZATION_FACTORS = {
    Granularity.WEEKLY: 52,
    Granularity.MONTHLY: 12,
    Granularity.QUARTERLY: 4,
    Granularity.YEARLY: 1,
}


def annualization_factor(granularity: Union[str, Granularity]) -> int:
    return ANNUALIZATION_FACTORS.get(Granularity.coerce(granularity), 252)


def week_number(d: date) -> int:
    """
    Sunday-based week of year: ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7),
    weekday counted Sunday=0. Not ISO-8601; existing journals are keyed on it.
    """
    jan1 = date(d.year, 1, 1)
    past_days = (d - jan1).days
    jan1_weekday = (jan1.weekday() + 1) % 7
    return math.ceil((past_days + jan1_weekday + 1) / 7)


def period_key(date_value: Union[str, date], granularity: Union[str, Granularity]) -> str:
    """
    Maps a calendar date to its bucket key:
      daily     -> 2024-03-15
      weekly    -> 2024-W11
      monthly   -> 2024-03
      quarterly -> 2024-Q1
      yearly    -> 2024
    Unparseable dates map to "Invalid".
    """
    d = parse_date(date_value)
    if d is None:
        return INVALID_KEY

    freq = Granularity.coerce(granularity)
    if freq == Granularity.YEARLY:
        return f"{d.year}"
    if freq == Granularity.QUARTERLY:
        return f"{d.year}-Q{math.ceil(d.month / 3)}"
    if freq == Granularity.MONTHLY:
        return f"{d.year}-{d.month:02d}"
    if freq == Granularity.WEEKLY:
        return f"{d.year}-W{week_number(d):02d}"
    return d.isoformat()


def format_period_label(key: str, granularity: Union[str, Granularity], lang: str = "zh") -> str:
    """ Human readable label for a bucket key. Daily keys render as MM/DD. """
    if not key:
        return ""
    if key == START_KEY:
        return START_LABELS.get(lang, START_LABELS["en"])

    if Granularity.coerce(granularity) == Granularity.DAILY:
        parts = key.split("-")
        return f"{parts[1]}/{parts[2]}" if len(parts) == 3 else key
    return key


def iter_days(start: date, end: date) -> Iterator[date]:
    """ Yields every calendar day from start to end (inclusive). Never steps past end. """
    if start > end:
        return
    current = start
    while True:
        yield current
        if current >= end:
            break
        current += timedelta(days=1)
