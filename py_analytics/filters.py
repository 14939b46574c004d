"""
py_analytics/filters.py
Scoping of the trade list: accounts, tags and time-range presets.
"""
import calendar
import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple, Iterable, Union

import pytz

from py_journal.objects import TradeEvent, Account
from py_financial_math.core import parse_date

logger = logging.getLogger("journal.filters")


class TimeRange(Enum):
    ALL = "ALL"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    YTD = "YTD"
    CUSTOM = "CUSTOM"


def journal_today(timezone: str = "Asia/Taipei") -> date:
    """ Current calendar date in the journal's timezone. """
    try:
        tz = pytz.timezone(timezone)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"Unknown timezone '{timezone}', using local date")
        return date.today()
    return datetime.now(tz).date()


def months_before(d: date, months: int) -> date:
    """ Same day-of-month `months` earlier, clamped to the end of shorter months. """
    month_index = d.year * 12 + (d.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def resolve_window(
    time_range: Union[str, TimeRange],
    today: date,
    custom_start: Union[str, date, None] = None,
    custom_end: Union[str, date, None] = None
) -> Tuple[Optional[date], Optional[date]]:
    """ Turns a time-range preset into a (start, end) window. None = open. """
    tr = time_range if isinstance(time_range, TimeRange) else TimeRange(str(time_range).upper())

    if tr == TimeRange.CUSTOM:
        return parse_date(custom_start), parse_date(custom_end)
    if tr == TimeRange.ONE_MONTH:
        return months_before(today, 1), None
    if tr == TimeRange.THREE_MONTHS:
        return months_before(today, 3), None
    if tr == TimeRange.YTD:
        return date(today.year, 1, 1), None
    return None, None


def scope_to_accounts(events: Iterable[TradeEvent], active_account_ids: Iterable[str]) -> List[TradeEvent]:
    """ Trades of the active accounts. No active ids -> every trade. """
    active = set(active_account_ids or [])
    if not active:
        return list(events)
    return [e for e in events if e.account_id in active]


def baseline_capital(accounts: Iterable[Account], active_account_ids: Iterable[str]) -> float:
    """ Sum of initial capital over the active accounts (may be 0). """
    active = set(active_account_ids or [])
    return sum(a.initial_capital for a in accounts if a.id in active)


def filter_by_tags(
    events: Iterable[TradeEvent],
    strategies: Optional[List[str]] = None,
    emotions: Optional[List[str]] = None
) -> List[TradeEvent]:
    """ Empty filter lists keep everything; otherwise the tag must be in the list. """
    result = []
    for e in events:
        if strategies and (not e.strategy or e.strategy not in strategies):
            continue
        if emotions and (not e.emotion or e.emotion not in emotions):
            continue
        result.append(e)
    return result


def filter_by_window(events: Iterable[TradeEvent], start: Optional[date], end: Optional[date]) -> List[TradeEvent]:
    """ Trades dated inside [start, end]. Unparseable dates are kept only when there is no window. """
    if start is None and end is None:
        return list(events)

    result = []
    for e in events:
        d = parse_date(e.date)
        if d is None:
            continue
        if start and d < start:
            continue
        if end and d > end:
            continue
        result.append(e)
    return result
