"""
py_financial_math/series.py
Equity curve synthesis: daily aggregation, day-by-day walk, drawdown and windowing.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Dict, Optional, Iterable, Union

from py_journal.objects import TradeEvent
from .core import parse_date, calculate_pct
from .models import CurvePoint, DrawdownPoint, WalkResult, WalkStatus
from .periods import Granularity, START_KEY, period_key, format_period_label, iter_days

logger = logging.getLogger("journal.series")

MAX_WALK_DAYS = 5000


@dataclass
class DailyBucket:
    total: float = 0.0
    accounts: Dict[str, float] = field(default_factory=dict)

    def add(self, account_id: str, pnl: float):
        self.total += pnl
        self.accounts[account_id] = self.accounts.get(account_id, 0.0) + pnl


def aggregate_daily_pnl(events: Iterable[TradeEvent]) -> Dict[str, DailyBucket]:
    """
    Groups events by their literal date string.
    "2024-01-05" and "2024-1-5" are different keys; dates must be canonical upstream.
    """
    daily: Dict[str, DailyBucket] = {}
    for e in events:
        if e.date not in daily:
            daily[e.date] = DailyBucket()
        daily[e.date].add(e.account_id, e.pnl)
    return daily


def running_drawdowns(values: List[float], initial_peak: float = 0.0) -> List[float]:
    """
    Signed drawdown amount (value - running peak) for each point. Always <= 0.
    The peak starts at initial_peak and only moves up.
    """
    drawdowns = []
    peak = initial_peak

    for val in values:
        if val > peak:
            peak = val
        drawdowns.append(val - peak)

    return drawdowns


class _EquityWalker:
    """ Running state of the walk. Emits one CurvePoint per closed bucket. """

    def __init__(self, baseline: float, granularity: Granularity, lang: str):
        self.baseline = baseline
        self.granularity = granularity
        self.lang = lang

        self.equity = baseline
        self.peak = baseline
        self.previous_equity = baseline
        self.period_returns: List[float] = []
        self.points: List[CurvePoint] = []

        self.bucket_pnl = 0.0
        self.bucket_accounts: Dict[str, float] = {}

    def add_day(self, bucket: DailyBucket):
        self.equity += bucket.total
        self.bucket_pnl += bucket.total
        for account_id, pnl in bucket.accounts.items():
            self.bucket_accounts[account_id] = self.bucket_accounts.get(account_id, 0.0) + pnl

    def emit(self, key: str, full_date: date):
        # New peak is judged against the peak before this point
        is_new_peak = self.equity > self.peak
        self.peak = max(self.peak, self.equity)

        dd_amt = self.equity - self.peak
        dd_pct = calculate_pct(dd_amt, self.peak)

        if self.previous_equity > 0:
            self.period_returns.append((self.equity - self.previous_equity) / self.previous_equity)
        self.previous_equity = self.equity

        self.points.append(CurvePoint(
            period_key=key,
            label=format_period_label(key, self.granularity, self.lang),
            full_date=full_date,
            equity=self.equity,
            peak=self.peak,
            pnl=self.bucket_pnl,
            cumulative_pnl=self.equity - self.baseline,
            is_new_peak=is_new_peak,
            dd_amt=dd_amt,
            dd_pct=dd_pct,
            account_pnl=dict(self.bucket_accounts)
        ))

        # Accumulators reset only on a bucket transition
        self.bucket_pnl = 0.0
        self.bucket_accounts = {}


def build_equity_curve(
    events: List[TradeEvent],
    baseline: float,
    granularity: Union[str, Granularity] = Granularity.DAILY,
    lang: str = "zh",
    today: Optional[date] = None,
    max_steps: int = MAX_WALK_DAYS
) -> WalkResult:
    """
    Walks day by day from the first trade date to max(today, last trade date),
    emitting a point whenever the bucket key changes plus one for the last
    (possibly partial) bucket. A synthetic Start point at baseline comes first.

    The walk stops after max_steps days; the result is then TRUNCATED.
    Trades with unparseable dates are skipped.
    """
    freq = Granularity.coerce(granularity)
    today = today or date.today()

    daily = aggregate_daily_pnl(events)
    trade_days = [d for d in (parse_date(e.date) for e in events) if d is not None]

    start_point = CurvePoint(
        period_key=START_KEY,
        label=format_period_label(START_KEY, freq, lang),
        full_date=min(trade_days) if trade_days else None,
        equity=baseline,
        peak=baseline,
        pnl=0.0,
        cumulative_pnl=0.0,
        is_new_peak=False,
        dd_amt=0.0,
        dd_pct=0.0,
        is_start=True
    )

    if not trade_days:
        return WalkResult(points=[start_point], period_returns=[])

    first_day = min(trade_days)
    last_day = max(max(trade_days), today)

    walker = _EquityWalker(baseline, freq, lang)
    current_key = period_key(first_day, freq)
    walked_day = first_day
    steps = 0
    status = WalkStatus.OK

    for day in iter_days(first_day, last_day):
        steps += 1

        key = period_key(day, freq)
        if key != current_key:
            walker.emit(current_key, walked_day)
            current_key = key

        bucket = daily.get(day.isoformat())
        if bucket:
            walker.add_day(bucket)
        walked_day = day

        # Stop before asking the iterator for another day
        if steps >= max_steps and day < last_day:
            status = WalkStatus.TRUNCATED
            break

    # Final (possibly partial) bucket
    walker.emit(current_key, walked_day)

    if status == WalkStatus.TRUNCATED:
        logger.warning(f"Equity walk truncated after {steps} days ({first_day} -> {last_day})")

    return WalkResult(
        points=[start_point] + walker.points,
        period_returns=walker.period_returns,
        status=status,
        steps=steps
    )


def window_curve(points: List[CurvePoint], start: Optional[date] = None, end: Optional[date] = None) -> List[CurvePoint]:
    """
    Keeps the Start point plus points whose full_date lies in [start, end].
    No start -> no filtering. end=None means open-ended.
    Peaks are not recomputed; they keep the full-history values.
    """
    if start is None:
        return list(points)

    windowed = []
    for p in points:
        if p.is_start:
            windowed.append(p)
            continue
        if p.full_date is None or p.full_date < start:
            continue
        if end is not None and p.full_date > end:
            continue
        windowed.append(p)
    return windowed


def calculate_drawdown_series(points: List[CurvePoint]) -> List[DrawdownPoint]:
    """ Projects curve points to (label, dd%, full date). """
    return [DrawdownPoint(label=p.label, dd_pct=p.dd_pct or 0.0, full_date=p.full_date) for p in points]


def calculate_max_drawdown(drawdowns: List[DrawdownPoint]) -> float:
    """ Most negative dd% in the series, 0.0 if empty. """
    if not drawdowns:
        return 0.0
    return min(d.dd_pct for d in drawdowns)
