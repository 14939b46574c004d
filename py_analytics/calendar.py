"""
py_analytics/calendar.py
Per-day and per-month PnL for the calendar heat-map.
"""
from typing import Dict, List

import pandas as pd

from py_journal.objects import TradeEvent, TRADE_COLUMNS
from .models import MonthlyStats


class CalendarAnalyzer:
    """ Aggregates trades by calendar day and month. """

    def _to_frame(self, trades: List[TradeEvent]) -> pd.DataFrame:
        if not trades:
            return pd.DataFrame(columns=TRADE_COLUMNS)
        return pd.DataFrame([t.to_dict() for t in trades], columns=TRADE_COLUMNS)

    def daily_pnl_map(self, trades: List[TradeEvent]) -> Dict[str, float]:
        """ {date string: summed pnl}. Keys are the literal trade dates. """
        df = self._to_frame(trades)
        if df.empty:
            return {}

        totals = df.groupby("date")["pnl"].sum()
        return {str(k): float(v) for k, v in totals.items()}

    def monthly_stats(self, trades: List[TradeEvent], year: int, month: int) -> MonthlyStats:
        """ PnL, win rate (%) and trade count for one month. """
        df = self._to_frame(trades)
        if df.empty:
            return MonthlyStats()

        # Dates are YYYY-MM-DD strings; match on the year/month prefix
        prefix = f"{year:04d}-{month:02d}-"
        in_month = df[df["date"].astype(str).str.startswith(prefix)]
        count = len(in_month)
        if count == 0:
            return MonthlyStats()

        wins = int((in_month["pnl"] > 0).sum())
        return MonthlyStats(
            pnl=float(in_month["pnl"].sum()),
            win_rate=(wins / count) * 100.0,
            count=count
        )

    def month_days(self, trades: List[TradeEvent], year: int, month: int) -> Dict[str, float]:
        """ Daily map restricted to one month (days without trades omitted). """
        prefix = f"{year:04d}-{month:02d}-"
        return {k: v for k, v in self.daily_pnl_map(trades).items() if k.startswith(prefix)}
