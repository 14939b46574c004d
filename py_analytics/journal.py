"""
py_analytics/journal.py
Full analysis pipeline for one view of the journal.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from py_journal.config import JournalConfig
from py_journal.objects import JournalSnapshot
from py_financial_math.models import Streaks
from py_financial_math.periods import Granularity
from py_financial_math.streaks import calculate_streaks

from .calendar import CalendarAnalyzer
from .engine import MetricsEngine
from .filters import TimeRange, resolve_window, scope_to_accounts, filter_by_tags, filter_by_window, journal_today
from .models import JournalReport, MetricsResult, RiskAlerts

logger = logging.getLogger("journal.analyzer")


@dataclass
class JournalView:
    """ What the user is looking at: bucket size, window and tag filters. """
    granularity: Union[str, Granularity] = Granularity.DAILY
    lang: Optional[str] = None
    time_range: Union[str, TimeRange] = TimeRange.ALL
    custom_start: Optional[str] = None
    custom_end: Optional[str] = None
    strategies: List[str] = field(default_factory=list)
    emotions: List[str] = field(default_factory=list)


class JournalAnalyzer:
    """
    Scope -> filter -> metrics -> streaks -> calendar -> alerts.

    Metrics run on the tag-filtered full history (the window only trims the
    displayed curve); streaks and the calendar use the trades inside the window.
    """

    def __init__(self, config: Optional[JournalConfig] = None):
        self.config = config or JournalConfig()
        self.engine = MetricsEngine(self.config)
        self.calendar = CalendarAnalyzer()

    def analyze(self, snapshot: JournalSnapshot, view: Optional[JournalView] = None, today: Optional[date] = None) -> JournalReport:
        view = view or JournalView(granularity=self.config.granularity)
        today = today or journal_today(self.config.timezone)

        # 1. Window
        start, end = resolve_window(view.time_range, today, view.custom_start, view.custom_end)

        # 2. Accounts and tags
        in_accounts = scope_to_accounts(snapshot.trades, snapshot.active_account_ids)
        tagged = filter_by_tags(in_accounts, view.strategies, view.emotions)

        # 3. Metrics
        metrics = self.engine.compute(
            tagged, snapshot.accounts, snapshot.active_account_ids,
            view.granularity, view.lang, start, end, today
        )

        # 4. Window-restricted views
        in_window = filter_by_window(tagged, start, end)
        streaks = calculate_streaks(in_window)
        daily_pnl = self.calendar.daily_pnl_map(in_window)

        alerts = self.evaluate_alerts(metrics, streaks)
        if alerts.is_risk_alert:
            logger.info(f"Risk alert: dd={metrics.current_dd:.2f}% loss_streak={streaks.current_loss}")

        return JournalReport(
            metrics=metrics,
            streaks=streaks,
            daily_pnl=daily_pnl,
            alerts=alerts,
            window_start=start,
            window_end=end,
            trade_count=len(in_window)
        )

    def evaluate_alerts(self, metrics: MetricsResult, streaks: Streaks) -> RiskAlerts:
        return RiskAlerts(
            streak_alert=streaks.current_loss >= self.config.max_loss_streak,
            drawdown_alert=abs(metrics.current_dd) >= self.config.dd_threshold
        )

    def strategy_detail(self, snapshot: JournalSnapshot, strategy: str, lang: Optional[str] = None, today: Optional[date] = None) -> MetricsResult:
        return self.engine.strategy_detail(
            snapshot.trades, snapshot.accounts, snapshot.active_account_ids,
            strategy, lang, today or journal_today(self.config.timezone)
        )
