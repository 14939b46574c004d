"""
py_analytics/engine.py
Equity / drawdown / performance metrics for a journal snapshot.

Pure computation: the caller hands in a snapshot of trades and accounts and gets
a fresh MetricsResult back. No state is kept between calls, so the engine can be
re-run on every snapshot change and used from several threads at once.
"""
import logging
from datetime import date
from typing import List, Optional, Iterable, Union

from py_journal.config import JournalConfig
from py_journal.objects import TradeEvent, Account
from py_financial_math.core import parse_date
from py_financial_math.periods import Granularity
from py_financial_math.series import build_equity_curve, window_curve, calculate_drawdown_series, calculate_max_drawdown
from py_financial_math.performance import calculate_trade_metrics, calculate_sharpe_ratio
from py_financial_math.strategy import calculate_strategy_stats

from .filters import scope_to_accounts, baseline_capital, journal_today
from .models import MetricsResult

logger = logging.getLogger("journal.engine")

PEAK_TOLERANCE_PCT = 0.001


class MetricsEngine:

    def __init__(self, config: Optional[JournalConfig] = None):
        self.config = config or JournalConfig()

    def safe_capital(self, accounts: Iterable[Account], active_account_ids: Iterable[str]) -> float:
        """ Baseline equity: active capital, or the configured fallback if that is <= 0. """
        capital = baseline_capital(accounts, active_account_ids)
        return capital if capital > 0 else self.config.fallback_capital

    def compute(
        self,
        events: List[TradeEvent],
        accounts: List[Account],
        active_account_ids: List[str],
        granularity: Union[str, Granularity] = Granularity.DAILY,
        lang: Optional[str] = None,
        start: Union[str, date, None] = None,
        end: Union[str, date, None] = None,
        today: Optional[date] = None
    ) -> MetricsResult:
        freq = Granularity.coerce(granularity)
        lang = lang or self.config.lang
        capital = self.safe_capital(accounts, active_account_ids)
        trades = scope_to_accounts(events, active_account_ids)

        if not trades:
            return self._empty_result(capital)

        today = today or journal_today(self.config.timezone)

        # 1. Equity walk over the full history
        walk = build_equity_curve(trades, capital, freq, lang, today, self.config.max_walk_days)
        last_point = walk.points[-1]

        # 2. Display window (does not touch peak history)
        display_curve = window_curve(walk.points, parse_date(start), parse_date(end))
        drawdown = calculate_drawdown_series(display_curve)

        # 3. Trade statistics on the unwindowed trades
        trade_metrics = calculate_trade_metrics([t.pnl for t in trades])
        sharpe = calculate_sharpe_ratio(walk.period_returns, freq)

        current_eq = last_point.equity
        eq_change = current_eq - capital
        current_dd = last_point.dd_pct

        logger.debug(f"Metrics: {len(trades)} trades, {len(walk.points)} points, status={walk.status.value}")

        return MetricsResult(
            curve=display_curve,
            drawdown=drawdown,
            baseline_capital=capital,
            current_eq=current_eq,
            eq_change=eq_change,
            eq_change_pct=(eq_change / capital) * 100.0,
            current_dd=current_dd,
            max_dd=calculate_max_drawdown(drawdown),
            win_rate=trade_metrics.winrate,
            profit_factor=trade_metrics.profit_factor,
            risk_reward=trade_metrics.risk_reward,
            avg_win=trade_metrics.avg_win,
            avg_loss=trade_metrics.avg_loss,
            sharpe=sharpe,
            total_trades=trade_metrics.total_trades,
            is_peak=abs(current_dd) < PEAK_TOLERANCE_PCT,
            strategy_stats=calculate_strategy_stats(trades, capital),
            walk_status=walk.status
        )

    def strategy_detail(
        self,
        events: List[TradeEvent],
        accounts: List[Account],
        active_account_ids: List[str],
        strategy: str,
        lang: Optional[str] = None,
        today: Optional[date] = None
    ) -> MetricsResult:
        """ Full daily metrics for the trades of a single strategy. """
        strategy_trades = [e for e in events if e.strategy == strategy]
        return self.compute(strategy_trades, accounts, active_account_ids, Granularity.DAILY, lang, today=today)

    def _empty_result(self, capital: float) -> MetricsResult:
        return MetricsResult(
            curve=[],
            drawdown=[],
            baseline_capital=capital,
            current_eq=capital,
            eq_change=0.0,
            eq_change_pct=0.0,
            current_dd=0.0,
            max_dd=0.0,
            win_rate=0.0,
            profit_factor=0.0,
            risk_reward=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            sharpe=0.0,
            total_trades=0,
            is_peak=True
        )


def calculate_metrics(
    events: List[TradeEvent],
    accounts: List[Account],
    active_account_ids: List[str],
    granularity: Union[str, Granularity] = Granularity.DAILY,
    lang: Optional[str] = None,
    start: Union[str, date, None] = None,
    end: Union[str, date, None] = None,
    today: Optional[date] = None,
    config: Optional[JournalConfig] = None
) -> MetricsResult:
    """ Functional shortcut for MetricsEngine(config).compute(...). """
    return MetricsEngine(config).compute(events, accounts, active_account_ids, granularity, lang, start, end, today)
