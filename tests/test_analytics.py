import json
from datetime import date

import pytest

from py_journal.config import JournalConfig
from py_journal.objects import Account, JournalSnapshot
from py_financial_math.models import WalkStatus
from py_financial_math.performance import calculate_sharpe_ratio
from py_financial_math.series import build_equity_curve
from py_analytics.engine import MetricsEngine, calculate_metrics
from py_analytics.filters import (
    TimeRange, resolve_window, months_before, journal_today,
    scope_to_accounts, baseline_capital, filter_by_tags, filter_by_window
)
from py_analytics.journal import JournalAnalyzer, JournalView

from conftest import make_trade


def test_empty_input_returns_baseline():
    accounts = [Account("main", "Main", 50000.0), Account("alt", "Alt", 25000.0)]
    res = calculate_metrics([], accounts, ["main", "alt"], today=date(2024, 1, 5))

    assert res.current_eq == 75000.0
    assert res.curve == []
    assert res.drawdown == []
    assert res.is_peak is True
    assert res.win_rate == 0.0
    assert res.profit_factor == 0.0
    assert res.sharpe == 0.0
    assert res.total_trades == 0


def test_zero_capital_uses_fallback():
    accounts = [Account("main", "Main", 0.0)]
    assert calculate_metrics([], accounts, ["main"]).current_eq == 100000.0

    engine = MetricsEngine(JournalConfig(fallback_capital=50000.0))
    assert engine.safe_capital(accounts, ["main"]) == 50000.0
    # Inactive accounts do not count
    assert engine.safe_capital([Account("alt", "Alt", 9000.0)], ["main"]) == 50000.0


def test_only_active_accounts_are_measured():
    accounts = [Account("main", "Main", 100000.0), Account("alt", "Alt", 50000.0)]
    trades = [
        make_trade("2024-01-02", 500.0),
        make_trade("2024-01-02", 999.0, account_id="alt"),
    ]
    res = calculate_metrics(trades, accounts, ["main"], today=date(2024, 1, 2))

    assert res.baseline_capital == 100000.0
    assert res.total_trades == 1
    assert res.current_eq == 100500.0
    assert res.curve[-1].account_pnl == {"main": 500.0}

    both = calculate_metrics(trades, accounts, ["main", "alt"], today=date(2024, 1, 2))
    assert both.baseline_capital == 150000.0
    assert both.total_trades == 2
    assert both.curve[-1].account_pnl == {"main": 500.0, "alt": 999.0}


def test_summary_statistics(accounts):
    trades = [
        make_trade("2024-01-02", 100.0),
        make_trade("2024-01-03", -50.0),
        make_trade("2024-01-04", 200.0),
    ]
    res = calculate_metrics(trades, accounts, ["main"], today=date(2024, 1, 4))

    assert res.current_eq == 100250.0
    assert res.eq_change == 250.0
    assert abs(res.eq_change_pct - 0.25) < 1e-9
    assert res.profit_factor == 6.0
    assert res.risk_reward == 3.0
    assert abs(res.win_rate - 66.6667) < 0.001
    assert res.is_peak is True
    assert res.current_dd == 0.0
    assert res.walk_status == WalkStatus.OK


def test_profit_factor_saturates(accounts):
    res = calculate_metrics([make_trade("2024-01-02", 100.0)], accounts, ["main"], today=date(2024, 1, 2))
    assert res.profit_factor == 999.0

    res = calculate_metrics([make_trade("2024-01-02", -100.0)], accounts, ["main"], today=date(2024, 1, 2))
    assert res.profit_factor == 0.0
    assert res.is_peak is False
    assert abs(res.current_dd - (-0.1)) < 1e-9


def test_sharpe_uses_walk_returns(accounts):
    trades = [
        make_trade("2024-01-02", 100.0),
        make_trade("2024-01-03", -40.0),
        make_trade("2024-01-05", 300.0),
    ]
    res = calculate_metrics(trades, accounts, ["main"], granularity="daily", today=date(2024, 1, 6))
    walk = build_equity_curve(trades, 100000.0, "daily", "zh", today=date(2024, 1, 6))

    assert res.sharpe != 0.0
    assert abs(res.sharpe - calculate_sharpe_ratio(walk.period_returns, "daily")) < 1e-12


def test_window_trims_display_but_not_history(accounts):
    # -1% drawdown on the 1st, recovered to a new high on the 3rd
    trades = [make_trade("2024-01-01", -1000.0), make_trade("2024-01-03", 2000.0)]

    full = calculate_metrics(trades, accounts, ["main"], today=date(2024, 1, 6))
    assert abs(full.max_dd - (-1.0)) < 1e-9

    res = calculate_metrics(trades, accounts, ["main"], start="2024-01-04", today=date(2024, 1, 6))
    assert res.curve[0].is_start
    assert [p.period_key for p in res.curve[1:]] == ["2024-01-04", "2024-01-05", "2024-01-06"]
    assert all(p.peak == 101000.0 for p in res.curve[1:])
    assert res.max_dd == 0.0
    assert res.current_eq == 101000.0
    # Trade stats ignore the window
    assert res.total_trades == 2


def test_truncated_walk_is_reported(accounts):
    engine = MetricsEngine(JournalConfig(max_walk_days=10))
    res = engine.compute([make_trade("2024-01-01", 100.0)], accounts, ["main"], today=date(2024, 3, 1))

    assert res.walk_status == WalkStatus.TRUNCATED
    assert res.curve[-1].full_date == date(2024, 1, 10)
    assert res.to_dict()["walk_status"] == "truncated"


def test_strategy_stats_normalized_to_capital(accounts):
    trades = [
        make_trade("2024-01-02", 1000.0, strategy="Breakout"),
        make_trade("2024-01-03", 1000.0, strategy="Breakout"),
        make_trade("2024-01-04", -500.0, strategy="Breakout"),
        make_trade("2024-01-04", 50.0),
    ]
    res = calculate_metrics(trades, accounts, ["main"], today=date(2024, 1, 4))

    assert list(res.strategy_stats.keys()) == ["Breakout"]
    assert abs(res.strategy_stats["Breakout"].cur_dd_pct - (-0.5)) < 1e-9


def test_strategy_detail(accounts):
    trades = [
        make_trade("2024-01-02", 300.0, strategy="A"),
        make_trade("2024-01-03", -100.0, strategy="B"),
        make_trade("2024-01-04", 50.0, strategy="A"),
    ]
    engine = MetricsEngine()
    res = engine.strategy_detail(trades, accounts, ["main"], "A", "en", today=date(2024, 1, 4))

    assert res.total_trades == 2
    assert res.current_eq == 100350.0
    assert res.curve[0].label == "Start"

    missing = engine.strategy_detail(trades, accounts, ["main"], "C", today=date(2024, 1, 4))
    assert missing.curve == []
    assert missing.current_eq == 100000.0


def test_result_is_json_serializable(accounts):
    trades = [make_trade("2024-01-02", 100.0, strategy="A")]
    res = calculate_metrics(trades, accounts, ["main"], today=date(2024, 1, 3))
    doc = json.loads(json.dumps(res.to_dict()))

    assert doc["curve"][1]["full_date"] == "2024-01-02"
    assert doc["strategy_stats"]["A"]["trades"] == 1


# --- Filters ---

def test_scope_and_capital():
    trades = [make_trade("2024-01-02", 1.0), make_trade("2024-01-02", 2.0, account_id="alt")]
    assert len(scope_to_accounts(trades, ["alt"])) == 1
    # No selection -> all trades
    assert len(scope_to_accounts(trades, [])) == 2

    accounts = [Account("main", "Main", 100.0), Account("alt", "Alt", 50.0)]
    assert baseline_capital(accounts, ["main", "alt"]) == 150.0
    assert baseline_capital(accounts, ["ghost"]) == 0.0


def test_tag_filters():
    trades = [
        make_trade("2024-01-02", 1.0, strategy="A", emotion="Calm"),
        make_trade("2024-01-02", 2.0, strategy="B", emotion="FOMO"),
        make_trade("2024-01-02", 3.0),
    ]
    assert len(filter_by_tags(trades)) == 3
    assert [t.pnl for t in filter_by_tags(trades, ["A", "B"])] == [1.0, 2.0]
    assert [t.pnl for t in filter_by_tags(trades, emotions=["FOMO"])] == [2.0]
    assert filter_by_tags(trades, ["A"], ["FOMO"]) == []


def test_window_filter():
    trades = [make_trade("2024-01-01", 1.0), make_trade("2024-01-05", 2.0), make_trade("bad", 3.0)]
    assert len(filter_by_window(trades, None, None)) == 3
    assert [t.pnl for t in filter_by_window(trades, date(2024, 1, 2), None)] == [2.0]
    assert [t.pnl for t in filter_by_window(trades, None, date(2024, 1, 3))] == [1.0]


def test_time_range_presets():
    assert resolve_window("ALL", date(2024, 3, 31)) == (None, None)
    assert resolve_window("1M", date(2024, 3, 31)) == (date(2024, 2, 29), None)
    assert resolve_window(TimeRange.THREE_MONTHS, date(2024, 5, 31)) == (date(2024, 2, 29), None)
    assert resolve_window("ytd", date(2024, 6, 15)) == (date(2024, 1, 1), None)
    assert resolve_window("CUSTOM", date(2024, 6, 15), "2024-01-05", "2024-01-10") == (date(2024, 1, 5), date(2024, 1, 10))

    with pytest.raises(ValueError):
        resolve_window("2W", date(2024, 6, 15))


def test_months_before_crosses_year():
    assert months_before(date(2024, 1, 15), 1) == date(2023, 12, 15)
    assert months_before(date(2023, 3, 30), 1) == date(2023, 2, 28)


def test_journal_today_unknown_timezone():
    assert isinstance(journal_today("Not/AZone"), date)
    assert isinstance(journal_today("UTC"), date)


# --- Journal Analyzer ---

def test_analyze_all_time(sample_snapshot, today):
    report = JournalAnalyzer().analyze(sample_snapshot, JournalView(lang="en"), today=today)

    # Alt account trade excluded
    assert report.metrics.total_trades == 3
    assert report.metrics.current_eq == 100600.0
    assert report.trade_count == 3
    assert report.daily_pnl == {"2024-01-02": 500.0, "2024-01-03": 300.0, "2024-01-04": -200.0}

    assert report.streaks.best == 2
    assert report.streaks.current == 0
    assert report.streaks.current_loss == 1
    assert report.alerts.is_risk_alert is False
    assert report.window_start is None


def test_analyze_tag_filters(sample_snapshot, today):
    analyzer = JournalAnalyzer()

    breakout = analyzer.analyze(sample_snapshot, JournalView(strategies=["Breakout"]), today=today)
    assert breakout.metrics.total_trades == 2
    assert breakout.metrics.current_eq == 100300.0

    fomo = analyzer.analyze(sample_snapshot, JournalView(emotions=["FOMO"]), today=today)
    assert fomo.metrics.total_trades == 1
    assert list(fomo.metrics.strategy_stats.keys()) == ["Pullback"]


def test_analyze_custom_window(sample_snapshot, today):
    view = JournalView(time_range="CUSTOM", custom_start="2024-01-03")
    report = JournalAnalyzer().analyze(sample_snapshot, view, today=today)

    assert report.window_start == date(2024, 1, 3)
    assert report.trade_count == 2
    assert report.metrics.total_trades == 3
    assert report.metrics.curve[0].is_start
    assert all(p.full_date >= date(2024, 1, 3) for p in report.metrics.curve[1:])
    assert "2024-01-02" not in report.daily_pnl


def test_risk_alerts():
    snapshot = JournalSnapshot(trades=[
        make_trade("2024-01-02", -100.0),
        make_trade("2024-01-03", -100.0),
        make_trade("2024-01-04", -100.0),
    ])
    report = JournalAnalyzer().analyze(snapshot, today=date(2024, 1, 4))
    assert report.streaks.current_loss == 3
    assert report.alerts.streak_alert is True
    assert report.alerts.drawdown_alert is False
    assert report.to_dict()["alerts"]["is_risk_alert"] is True

    # -0.3% drawdown against a 0.25% threshold
    strict = JournalAnalyzer(JournalConfig(dd_threshold=0.25, max_loss_streak=5))
    report = strict.analyze(snapshot, today=date(2024, 1, 4))
    assert report.alerts.streak_alert is False
    assert report.alerts.drawdown_alert is True


def test_analyzer_strategy_detail(sample_snapshot, today):
    res = JournalAnalyzer().strategy_detail(sample_snapshot, "Breakout", "en", today=today)
    assert res.total_trades == 2
    assert res.current_eq == 100300.0
