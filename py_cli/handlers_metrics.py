# py_cli/handlers_metrics.py
from typing import List, Dict, Any

from py_journal.objects import JournalSnapshot, SnapshotError, load_snapshot
from py_financial_math.core import parse_date
from py_analytics.journal import JournalAnalyzer, JournalView
from py_analytics.calendar import CalendarAnalyzer
from py_analytics.filters import scope_to_accounts, filter_by_tags
from .models import CLIContext, CommandResponse
from .commands import ICommand, registry


def _load(ctx: CLIContext, p: Dict[str, Any]) -> JournalSnapshot:
    path = p.get("snapshot") or ctx.snapshot_path or ctx.config.snapshot_path
    return load_snapshot(path)


def _view(p: Dict[str, Any], ctx: CLIContext) -> JournalView:
    return JournalView(
        granularity=p.get("granularity", ctx.config.granularity),
        lang=p.get("lang", ctx.config.lang),
        time_range=p.get("time_range", "ALL"),
        custom_start=p.get("start"),
        custom_end=p.get("end"),
        strategies=list(p.get("strategies", [])),
        emotions=list(p.get("emotions", []))
    )


class MetricsCommand(ICommand):
    name = "metrics"
    description = "Equity curve, drawdown and performance statistics."
    syntax = "metrics [json_payload]"

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        try:
            snapshot = _load(ctx, payload)
            view = _view(payload, ctx)
            report = JournalAnalyzer(ctx.config).analyze(snapshot, view, today=parse_date(payload.get("today")))
        except SnapshotError as e:
            return CommandResponse(False, str(e), error_code="SNAPSHOT_ERROR")
        except ValueError as e:
            return CommandResponse(False, f"Invalid arguments: {e}", error_code="INVALID_ARGS")

        m = report.metrics
        message = (f"Equity {m.current_eq:,.2f} ({m.eq_change_pct:+.2f}%), "
                   f"DD {m.current_dd:.2f}%, {m.total_trades} trades")
        if report.alerts.is_risk_alert:
            message += " ⚠ RISK ALERT"
        return CommandResponse(True, message=message, payload=report.to_dict())


class StrategiesCommand(ICommand):
    name = "strategies"
    description = "Per-strategy PnL, win rate and drawdown (% of account capital)."
    syntax = "strategies [json_payload]"

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        try:
            snapshot = _load(ctx, payload)
        except SnapshotError as e:
            return CommandResponse(False, str(e), error_code="SNAPSHOT_ERROR")

        analyzer = JournalAnalyzer(ctx.config)
        today = parse_date(payload.get("today"))
        detail = payload.get("strategy")
        if detail:
            result = analyzer.strategy_detail(snapshot, detail, payload.get("lang"), today=today)
            return CommandResponse(True, message=f"Strategy detail: {detail}", payload=result.to_dict())

        try:
            report = analyzer.analyze(snapshot, _view(payload, ctx), today=today)
        except ValueError as e:
            return CommandResponse(False, f"Invalid arguments: {e}", error_code="INVALID_ARGS")
        stats = report.metrics.strategy_stats

        # Best performing first
        rows = sorted(stats.items(), key=lambda kv: kv[1].pnl, reverse=True)
        result = {"strategies": [dict(name=name, **stat.to_dict()) for name, stat in rows]}
        return CommandResponse(True, message=f"{len(rows)} strategies", payload=result)


class StreaksCommand(ICommand):
    name = "streaks"
    description = "Best and current winning-day streaks, current losing streak."
    syntax = "streaks [json_payload]"

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        try:
            snapshot = _load(ctx, payload)
            report = JournalAnalyzer(ctx.config).analyze(snapshot, _view(payload, ctx), today=parse_date(payload.get("today")))
        except SnapshotError as e:
            return CommandResponse(False, str(e), error_code="SNAPSHOT_ERROR")
        except ValueError as e:
            return CommandResponse(False, f"Invalid arguments: {e}", error_code="INVALID_ARGS")

        s = report.streaks
        result = s.to_dict()
        result["streak_alert"] = report.alerts.streak_alert
        return CommandResponse(True, message=f"Best {s.best}, current {s.current}, losing {s.current_loss}", payload=result)


class CalendarCommand(ICommand):
    name = "calendar"
    description = "Daily PnL and monthly statistics for one month."
    syntax = "calendar <YYYY-MM> [json_payload]"

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        if not args:
            return CommandResponse(False, "Usage: calendar <YYYY-MM> [json_payload]", error_code="INVALID_ARGS")

        try:
            year_str, month_str = args[0].split("-")
            year, month = int(year_str), int(month_str)
            if not 1 <= month <= 12:
                raise ValueError(month)
        except ValueError:
            return CommandResponse(False, f"Invalid month: {args[0]}", error_code="INVALID_ARGS")

        try:
            snapshot = _load(ctx, payload)
        except SnapshotError as e:
            return CommandResponse(False, str(e), error_code="SNAPSHOT_ERROR")

        trades = scope_to_accounts(snapshot.trades, snapshot.active_account_ids)
        trades = filter_by_tags(trades, payload.get("strategies"), payload.get("emotions"))

        analyzer = CalendarAnalyzer()
        stats = analyzer.monthly_stats(trades, year, month)
        result = {
            "month": f"{year:04d}-{month:02d}",
            "days": analyzer.month_days(trades, year, month),
            "stats": stats.to_dict()
        }
        return CommandResponse(True, message=f"{result['month']}: {stats.count} trades, PnL {stats.pnl:+.2f}", payload=result)


class HelpCommand(ICommand):
    name = "help"
    description = "Lists available commands."
    syntax = "help"

    def execute(self, ctx: CLIContext, args: List[str], payload: Dict[str, Any]) -> CommandResponse:
        return CommandResponse(True, message="Available commands", payload={"commands": registry.describe()})


# Register
registry.register(MetricsCommand(), aliases=["stats"])
registry.register(StrategiesCommand())
registry.register(StreaksCommand())
registry.register(CalendarCommand(), aliases=["cal"])
registry.register(HelpCommand(), aliases=["?"])
