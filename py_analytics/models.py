from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Dict, Any

from py_financial_math.models import CurvePoint, DrawdownPoint, StrategyStat, Streaks, WalkStatus


@dataclass
class MetricsResult:
    """ Output of the metrics engine. Recomputed from scratch on every call. """
    curve: List[CurvePoint]
    drawdown: List[DrawdownPoint]
    baseline_capital: float
    current_eq: float
    eq_change: float
    eq_change_pct: float
    current_dd: float # <= 0
    max_dd: float # <= 0, over the displayed curve
    win_rate: float
    profit_factor: float
    risk_reward: float
    avg_win: float
    avg_loss: float
    sharpe: float
    total_trades: int
    is_peak: bool
    strategy_stats: Dict[str, StrategyStat] = field(default_factory=dict)
    walk_status: WalkStatus = WalkStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "curve": [p.to_dict() for p in self.curve],
            "drawdown": [d.to_dict() for d in self.drawdown],
            "baseline_capital": self.baseline_capital,
            "current_eq": self.current_eq,
            "eq_change": self.eq_change,
            "eq_change_pct": self.eq_change_pct,
            "current_dd": self.current_dd,
            "max_dd": self.max_dd,
            "win_rate": self.win_rate,
            "profit_factor": self.profit_factor,
            "risk_reward": self.risk_reward,
            "avg_win": self.avg_win,
            "avg_loss": self.avg_loss,
            "sharpe": self.sharpe,
            "total_trades": self.total_trades,
            "is_peak": self.is_peak,
            "strategy_stats": {k: v.to_dict() for k, v in self.strategy_stats.items()},
            "walk_status": self.walk_status.value
        }


@dataclass
class MonthlyStats:
    pnl: float = 0.0
    win_rate: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"pnl": self.pnl, "win_rate": self.win_rate, "count": self.count}


@dataclass
class RiskAlerts:
    streak_alert: bool = False
    drawdown_alert: bool = False

    @property
    def is_risk_alert(self) -> bool:
        return self.streak_alert or self.drawdown_alert

    def to_dict(self) -> Dict[str, Any]:
        return {
            "streak_alert": self.streak_alert,
            "drawdown_alert": self.drawdown_alert,
            "is_risk_alert": self.is_risk_alert
        }


@dataclass
class JournalReport:
    """ Unified container for one view of the journal. """
    metrics: MetricsResult
    streaks: Streaks
    daily_pnl: Dict[str, float]
    alerts: RiskAlerts
    window_start: Optional[date] = None
    window_end: Optional[date] = None
    trade_count: int = 0 # Trades inside the window

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics.to_dict(),
            "streaks": self.streaks.to_dict(),
            "daily_pnl": self.daily_pnl,
            "alerts": self.alerts.to_dict(),
            "window_start": self.window_start.isoformat() if self.window_start else None,
            "window_end": self.window_end.isoformat() if self.window_end else None,
            "trade_count": self.trade_count
        }
