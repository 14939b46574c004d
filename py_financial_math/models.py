from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import List, Optional, Dict, Any


@dataclass
class CurvePoint:
    """ One emitted bucket of the equity curve (or the synthetic Start point). """
    period_key: str
    label: str
    full_date: Optional[date] # Last walked day of the bucket
    equity: float
    peak: float
    pnl: float # Bucket total
    cumulative_pnl: float
    is_new_peak: bool
    dd_amt: float # <= 0
    dd_pct: float # <= 0, % of peak
    account_pnl: Dict[str, float] = field(default_factory=dict)
    is_start: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["full_date"] = self.full_date.isoformat() if self.full_date else None
        return d


@dataclass
class DrawdownPoint:
    label: str
    dd_pct: float
    full_date: Optional[date]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "dd_pct": self.dd_pct,
            "full_date": self.full_date.isoformat() if self.full_date else None
        }


class WalkStatus(Enum):
    OK = "ok"
    TRUNCATED = "truncated"


@dataclass
class WalkResult:
    """ Outcome of the day-by-day equity walk. """
    points: List[CurvePoint]
    period_returns: List[float]
    status: WalkStatus = WalkStatus.OK
    steps: int = 0

    @property
    def truncated(self) -> bool:
        return self.status == WalkStatus.TRUNCATED


@dataclass
class TradeMetrics:
    winrate: float # %
    profit_factor: float
    risk_reward: float
    avg_win: float
    avg_loss: float # Magnitude
    gross_profit: float
    gross_loss: float
    winning_trades: int
    losing_trades: int
    total_trades: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StrategyStat:
    pnl: float
    trades: int
    win_rate: float
    mdd_pct: float # <= 0, % of account baseline
    cur_dd_pct: float # <= 0, % of account baseline
    is_new_high: bool
    risk_reward: float
    avg_win: float
    avg_loss: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Streaks:
    best: int = 0
    current: int = 0
    current_loss: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
