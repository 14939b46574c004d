# Expose key functions for cleaner imports
from .models import CurvePoint, DrawdownPoint, TradeMetrics, StrategyStat, Streaks, WalkResult, WalkStatus
from .core import safe_ratio, parse_date, calculate_pct
from .periods import Granularity, period_key, format_period_label, annualization_factor
from .series import aggregate_daily_pnl, build_equity_curve, window_curve, calculate_drawdown_series, calculate_max_drawdown
from .performance import calculate_trade_metrics, calculate_sharpe_ratio
from .strategy import calculate_strategy_stats
from .streaks import calculate_streaks
