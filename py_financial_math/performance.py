import math
import statistics
from typing import List, Union

from .core import safe_ratio
from .models import TradeMetrics
from .periods import Granularity, annualization_factor


def calculate_trade_metrics(pnl_list: List[float]) -> TradeMetrics:
    """
    Win rate, profit factor, risk/reward and average win/loss.
    Accepts raw PnL values (absolute $). Zero PnL counts as neither win nor loss.
    """
    total = len(pnl_list)
    if total == 0:
        return TradeMetrics(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0, 0, 0)

    wins = [p for p in pnl_list if p > 0]
    losses = [p for p in pnl_list if p < 0]

    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    avg_win = gross_profit / len(wins) if wins else 0.0
    avg_loss = gross_loss / len(losses) if losses else 0.0

    return TradeMetrics(
        winrate=(len(wins) / total) * 100.0,
        # No losses -> 999.0 if anything was won, else 0.0
        profit_factor=safe_ratio(gross_profit, gross_loss),
        risk_reward=safe_ratio(avg_win, avg_loss),
        avg_win=avg_win,
        avg_loss=avg_loss,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        winning_trades=len(wins),
        losing_trades=len(losses),
        total_trades=total
    )


def calculate_sharpe_ratio(period_returns: List[float], granularity: Union[str, Granularity] = Granularity.DAILY) -> float:
    """
    Mean / sample StdDev of period returns, annualized with sqrt(periods per year).
    Needs at least 2 returns; a flat series (StdDev 0) gives 0.0.
    """
    if len(period_returns) < 2:
        return 0.0

    mean_return = statistics.mean(period_returns)
    std_dev = statistics.stdev(period_returns)
    if std_dev <= 0:
        return 0.0

    return (mean_return / std_dev) * math.sqrt(annualization_factor(granularity))
