"""
py_financial_math/strategy.py
Per-strategy statistics on each strategy's own cumulative PnL.
"""
from datetime import date
from typing import List, Dict

from py_journal.objects import TradeEvent
from .core import calculate_pct, safe_ratio, parse_date, STRATEGY_RR_CAP
from .models import StrategyStat
from .series import running_drawdowns

NEW_HIGH_TOLERANCE = 0.01


def sort_by_date(events: List[TradeEvent]) -> List[TradeEvent]:
    """ Chronological, stable. Unparseable dates sort first. """
    return sorted(events, key=lambda e: parse_date(e.date) or date.min)


def calculate_strategy_stat(events: List[TradeEvent], baseline: float) -> StrategyStat:
    """
    Statistics for the trades of one strategy.

    Drawdowns are taken on the strategy's cumulative PnL (peak starts at 0)
    but expressed as % of the account baseline, so every strategy is measured
    against the same capital.
    """
    ordered = sort_by_date(events)
    pnls = [e.pnl for e in ordered]
    count = len(pnls)

    cumulative = []
    running = 0.0
    for p in pnls:
        running += p
        cumulative.append(running)

    drawdowns = running_drawdowns(cumulative, initial_peak=0.0)
    total_pnl = cumulative[-1] if cumulative else 0.0
    peak = max([0.0] + cumulative)
    min_dd_amt = min([0.0] + drawdowns)

    wins = [p for p in pnls if p > 0]
    gross_profit = sum(wins)
    gross_loss = abs(sum(p for p in pnls if p < 0))

    # Everything that is not a win counts towards the loss average
    non_wins = count - len(wins)
    avg_win = gross_profit / len(wins) if wins else 0.0
    avg_loss = gross_loss / non_wins if non_wins > 0 else 0.0

    return StrategyStat(
        pnl=total_pnl,
        trades=count,
        win_rate=(len(wins) / count) * 100.0 if count > 0 else 0.0,
        mdd_pct=calculate_pct(min_dd_amt, baseline),
        cur_dd_pct=calculate_pct(total_pnl - peak, baseline),
        is_new_high=count > 0 and total_pnl >= peak - NEW_HIGH_TOLERANCE,
        risk_reward=safe_ratio(avg_win, avg_loss, cap=STRATEGY_RR_CAP),
        avg_win=avg_win,
        avg_loss=avg_loss
    )


def calculate_strategy_stats(events: List[TradeEvent], baseline: float) -> Dict[str, StrategyStat]:
    """ One StrategyStat per distinct non-empty strategy tag. """
    grouped: Dict[str, List[TradeEvent]] = {}
    for e in events:
        if not e.strategy:
            continue
        grouped.setdefault(e.strategy, []).append(e)

    return {name: calculate_strategy_stat(trades, baseline) for name, trades in grouped.items()}
