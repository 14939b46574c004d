from typing import Dict, List, Tuple

from py_journal.objects import TradeEvent
from .core import parse_date
from .models import Streaks


def daily_totals(events: List[TradeEvent]) -> List[Tuple[str, float]]:
    """ (date, total pnl) per day, chronological. """
    totals: Dict[str, float] = {}
    for e in events:
        totals[e.date] = totals.get(e.date, 0.0) + e.pnl

    def sort_key(day: str):
        parsed = parse_date(day)
        return (parsed is not None, parsed.toordinal() if parsed else 0, day)

    return [(day, totals[day]) for day in sorted(totals, key=sort_key)]


def calculate_streaks_from_totals(totals: List[float]) -> Streaks:
    """
    best:         longest run of positive days
    current:      positive days counted back from the most recent day
    current_loss: negative days counted back from the most recent day
    """
    best = 0
    run = 0
    for val in totals:
        if val > 0:
            run += 1
            best = max(best, run)
        else:
            run = 0

    current = 0
    for val in reversed(totals):
        if val <= 0:
            break
        current += 1

    current_loss = 0
    for val in reversed(totals):
        if val >= 0:
            break
        current_loss += 1

    return Streaks(best=best, current=current, current_loss=current_loss)


def calculate_streaks(events: List[TradeEvent]) -> Streaks:
    """ Streaks over daily totals (several trades on one day count as one day). """
    return calculate_streaks_from_totals([total for _, total in daily_totals(events)])
