from datetime import date, datetime
from typing import Optional, Union

# Saturation values used instead of inf/NaN when a ratio has no denominator
RATIO_CAP = 999.0
STRATEGY_RR_CAP = 10.0


def safe_ratio(numerator: float, denominator: float, cap: float = RATIO_CAP) -> float:
    """
    numerator / denominator, never dividing by zero.
    Zero denominator -> cap if numerator > 0 else 0.0.
    """
    if denominator == 0:
        return cap if numerator > 0 else 0.0
    return numerator / denominator


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """
    Parses a calendar date. Accepts date/datetime objects and ISO strings
    (a time part after the date is ignored). Returns None if unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def calculate_pct(amount: float, base: float) -> float:
    """ amount as % of base, 0.0 for a non-positive base. """
    if base <= 0:
        return 0.0
    return (amount / base) * 100.0
