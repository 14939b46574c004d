import sys
import os
from datetime import date

import pytest

# Adjust path to find modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from py_journal.objects import TradeEvent, Account, JournalSnapshot


def make_trade(day: str, pnl: float, strategy=None, emotion=None, account_id="main", trade_id=None) -> TradeEvent:
    return TradeEvent(
        id=trade_id or f"{day}-{pnl}",
        date=day,
        pnl=pnl,
        strategy=strategy,
        emotion=emotion,
        account_id=account_id
    )


@pytest.fixture
def accounts():
    return [Account("main", "Main Account", 100000.0)]


@pytest.fixture
def sample_snapshot():
    # Main: +500, +300, -200 over three days; Alt account is not active
    trades = [
        make_trade("2024-01-02", 500.0, strategy="Breakout", emotion="Calm"),
        make_trade("2024-01-03", 300.0, strategy="Pullback", emotion="FOMO"),
        make_trade("2024-01-04", -200.0, strategy="Breakout", emotion="Calm"),
        make_trade("2024-01-04", 999.0, strategy="Breakout", account_id="alt"),
    ]
    return JournalSnapshot(
        trades=trades,
        accounts=[Account("main", "Main Account", 100000.0), Account("alt", "Alt", 50000.0)],
        active_account_ids=["main"]
    )


@pytest.fixture
def today():
    return date(2024, 1, 5)
