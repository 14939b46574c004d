"""
py_journal/objects.py
Snapshot objects handed to the metrics engine by the data layer.
"""
import json
import math
import os
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any

import pandas as pd

MAIN_ACCOUNT_ID = "main"
DEFAULT_INITIAL_CAPITAL = 100000.0

TRADE_COLUMNS = ["id", "date", "pnl", "strategy", "emotion", "account_id"]


class SnapshotError(ValueError):
    """ Raised when a snapshot document cannot be read or parsed. """


def coerce_float(value: Any) -> float:
    """ None, NaN and non-numeric input count as 0.0. """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


@dataclass(frozen=True)
class TradeEvent:
    """ One realized PnL event. The date is kept as the literal YYYY-MM-DD string. """
    id: str
    date: str
    pnl: float
    strategy: Optional[str] = None
    emotion: Optional[str] = None
    account_id: str = MAIN_ACCOUNT_ID
    note: Optional[str] = None
    timestamp: Optional[str] = None # ISO string, only used to order trades within a day

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'TradeEvent':
        return TradeEvent(
            id=str(data.get("id", "")),
            date=str(data.get("date", "")),
            pnl=coerce_float(data.get("pnl")),
            strategy=data.get("strategy") or None,
            emotion=data.get("emotion") or None,
            account_id=data.get("account_id") or data.get("portfolioId") or MAIN_ACCOUNT_ID,
            note=data.get("note") or None,
            timestamp=data.get("timestamp") or None
        )


@dataclass(frozen=True)
class Account:
    """ A capital pool ("portfolio"). """
    id: str
    name: str
    initial_capital: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Account':
        initial = data.get("initial_capital", data.get("initialCapital"))
        return Account(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            initial_capital=max(coerce_float(initial), 0.0)
        )


def default_account() -> Account:
    return Account(MAIN_ACCOUNT_ID, "Main Account", DEFAULT_INITIAL_CAPITAL)


@dataclass
class JournalSnapshot:
    """
    In-memory snapshot of the journal: every trade, every account,
    and the ids of the accounts currently selected by the user.
    """
    trades: List[TradeEvent] = field(default_factory=list)
    accounts: List[Account] = field(default_factory=lambda: [default_account()])
    active_account_ids: List[str] = field(default_factory=lambda: [MAIN_ACCOUNT_ID])

    @property
    def trades_df(self) -> pd.DataFrame:
        """ Trades as a DataFrame. An empty snapshot keeps the columns. """
        if not self.trades:
            return pd.DataFrame(columns=TRADE_COLUMNS)
        rows = [{col: getattr(t, col) for col in TRADE_COLUMNS} for t in self.trades]
        return pd.DataFrame(rows, columns=TRADE_COLUMNS)

    @property
    def strategies(self) -> List[str]:
        return sorted({t.strategy for t in self.trades if t.strategy})

    @property
    def emotions(self) -> List[str]:
        return sorted({t.emotion for t in self.trades if t.emotion})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trades": [t.to_dict() for t in self.trades],
            "accounts": [a.to_dict() for a in self.accounts],
            "active_account_ids": list(self.active_account_ids)
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'JournalSnapshot':
        accounts = [Account.from_dict(a) for a in data.get("accounts", [])]
        if not accounts:
            accounts = [default_account()]

        # Missing key -> main account; an explicit [] selects every trade
        active_ids = data.get("active_account_ids")
        if active_ids is None:
            active_ids = [MAIN_ACCOUNT_ID]

        return JournalSnapshot(
            trades=[TradeEvent.from_dict(t) for t in data.get("trades", [])],
            accounts=accounts,
            active_account_ids=list(active_ids)
        )


def load_snapshot(path: str) -> JournalSnapshot:
    """
    Reads a snapshot document written by the data layer.
    Raises SnapshotError if the file is missing or malformed.
    """
    if not os.path.exists(path):
        raise SnapshotError(f"Snapshot file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return JournalSnapshot.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        raise SnapshotError(f"Invalid snapshot {path}: {e}") from e
