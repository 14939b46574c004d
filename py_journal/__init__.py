from .objects import TradeEvent, Account, JournalSnapshot, SnapshotError, load_snapshot, MAIN_ACCOUNT_ID
from .config import JournalConfig, load_config
