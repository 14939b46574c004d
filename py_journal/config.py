"""
py_journal/config.py
Loads journal settings from config/journal_config.json.
"""
import os
import json
import logging
from dataclasses import dataclass, fields

logger = logging.getLogger("journal.config")

GRANULARITIES = ("daily", "weekly", "monthly", "quarterly", "yearly")
LANGS = ("zh", "en")


@dataclass
class JournalConfig:
    # Baseline equity used when the active accounts hold no capital.
    # Kept at 100k for compatibility with existing journals.
    fallback_capital: float = 100000.0
    max_walk_days: int = 5000
    timezone: str = "Asia/Taipei"
    lang: str = "zh"
    granularity: str = "daily"

    # Risk alert thresholds
    dd_threshold: float = 20.0 # % below peak
    max_loss_streak: int = 3 # losing days in a row

    log_dir: str = "logs"
    snapshot_path: str = "data/journal.json"

    def validate(self) -> bool:
        """Returns True if all values are usable by the engine."""
        return all([
            self.fallback_capital > 0,
            self.max_walk_days > 0,
            self.granularity in GRANULARITIES,
            self.lang in LANGS,
        ])


def load_config(config_path: str = "config/journal_config.json") -> JournalConfig:
    """
    Loads the journal configuration from a JSON file.
    Missing file or invalid JSON falls back to defaults; unknown keys are ignored.
    """
    if not os.path.exists(config_path):
        return JournalConfig()

    try:
        with open(config_path, "r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.error(f"[Config] Error reading {config_path}: {e}")
        return JournalConfig()

    if not isinstance(data, dict):
        logger.error(f"[Config] Expected a JSON object in {config_path}")
        return JournalConfig()

    known = {f.name for f in fields(JournalConfig)}
    return JournalConfig(**{k: v for k, v in data.items() if k in known})
