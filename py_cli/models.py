"""
py_cli/models.py
Data structures (DTOs/Enums) for the CLI context.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional

from py_journal.config import JournalConfig


class CLIMode(Enum):
    HUMAN = "HUMAN"
    BOT = "BOT"


@dataclass
class CLIContext:
    mode: CLIMode
    config: JournalConfig = field(default_factory=JournalConfig)
    snapshot_path: Optional[str] = None # Overrides config.snapshot_path


@dataclass
class CommandResponse:
    success: bool
    message: str = ""     # Displayed to humans
    payload: Optional[Dict[str, Any]] = None # Serialized for bots (JSON)
    error_code: str = "OK"
