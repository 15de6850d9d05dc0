from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _snapshot_path_from_env() -> Path | None:
    raw = os.getenv("LEDGER_SNAPSHOT_PATH", "").strip()
    return Path(raw) if raw else None


@dataclass(frozen=True)
class LedgerConfig:
    admin: str = os.getenv("LEDGER_ADMIN", "admin")
    snapshot_path: Path | None = _snapshot_path_from_env()
    rating_min: int = 1
    rating_max: int = 10


DEFAULT_LEDGER_CONFIG = LedgerConfig()
