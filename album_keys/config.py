from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    db_path: Path
    max_rounds: int
    log_level: str


def _positive_int(raw: str, *, name: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got '{raw}'.") from e
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}.")
    return value


def get_settings() -> Settings:
    db_path = Path(os.environ.get("ALBUM_KEYS_DB_PATH", "data/album_keys.sqlite3"))
    max_rounds = _positive_int(os.environ.get("ALBUM_KEYS_MAX_ROUNDS", "10"), name="ALBUM_KEYS_MAX_ROUNDS")
    log_level = os.environ.get("ALBUM_KEYS_LOG_LEVEL", "WARNING").upper()
    return Settings(db_path=db_path, max_rounds=max_rounds, log_level=log_level)
