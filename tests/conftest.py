from __future__ import annotations

from pathlib import Path

import pytest

from album_keys.albums import Album
from album_keys.db import Db, init_db


@pytest.fixture
def db(tmp_path: Path) -> Db:
    db = Db(tmp_path / "albums.sqlite3")
    init_db(db)
    return db


@pytest.fixture
def db_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point get_settings() at a throwaway catalog."""
    path = tmp_path / "env" / "albums.sqlite3"
    monkeypatch.setenv("ALBUM_KEYS_DB_PATH", str(path))
    monkeypatch.delenv("ALBUM_KEYS_MAX_ROUNDS", raising=False)
    monkeypatch.delenv("ALBUM_KEYS_LOG_LEVEL", raising=False)
    return path


def albums_named(*names: str) -> list[Album]:
    return [Album(id=f"album-{i}", name=n) for i, n in enumerate(names)]
