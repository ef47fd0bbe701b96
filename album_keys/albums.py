from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

AlbumId = str


@dataclass(frozen=True)
class Album:
    id: AlbumId
    name: str
    asset_count: int = 0


class AlbumRecord(BaseModel):
    """One entry of an exported album list (Immich `/api/albums` shape)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, validation_alias=AliasChoices("albumName", "name"))
    asset_count: int = Field(default=0, ge=0, validation_alias=AliasChoices("assetCount", "asset_count"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: object) -> object:
        # Numeric ids show up in hand-written exports.
        return str(v) if isinstance(v, int) else v

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    def to_album(self) -> Album:
        return Album(id=self.id, name=self.name, asset_count=self.asset_count)


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Album name must not be empty.")
    return cleaned


def _row_to_album(row: sqlite3.Row) -> Album:
    return Album(id=row["id"], name=row["name"], asset_count=row["asset_count"])


def add_album(conn: sqlite3.Connection, *, album_id: AlbumId, name: str, asset_count: int = 0) -> Album:
    if asset_count < 0:
        raise ValueError("asset_count must be >= 0.")
    try:
        cur = conn.execute(
            "INSERT INTO albums (id, name, asset_count) VALUES (?, ?, ?) RETURNING id, name, asset_count",
            (album_id, _clean_name(name), asset_count),
        )
    except sqlite3.IntegrityError as e:
        raise ValueError(f"An album with id '{album_id}' already exists.") from e
    row = cur.fetchone()
    assert row is not None
    return _row_to_album(row)


def get_album(conn: sqlite3.Connection, album_id: AlbumId) -> Album | None:
    row = conn.execute("SELECT id, name, asset_count FROM albums WHERE id = ?", (album_id,)).fetchone()
    return None if row is None else _row_to_album(row)


def list_albums(conn: sqlite3.Connection) -> list[Album]:
    """All albums, ordered by name then id (the allocator's input order)."""
    rows = conn.execute("SELECT id, name, asset_count FROM albums ORDER BY name ASC, id ASC").fetchall()
    return [_row_to_album(r) for r in rows]


def rename_album(conn: sqlite3.Connection, album_id: AlbumId, name: str) -> Album:
    cur = conn.execute(
        "UPDATE albums SET name = ? WHERE id = ? RETURNING id, name, asset_count",
        (_clean_name(name), album_id),
    )
    row = cur.fetchone()
    if row is None:
        raise ValueError(f"No album with id '{album_id}'.")
    return _row_to_album(row)


def remove_album(conn: sqlite3.Connection, album_id: AlbumId) -> None:
    cur = conn.execute("DELETE FROM albums WHERE id = ?", (album_id,))
    if cur.rowcount == 0:
        raise ValueError(f"No album with id '{album_id}'.")


def replace_albums(conn: sqlite3.Connection, albums: list[Album]) -> int:
    """Swap the whole catalog for a fresh snapshot. Returns the album count."""
    conn.execute("DELETE FROM albums")
    conn.executemany(
        "INSERT INTO albums (id, name, asset_count) VALUES (?, ?, ?)",
        [(a.id, _clean_name(a.name), a.asset_count) for a in albums],
    )
    return len(albums)


def load_albums_json(path: Path) -> list[Album]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e

    if isinstance(raw, dict) and "albums" in raw:
        raw = raw["albums"]
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a list of albums.")

    albums: list[Album] = []
    seen: set[str] = set()
    for i, item in enumerate(raw):
        try:
            record = AlbumRecord.model_validate(item)
        except ValidationError as e:
            raise ValueError(f"Invalid album at index {i}: {e}") from e
        if record.id in seen:
            raise ValueError(f"Duplicate album id '{record.id}' at index {i}.")
        seen.add(record.id)
        albums.append(record.to_album())
    return albums
