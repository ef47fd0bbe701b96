"""HTTP surface over the album catalog and its keybinding table."""

from __future__ import annotations

from typing import Literal

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from album_keys.albums import Album, list_albums
from album_keys.allocator import KeybindingTable, allocate
from album_keys.config import get_settings
from album_keys.db import Db, init_db
from album_keys.logs import configure_logging
from album_keys.validator import ExactMatch, ValidContinuation, next_available_characters, validate


class KeypressRequest(BaseModel):
    partial: str = ""
    key: str = Field(min_length=1, max_length=1)


class KeypressResponse(BaseModel):
    kind: Literal["exact_match", "valid_continuation", "invalid"]
    album_id: str | None = None
    partial: str
    char: str | None = None
    next: list[str]


class AlbumOut(BaseModel):
    id: str
    name: str
    asset_count: int
    keybinding: str | None


def _db() -> Db:
    settings = get_settings()
    return Db(settings.db_path)


def _snapshot() -> tuple[list[Album], KeybindingTable]:
    db = _db()
    init_db(db)
    with db.connect() as conn:
        albums = list_albums(conn)
    return albums, allocate(albums, max_rounds=get_settings().max_rounds)


app = FastAPI(title="Album Keys", description="Keyboard shortcuts for photo albums")


@app.get("/api/health")
async def api_health() -> dict:
    """Health check; verifies API is reachable."""
    return {"status": "ok"}


@app.get("/api/albums", response_model=list[AlbumOut])
async def api_albums() -> list[AlbumOut]:
    """Albums with their keybinding (null when the album has none)."""
    albums, table = _snapshot()
    return [
        AlbumOut(id=a.id, name=a.name, asset_count=a.asset_count, keybinding=table.get(a.id))
        for a in albums
    ]


@app.get("/api/keybindings")
async def api_keybindings() -> dict[str, str]:
    _, table = _snapshot()
    return dict(table)


@app.get("/api/keybindings/next")
async def api_next(partial: str = "") -> list[str]:
    """Characters that can follow `partial`."""
    _, table = _snapshot()
    return next_available_characters(table, partial)


@app.post("/api/keypress", response_model=KeypressResponse)
async def api_keypress(req: KeypressRequest) -> KeypressResponse:
    """Classify one keystroke against the current table."""
    _, table = _snapshot()
    try:
        result = validate(table, req.partial, req.key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(result, ExactMatch):
        return KeypressResponse(
            kind="exact_match",
            album_id=result.album_id,
            partial="",
            next=next_available_characters(table, ""),
        )
    if isinstance(result, ValidContinuation):
        return KeypressResponse(
            kind="valid_continuation",
            partial=result.partial,
            next=next_available_characters(table, result.partial),
        )
    return KeypressResponse(
        kind="invalid",
        partial=req.partial,
        char=result.char,
        next=next_available_characters(table, req.partial),
    )


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "web.server:app",
        host="127.0.0.1",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
