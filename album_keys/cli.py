from __future__ import annotations

import uuid
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .albums import Album, add_album, get_album, list_albums, load_albums_json, remove_album, rename_album, replace_albums
from .allocator import KeybindingTable, allocate
from .config import get_settings
from .db import Db, init_db
from .logs import configure_logging
from .validator import ExactMatch, Invalid, KeybindingValidator, ValidationResult, ValidContinuation


app = typer.Typer(add_completion=False, help="Assign prefix-free keyboard shortcuts to photo albums.")
console = Console()

BACKSPACE_KEYS = ("\x7f", "\x08")
ESCAPE_KEY = "\x1b"
LEAVE_KEYS = ("\r", "\n", "\x03", "\x04")


@app.callback()
def main() -> None:
    configure_logging(get_settings().log_level)


def _db() -> Db:
    s = get_settings()
    return Db(s.db_path)


def _load() -> tuple[list[Album], KeybindingTable]:
    db = _db()
    init_db(db)
    with db.connect() as conn:
        albums = list_albums(conn)
    return albums, allocate(albums, max_rounds=get_settings().max_rounds)


def _hint(chars: list[str]) -> str:
    return " ".join(chars) if chars else "[dim](none)[/dim]"


def _describe(result: ValidationResult, names: dict[str, str]) -> str:
    if isinstance(result, ExactMatch):
        return f"[green]match[/green] [bold]{escape(names.get(result.album_id, result.album_id))}[/bold]"
    if isinstance(result, ValidContinuation):
        return f"[cyan]continue[/cyan] '{escape(result.partial)}'"
    assert isinstance(result, Invalid)
    return f"[red]invalid[/red] {escape(repr(result.char))}"


@app.command()
def init() -> None:
    """Initialize the SQLite album catalog."""
    db = _db()
    init_db(db)
    console.print(f"[green]Initialized[/green] {db.path}")


@app.command()
def add(
    name: str,
    album_id: str = typer.Option("", "--id", help="Album id (default: a new UUID)"),
    assets: int = typer.Option(0, "--assets", min=0, help="Number of assets in the album"),
) -> None:
    """Add an album to the catalog."""
    db = _db()
    init_db(db)
    try:
        with db.connect() as conn:
            album = add_album(conn, album_id=album_id or str(uuid.uuid4()), name=name, asset_count=assets)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    console.print(f"[green]Added[/green] {escape(album.name)} [dim]({album.id})[/dim]")


@app.command()
def rename(album_id: str, name: str) -> None:
    """Rename an album. Keybindings are recomputed for the whole catalog."""
    db = _db()
    init_db(db)
    try:
        with db.connect() as conn:
            album = rename_album(conn, album_id, name)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    console.print(f"[green]Renamed[/green] {album.id} to {escape(album.name)}")


@app.command()
def remove(album_id: str) -> None:
    """Remove an album from the catalog."""
    db = _db()
    init_db(db)
    try:
        with db.connect() as conn:
            album = get_album(conn, album_id)
            remove_album(conn, album_id)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    assert album is not None
    console.print(f"[green]Removed[/green] {escape(album.name)}")


@app.command("import")
def import_cmd(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON album list (e.g. Immich /api/albums)"),
) -> None:
    """Replace the catalog with an exported album list."""
    try:
        albums = load_albums_json(path)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    db = _db()
    init_db(db)
    with db.connect() as conn:
        count = replace_albums(conn, albums)
    console.print(f"[green]Imported[/green] {count} albums from {path}")


@app.command("list")
def list_cmd() -> None:
    """List albums with their keybindings."""
    albums, table = _load()
    if not albums:
        console.print("[yellow]No albums stored yet.[/yellow]")
        raise typer.Exit(code=0)

    out = Table(title="Albums")
    out.add_column("Key", style="cyan")
    out.add_column("Album", style="bold")
    out.add_column("Assets", justify="right")
    out.add_column("Id", style="dim")
    for a in sorted(albums, key=lambda a: (table.get(a.id) is None, table.get(a.id) or "", a.name)):
        out.add_row(table.get(a.id, ""), escape(a.name), str(a.asset_count), a.id)
    console.print(out)

    if table.unassigned:
        names = {a.id: a.name for a in albums}
        missing = ", ".join(escape(names[a]) for a in table.unassigned)
        console.print(f"[yellow]No keybinding[/yellow] (use search): {missing}")


@app.command()
def press(
    keys: str = typer.Argument(..., help="Keystrokes to feed, one character at a time ('-' is backspace)"),
) -> None:
    """Replay keystrokes in keybinding mode and show how each one is read."""
    albums, table = _load()
    names = {a.id: a.name for a in albums}
    session = KeybindingValidator(table)

    for ch in keys:
        if ch == "-":
            partial = session.backspace()
            console.print(f"[dim]backspace[/dim] '{escape(partial)}'  next: {_hint(session.hints())}")
            continue
        result = session.press(ch)
        console.print(f"{escape(repr(ch))}: {_describe(result, names)}  next: {_hint(session.hints())}")


@app.command("type")
def type_cmd() -> None:
    """
    Interactive keybinding mode.
    Type a keybinding to pick an album; Backspace deletes, Escape clears, Enter leaves.
    """
    albums, table = _load()
    if not table:
        console.print("[yellow]No keybindings available.[/yellow]")
        raise typer.Exit(code=0)

    names = {a.id: a.name for a in albums}
    session = KeybindingValidator(table)
    console.print(f"[bold]Keybinding mode[/bold]  next: {_hint(session.hints())}")

    while True:
        ch = click.getchar()
        if ch in LEAVE_KEYS:
            session.reset()
            break
        if ch == ESCAPE_KEY:
            session.escape()
            console.print(f"[dim]cleared[/dim]  next: {_hint(session.hints())}")
            continue
        if ch in BACKSPACE_KEYS:
            partial = session.backspace()
            console.print(f"[dim]backspace[/dim] '{escape(partial)}'  next: {_hint(session.hints())}")
            continue
        if len(ch) != 1:
            # Arrow and function keys arrive as escape sequences.
            continue
        result = session.press(ch)
        console.print(f"{_describe(result, names)}  next: {_hint(session.hints())}")


if __name__ == "__main__":
    app()
