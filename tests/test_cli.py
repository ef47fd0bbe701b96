import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from album_keys import cli
from album_keys.cli import app

runner = CliRunner()


def _seed() -> None:
    for album_id, name in [("1", "Animals"), ("2", "Family"), ("3", "Vacation 2024")]:
        result = runner.invoke(app, ["add", name, "--id", album_id])
        assert result.exit_code == 0, result.output


def test_init(db_env: Path):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert db_env.exists()


def test_list_empty(db_env: Path):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No albums" in result.output


def test_list_shows_keybindings(db_env: Path):
    _seed()
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "Animals" in result.output
    assert "Vacation 2024" in result.output
    assert "No keybinding" not in result.output


def test_list_reports_albums_without_keys(db_env: Path):
    runner.invoke(app, ["add", "???", "--id", "q"])
    runner.invoke(app, ["add", "Pets", "--id", "p"])
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No keybinding" in result.output
    assert "???" in result.output


def test_add_duplicate_id_fails(db_env: Path):
    _seed()
    result = runner.invoke(app, ["add", "Other", "--id", "1"])
    assert result.exit_code != 0


def test_rename_and_remove(db_env: Path):
    _seed()
    result = runner.invoke(app, ["rename", "1", "Wildlife"])
    assert result.exit_code == 0
    assert "Wildlife" in result.output

    result = runner.invoke(app, ["remove", "1"])
    assert result.exit_code == 0
    assert "Removed" in result.output

    result = runner.invoke(app, ["remove", "1"])
    assert result.exit_code != 0


def test_import(db_env: Path, tmp_path: Path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps([{"id": "x1", "albumName": "Garden", "assetCount": 2}]), encoding="utf-8")
    result = runner.invoke(app, ["import", str(path)])
    assert result.exit_code == 0
    assert "Imported" in result.output
    assert "Garden" in runner.invoke(app, ["list"]).output


def test_import_rejects_bad_file(db_env: Path, tmp_path: Path):
    path = tmp_path / "export.json"
    path.write_text("{}", encoding="utf-8")
    result = runner.invoke(app, ["import", str(path)])
    assert result.exit_code != 0


def test_press_replays_keystrokes(db_env: Path):
    _seed()
    result = runner.invoke(app, ["press", "fzb-a"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "match" in lines[0] and "Family" in lines[0]
    assert "invalid" in lines[1]
    assert "invalid" in lines[2]
    assert "backspace" in lines[3]
    assert "match" in lines[4] and "Animals" in lines[4]


def _keys(monkeypatch: pytest.MonkeyPatch, keys: list[str]) -> None:
    it = iter(keys)
    monkeypatch.setattr(cli.click, "getchar", lambda *args, **kwargs: next(it))


def test_type_mode(db_env: Path, monkeypatch: pytest.MonkeyPatch):
    _seed()
    _keys(monkeypatch, ["z", "\x1b", "v", "\x7f", "f", "\r"])
    result = runner.invoke(app, ["type"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "Keybinding mode" in lines[0]
    assert "invalid" in lines[1]
    assert "cleared" in lines[2]
    assert "match" in lines[3] and "Vacation 2024" in lines[3]
    assert "backspace" in lines[4]
    assert "match" in lines[5] and "Family" in lines[5]
    assert len(lines) == 6


@pytest.mark.parametrize("leave", ["\n", "\x03", "\x04"])
def test_type_mode_leave_keys(db_env: Path, monkeypatch: pytest.MonkeyPatch, leave: str):
    _seed()
    _keys(monkeypatch, [leave, "a"])
    result = runner.invoke(app, ["type"])
    assert result.exit_code == 0
    assert len(result.output.splitlines()) == 1


def test_type_mode_skips_escape_sequences(db_env: Path, monkeypatch: pytest.MonkeyPatch):
    _seed()
    _keys(monkeypatch, ["\x1b[A", "\x08", "a", "\r"])
    result = runner.invoke(app, ["type"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "backspace" in lines[1]
    assert "match" in lines[2] and "Animals" in lines[2]
    assert len(lines) == 3


def test_type_mode_without_albums(db_env: Path):
    result = runner.invoke(app, ["type"])
    assert result.exit_code == 0
    assert "No keybindings" in result.output
