from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .albums import AlbumId


@dataclass(frozen=True)
class ExactMatch:
    album_id: AlbumId


@dataclass(frozen=True)
class ValidContinuation:
    partial: str


@dataclass(frozen=True)
class Invalid:
    char: str


ValidationResult = ExactMatch | ValidContinuation | Invalid


def _check_key(char: str) -> None:
    if len(char) != 1:
        raise ValueError(f"Expected a single keystroke, got {char!r}.")


def validate(table: Mapping[AlbumId, str], partial: str, char: str) -> ValidationResult:
    """
    Classify one keystroke typed after `partial`.

    An exact match wins even when a longer keybinding continues from it.
    """
    _check_key(char)
    typed = partial + char

    for album_id, key in table.items():
        if key == typed:
            return ExactMatch(album_id)
    if any(len(key) > len(typed) and key.startswith(typed) for key in table.values()):
        return ValidContinuation(typed)
    return Invalid(char)


def next_available_characters(table: Mapping[AlbumId, str], partial: str) -> list[str]:
    return sorted({key[len(partial)] for key in table.values() if len(key) > len(partial) and key.startswith(partial)})


class KeybindingValidator:
    """
    Keybinding-mode session: a table snapshot plus what was typed so far.

    The buffer is cleared on an exact match and left alone on an invalid
    keystroke; the caller decides whether to clear it then.
    """

    def __init__(self, table: Mapping[AlbumId, str]) -> None:
        self._table = table
        self._partial = ""

    @property
    def partial(self) -> str:
        return self._partial

    @property
    def table(self) -> Mapping[AlbumId, str]:
        return self._table

    def press(self, char: str) -> ValidationResult:
        result = validate(self._table, self._partial, char)
        if isinstance(result, ExactMatch):
            self._partial = ""
        elif isinstance(result, ValidContinuation):
            self._partial = result.partial
        return result

    def backspace(self) -> str:
        self._partial = self._partial[:-1]
        return self._partial

    def reset(self) -> None:
        self._partial = ""

    # Escape, and entering or leaving keybinding mode, all clear the buffer.
    escape = reset

    def replace_table(self, table: Mapping[AlbumId, str]) -> None:
        """Swap in a freshly allocated table. The buffer is checked on the next keystroke."""
        self._table = table

    def hints(self) -> list[str]:
        return next_available_characters(self._table, self._partial)
