from __future__ import annotations

import re

_NOT_WORD_CHAR = re.compile(r"[^a-z0-9\s]")


def normalize_name(name: str) -> list[str]:
    """
    Lowercase words of an album name, punctuation removed.

    Only ASCII letters and digits survive, so every word is a valid
    keybinding fragment: "Kids' Birthday-2023" -> ["kids", "birthday2023"].
    """
    cleaned = _NOT_WORD_CHAR.sub("", name.lower().strip())
    return [w for w in cleaned.split() if w]
