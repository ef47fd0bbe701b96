from __future__ import annotations

from dataclasses import dataclass

from .albums import Album, AlbumId
from .normalize import normalize_name

# A single-letter name gets this many copies of the letter. The result is a
# placeholder that loses to almost any real candidate.
DEGENERATE_REPEAT = 10


@dataclass(frozen=True)
class Branch:
    album_id: AlbumId
    key: str
    priority: int


def _middle_abbrev(middle: list[str], k: int) -> str:
    if k == 1:
        return "".join(w[0] for w in middle)
    if k == 2:
        if len(middle) == 1:
            return middle[0][:2]
        return "".join(w[0] for w in middle[:-1]) + middle[-1][:2]
    return "".join(middle)


def generate_branches(words: list[str]) -> list[str]:
    """
    Candidate keybindings for one album, most preferred first.

    The index of a candidate in the returned list is its priority.
    """
    if not words:
        return []

    if len(words) == 1:
        word = words[0]
        if len(word) == 1:
            return [word * DEGENERATE_REPEAT]
        return [word]

    first, last = words[0], words[-1]
    if len(words) == 2:
        return [first[:k] + last for k in range(1, len(first) + 1)]

    middle = words[1:-1]
    return [first[:k] + _middle_abbrev(middle, k) + last for k in range(1, len(first) + 1)]


def album_branches(album: Album) -> list[Branch]:
    keys = generate_branches(normalize_name(album.name))
    return [Branch(album_id=album.id, key=key, priority=i) for i, key in enumerate(keys)]
