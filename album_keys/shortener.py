from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from .branches import Branch
from .conflicts import is_prefix_related

log = logging.getLogger(__name__)


def _clashes(candidate: str, others: Iterable[str]) -> bool:
    return any(is_prefix_related(candidate, o) for o in others)


def shorten_branches(resolved: Mapping[str, Branch], finalized: Iterable[str] = ()) -> dict[str, Branch]:
    """
    Trim every key one character at a time while the set stays prefix-free.

    Works longest-first. A key whose one-shorter form would clash with any
    other key (live, already locked, or in `finalized`) is locked at its
    current length. Keys still live once the longest is a single character
    are kept as they are.
    """
    live: dict[str, Branch] = dict(resolved)
    locked: dict[str, Branch] = {}
    fixed = set(finalized)

    while live:
        longest = max(len(k) for k in live)
        if longest <= 1:
            break

        for key in sorted(k for k in live if len(k) == longest):
            claim = live.pop(key)
            candidate = key[:-1]
            others = [*live, *locked, *fixed]
            if _clashes(candidate, others):
                locked[key] = claim
            else:
                live[candidate] = Branch(album_id=claim.album_id, key=candidate, priority=claim.priority)

    locked.update(live)
    log.debug("Shortened %d keys: %s", len(locked), sorted(locked))
    return {k: locked[k] for k in sorted(locked)}
