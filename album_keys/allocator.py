from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .albums import Album, AlbumId
from .branches import Branch, album_branches
from .conflicts import resolve_conflicts
from .shortener import shorten_branches

log = logging.getLogger(__name__)

MAX_ROUNDS = 10


@dataclass(frozen=True)
class KeybindingTable(Mapping[AlbumId, str]):
    """
    Album id -> keybinding. Values are pairwise prefix-free.

    Albums that could not get a keybinding are listed in `unassigned`; they
    are still reachable through text search.
    """

    bindings: dict[AlbumId, str] = field(default_factory=dict)
    unassigned: tuple[AlbumId, ...] = ()

    # Holds a dict, so tables compare by value but cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, album_id: AlbumId) -> str:
        return self.bindings[album_id]

    def __iter__(self) -> Iterator[AlbumId]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)


@dataclass(frozen=True)
class RoundState:
    assigned: dict[AlbumId, str]
    remaining: tuple[AlbumId, ...]


def _run_round(
    state: RoundState, candidates: Mapping[AlbumId, list[Branch]], priority: int
) -> RoundState:
    claims = [candidates[a][priority] for a in state.remaining if priority < len(candidates[a])]
    if not claims:
        return state

    taken = list(state.assigned.values())
    resolved = resolve_conflicts(claims, taken=taken)
    shortened = shorten_branches(resolved, finalized=taken)

    won = {claim.album_id: key for key, claim in shortened.items()}
    log.debug("Round %d: %d claims, %d assigned", priority, len(claims), len(won))
    return RoundState(
        assigned={**state.assigned, **won},
        remaining=tuple(a for a in state.remaining if a not in won),
    )


def allocate(albums: Iterable[Album], *, max_rounds: int = MAX_ROUNDS) -> KeybindingTable:
    """
    Assign a prefix-free keybinding to as many albums as possible.

    Round N offers every unassigned album's N-th candidate. The result only
    depends on the album ids, names and their order.
    """
    album_list = list(albums)
    candidates = {a.id: album_branches(a) for a in album_list}
    longest = max((len(c) for c in candidates.values()), default=0)

    state = RoundState(assigned={}, remaining=tuple(candidates))
    for priority in range(min(max_rounds, longest)):
        if not state.remaining:
            break
        state = _run_round(state, candidates, priority)

    if state.remaining:
        names = {a.id: a.name for a in album_list}
        log.info(
            "%d album(s) without a keybinding: %s",
            len(state.remaining),
            ", ".join(repr(names[a]) for a in state.remaining),
        )

    bindings = {a.id: state.assigned[a.id] for a in album_list if a.id in state.assigned}
    return KeybindingTable(bindings=bindings, unassigned=state.remaining)
