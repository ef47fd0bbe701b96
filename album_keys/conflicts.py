from __future__ import annotations

import logging
import string
from collections.abc import Iterable

from .branches import Branch

log = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.digits


def is_prefix_related(a: str, b: str) -> bool:
    """True when one string starts with the other (equal strings included)."""
    return a.startswith(b) or b.startswith(a)


def unique_claims(claims: Iterable[Branch]) -> dict[str, Branch]:
    """Keep the keys claimed by exactly one album. Identical claims all lose."""
    buckets: dict[str, list[Branch]] = {}
    for claim in claims:
        buckets.setdefault(claim.key, []).append(claim)

    out: dict[str, Branch] = {}
    for key, bucket in buckets.items():
        if len({c.album_id for c in bucket}) == 1:
            out[key] = bucket[0]
        else:
            log.debug("'%s' claimed by %d albums, nobody gets it this round", key, len(bucket))
    return out


def _distinguishing_char(key: str, others: Iterable[str]) -> str | None:
    blocked = {o[len(key)] for o in others if len(o) > len(key) and o.startswith(key)}
    for ch in ALPHABET:
        if ch not in blocked:
            return ch
    return None


def resolve_conflicts(claims: Iterable[Branch], taken: Iterable[str] = ()) -> dict[str, Branch]:
    """
    Reduce one round of claims to an unambiguous, prefix-free set.

    `taken` are keybindings committed in earlier rounds. They never change:
    a claim equal to or extending one of them is dropped, and a claim that
    is a prefix of one is disambiguated like any other antecedent.

    Returns key -> claim, where the claim's `key` is the (possibly extended)
    keybinding.
    """
    fixed = sorted(set(taken))
    candidates = unique_claims(
        c for c in claims if not any(c.key.startswith(t) for t in fixed)
    )

    everything = sorted(set(candidates) | set(fixed))
    resolved: dict[str, Branch] = {}
    for key in sorted(candidates):
        claim = candidates[key]
        extended_by = [o for o in everything if o != key and o.startswith(key)]
        if not extended_by:
            resolved[key] = claim
            continue

        ch = _distinguishing_char(key, extended_by)
        if ch is None:
            log.debug("No free character after '%s', leaving %s for a later round", key, claim.album_id)
            continue
        new_key = key + ch
        log.debug("'%s' is a prefix of %s, using '%s'", key, extended_by, new_key)
        resolved[new_key] = Branch(album_id=claim.album_id, key=new_key, priority=claim.priority)
    return resolved
