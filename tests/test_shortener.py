from album_keys.branches import Branch
from album_keys.conflicts import is_prefix_related
from album_keys.shortener import shorten_branches


def resolved(**keys: str) -> dict[str, Branch]:
    return {key: Branch(album_id=album_id, key=key, priority=0) for album_id, key in keys.items()}


def bound(result: dict[str, Branch]) -> dict[str, str]:
    return {claim.album_id: key for key, claim in result.items()}


def test_lone_keys_shrink_to_one_character():
    out = shorten_branches(resolved(animals="animals", family="family", vacation="v2024"))
    assert bound(out) == {"animals": "a", "family": "f", "vacation": "v"}


def test_shared_prefix_locks_before_merging():
    out = bound(shorten_branches(resolved(garden="garden", garage="garage")))
    assert out == {"garden": "gard", "garage": "gara"}


def test_two_word_albums_keep_distinct_letters():
    out = bound(shorten_branches(resolved(photos="gphotos", videos="gvideos")))
    assert out == {"photos": "gp", "videos": "gv"}


def test_finalized_keys_block_shortening():
    out = bound(shorten_branches(resolved(beach="beach"), finalized=["b"]))
    assert out == {"beach": "beach"}

    out = bound(shorten_branches(resolved(beach="beach"), finalized=["bo"]))
    assert out == {"beach": "be"}


def test_keys_keep_their_claims():
    out = shorten_branches({"abc": Branch(album_id="x", key="abc", priority=3)})
    assert out == {"a": Branch(album_id="x", key="a", priority=3)}


def test_shortening_is_idempotent():
    first = shorten_branches(resolved(a="garden", b="garage", c="gphotos", d="gvideos", e="zebra"))
    second = shorten_branches(first)
    assert second == first


def test_output_stays_prefix_free():
    out = list(shorten_branches(resolved(a="abcd", b="abce", c="abd", d="b12", e="b13")))
    for x in out:
        for y in out:
            if x != y:
                assert not is_prefix_related(x, y)


def test_empty_input():
    assert shorten_branches({}) == {}
