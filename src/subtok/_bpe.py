"""
Core Byte Pair Encoding (BPE) operations on character units.
"""

from collections.abc import Callable, Container, Iterable, Mapping

from typing_extensions import deprecated

from .types import Unit, UnitPair


def bpe_freqs(
    words: Iterable[list[Unit]], weights: Iterable[int] | None = None
) -> dict[UnitPair, int]:
    """
    Count every adjacent unit pair across ``words``.

    Pairs never cross word boundaries. The returned dict is ordered by first
    observation (words in order, left to right inside each word), which is
    what the tie-break in :func:`best_pair` relies on.

    :param words: Working splits, one list of units per pre-token.
    :param weights: Occurrence count of each word; 1 for every word when omitted.
    :return: Mapping of unit pairs to their weighted counts.
    """
    counts: dict[UnitPair, int] = {}
    if weights is None:
        weighted = ((word, 1) for word in words)
    else:
        weighted = zip(words, weights, strict=True)

    for word, weight in weighted:
        for pair in zip(word, word[1:]):
            counts[pair] = counts.get(pair, 0) + weight

    return counts


def best_pair(
    counts: Mapping[UnitPair, int],
    eligible: Callable[[UnitPair], bool] | None = None,
) -> UnitPair | None:
    """
    Return the most frequent pair, or ``None`` when no pair qualifies.

    Among pairs sharing the highest count the first observed one wins; strict
    ``>`` over an insertion-ordered mapping keeps that stable.
    """
    best: UnitPair | None = None
    best_count = 0
    for pair, count in counts.items():
        if count > best_count and (eligible is None or eligible(pair)):
            best, best_count = pair, count
    return best


def bpe_merge(units: list[Unit], target: UnitPair, merged: Unit) -> list[Unit]:
    """
    Replace every occurrence of ``target`` with ``merged``.

    The scan goes left to right and resumes after each replacement, so
    overlapping occurrences (``a a a`` for ``(a, a)``) merge only once.
    """
    if len(units) < 2:
        return units

    out: list[Unit] = []
    i = 0
    n = len(units)
    while i < n:
        if i < n - 1 and units[i] == target[0] and units[i + 1] == target[1]:
            out.append(merged)
            i += 2
        else:
            out.append(units[i])
            i += 1

    return out


def apply_ranked_merges(units: list[Unit], ranks: Mapping[UnitPair, int]) -> list[Unit]:
    """
    Segment ``units`` by replaying learned merges in priority order.

    Repeatedly picks the adjacent pair with the lowest rank, merges all of its
    occurrences and rescans, until no adjacent pair is a learned merge. The
    result equals what training produced for the same pre-token.
    """
    while len(units) >= 2:
        pair = min(zip(units, units[1:]), key=lambda p: ranks.get(p, float("inf")))
        if pair not in ranks:
            break
        units = bpe_merge(units, pair, pair[0] + pair[1])
    return units


@deprecated(
    "Rank-unaware reference segmentation for documentation only. Use `apply_ranked_merges()`."
)
def greedy_segment(units: list[Unit], vocab: Container[Unit]) -> list[Unit]:
    """
    Merge the first adjacent pair whose concatenation is in ``vocab``, repeatedly.

    This ignores merge rank, so it can disagree with the training-time
    segmentation. E.g. after learning ``(b, c)`` before ``(a, b)``, ``abc``
    becomes ``[ab, c]`` here but ``[a, bc]`` under ranked application.
    """
    changed = True
    while changed:
        changed = False
        out: list[Unit] = []
        i = 0
        while i < len(units):
            if i < len(units) - 1 and units[i] + units[i + 1] in vocab:
                out.append(units[i] + units[i + 1])
                i += 2
                changed = True
                continue
            out.append(units[i])
            i += 1
        units = out
    return units


__all__ = ["bpe_freqs", "best_pair", "bpe_merge", "apply_ranked_merges", "greedy_segment"]
