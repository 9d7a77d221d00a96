"""Drop or tag entries whose weights follow from Unicode decomposition."""

from __future__ import annotations

import logging
import unicodedata
from typing import List, Sequence, Set

from colltab.build.model import Entry, EntryStore, Weight
from colltab.build.weights import MAX_TERTIARY, implicit_weight

logger = logging.getLogger(__name__)


def gen_col_elems(store: EntryStore, text: str) -> List[Weight]:
    """Concatenate the weights of each rune of ``text``.

    Runes without an entry get their implicit weights.
    """
    weights: List[Weight] = []
    for char in text:
        entry = store.get((ord(char),))
        if entry is None:
            weights.append(implicit_weight(ord(char)))
        else:
            weights.extend(entry.weights)
    return weights


def equal_weights(left: Sequence[Weight], right: Sequence[Weight]) -> bool:
    if len(left) != len(right):
        return False
    return all(a.key() == b.key() for a, b in zip(left, right))


def reproducible_from_nfkd(stored: Sequence[Weight], nfkd: Sequence[Weight]) -> bool:
    """Report whether ``stored`` can be generated from an NFKD expansion.

    Primary and secondary weights must agree everywhere. Tertiary weights
    must agree for the first two elements, the only ones a decomposition
    element records, and be MAX_TERTIARY from the third element onwards.
    """
    if len(stored) != len(nfkd):
        return False
    for i, (weight, derived) in enumerate(zip(stored, nfkd)):
        if weight.primary != derived.primary or weight.secondary != derived.secondary:
            return False
        if i < 2 and weight.tertiary != derived.tertiary:
            return False
        if i >= 2 and weight.tertiary != MAX_TERTIARY:
            return False
    return True


def contraction_starters(store: EntryStore) -> Set[int]:
    return {entry.starter for entry in store if entry.is_contraction}


def _candidate(entry: Entry, keep: Set[int]) -> bool:
    return not entry.is_contraction and entry.starter not in keep


def simplify(store: EntryStore) -> None:
    # Contraction starters must keep their trie slot. (As of DUCET 6.0 the
    # only such rune that decomposes is Kannada U+0CCA.)
    keep = contraction_starters(store)

    removed = 0
    for entry in store:
        if not _candidate(entry, keep):
            continue
        text = entry.text
        nfd = unicodedata.normalize("NFD", text)
        if nfd == text:
            continue
        if equal_weights(gen_col_elems(store, nfd), entry.weights):
            logger.debug("removing %s, reproducible from NFD", entry)
            store.remove(entry.runes)
            removed += 1

    tagged = 0
    for entry in store:
        if not _candidate(entry, keep):
            continue
        text = entry.text
        nfkd = unicodedata.normalize("NFKD", text)
        if nfkd == text:
            continue
        if reproducible_from_nfkd(entry.weights, gen_col_elems(store, nfkd)):
            entry.decompose = True
            tagged += 1

    logger.info(
        "simplify: removed %d entries reproducible from NFD, tagged %d for NFKD",
        removed,
        tagged,
    )
