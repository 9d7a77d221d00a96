"""Contraction side tables.

Contractions are grouped by their starter rune. The runes following the
starter of every contraction in a group form the group's suffix set, which
is compiled into a small trie. Groups with identical suffix sets share one
trie. Each group owns a contiguous run of packed elements in the shared
contraction-elements array: position 0 holds the starter on its own, and a
suffix with lookup position ``i`` is found at ``base + i``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from colltab.build.colelem import base_col_elem
from colltab.build.model import ContractionHandle, Entry, EntryStore, Runes
from colltab.build.outcome import BuildOutcome
from colltab.exceptions import ContractionMissingBaseEntry, PackingError
from colltab.invariants import never
from colltab.order_contract import enforce_ordered, sort_once

logger = logging.getLogger(__name__)

SuffixSet = Tuple[Runes, ...]


class TrieNode(NamedTuple):
    rune: int
    # Lookup position of the suffix ending at this node, 0 if none does.
    index: int
    child_offset: int
    child_count: int


@dataclass
class SuffixTrieSet:
    """All contraction suffix tries, flattened into one node list.

    A trie is addressed by the block of sibling nodes at its root. Sibling
    blocks are contiguous and sorted by rune.
    """

    nodes: List[TrieNode] = field(default_factory=list)

    def append_trie(self, suffixes: SuffixSet) -> ContractionHandle:
        """Compile the sorted ``suffixes``; suffix ``i`` gets position ``i + 1``."""
        positioned = [(suffix, position + 1) for position, suffix in enumerate(suffixes)]
        offset, count = self._emit(positioned)
        return ContractionHandle(offset, count)

    def _emit(self, positioned: Sequence[Tuple[Runes, int]]) -> Tuple[int, int]:
        groups: Dict[int, List[Tuple[Runes, int]]] = {}
        for suffix, position in positioned:
            groups.setdefault(suffix[0], []).append((suffix, position))
        # Sorted suffixes yield their first runes in ascending order.
        runes = enforce_ordered(groups, source="SuffixTrieSet._emit.sibling_runes")
        offset = len(self.nodes)
        self.nodes.extend(TrieNode(rune, 0, 0, 0) for rune in runes)
        for slot, rune in enumerate(runes):
            index = 0
            tails: List[Tuple[Runes, int]] = []
            for suffix, position in groups[rune]:
                if len(suffix) == 1:
                    index = position
                else:
                    tails.append((suffix[1:], position))
            child_offset, child_count = self._emit(tails) if tails else (0, 0)
            self.nodes[offset + slot] = TrieNode(rune, index, child_offset, child_count)
        return offset, len(runes)

    def lookup(self, handle: ContractionHandle, runes: Sequence[int]) -> Tuple[int, int]:
        """Return the position of the longest suffix matching a prefix of ``runes``.

        The second value is the number of runes consumed; (0, 0) means no
        suffix matched.
        """
        best = (0, 0)
        offset, count = handle
        for consumed, rune in enumerate(runes, start=1):
            node = self._find(offset, count, rune)
            if node is None:
                break
            if node.index:
                best = (node.index, consumed)
            offset, count = node.child_offset, node.child_count
        return best

    def _find(self, offset: int, count: int, rune: int) -> Optional[TrieNode]:
        low, high = offset, offset + count
        while low < high:
            middle = (low + high) // 2
            node = self.nodes[middle]
            if node.rune == rune:
                return node
            if node.rune < rune:
                low = middle + 1
            else:
                high = middle
        return None


@dataclass
class ContractionResult:
    max_contraction_len: int = 0
    groups: int = 0
    tries: int = 0


def _group_by_starter(store: EntryStore) -> Tuple[Dict[int, List[Entry]], int]:
    groups: Dict[int, List[Entry]] = {}
    max_len = 0
    for entry in store:
        if entry.is_contraction:
            max_len = max(max_len, len(entry.runes))
            groups.setdefault(entry.starter, []).append(entry)
    return groups, max_len


def _slot_entries(
    tries: SuffixTrieSet,
    handle: ContractionHandle,
    base: Entry,
    contractions: Sequence[Entry],
) -> List[Entry]:
    """Bucket-sort a group's entries into trie lookup order."""
    slots: List[Optional[Entry]] = [None] * (len(contractions) + 1)
    slots[0] = base
    for entry in contractions:
        suffix = entry.runes[1:]
        position, consumed = tries.lookup(handle, suffix)
        if consumed != len(suffix):
            never(
                "unexpected suffix match length",
                kind="contraction_index",
                runes=list(entry.runes),
                consumed=consumed,
                expected=len(suffix),
            )
        if not 0 < position < len(slots):
            never(
                "suffix position out of range",
                kind="contraction_index",
                runes=list(entry.runes),
                position=position,
                slots=len(slots),
            )
        if slots[position] is not None:
            never(
                "multiple contractions for one position",
                kind="contraction_index",
                runes=list(entry.runes),
                position=position,
            )
        slots[position] = entry
    return [entry for entry in slots if entry is not None]


def process_contractions(
    store: EntryStore,
    tries: SuffixTrieSet,
    elements: List[int],
    outcome: BuildOutcome,
) -> ContractionResult:
    groups, max_len = _group_by_starter(store)
    result = ContractionResult(max_contraction_len=max_len)
    handles: Dict[SuffixSet, ContractionHandle] = {}
    for starter, contractions in groups.items():
        base = store.get((starter,))
        if base is None:
            outcome.record(
                ContractionMissingBaseEntry(
                    "no single entry for contraction starter found",
                    runes=[starter],
                    contractions=[list(entry.runes) for entry in contractions],
                )
            )
            continue
        suffixes: SuffixSet = tuple(
            sort_once(
                (entry.runes[1:] for entry in contractions),
                source="process_contractions.suffixes",
            )
        )
        handle = handles.get(suffixes)
        if handle is None:
            handle = tries.append_trie(suffixes)
            handles[suffixes] = handle
        slots = _slot_entries(tries, handle, base, contractions)
        base.contraction_handle = handle
        base.contraction_index = len(elements)
        for entry in slots:
            try:
                elements.append(base_col_elem(entry))
            except PackingError as exc:
                exc.env.setdefault("runes", list(entry.runes))
                outcome.record(exc)
                elements.append(0)
        result.groups += 1
    result.tries = len(handles)
    logger.info(
        "contractions: %d groups, %d distinct suffix tries, %d trie nodes, %d elements",
        result.groups,
        result.tries,
        len(tries.nodes),
        len(elements),
    )
    return result
