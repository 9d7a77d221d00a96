"""Multi-level trie mapping code points to packed collation elements.

A 21-bit code point is split into three parts::

    root index   bits 14..20  ->  mid-level index block
    index block  bits  6..13  ->  value block
    value block  bits  0..5   ->  packed element

Identical blocks are stored once. Block 0 of each level holds only empty
entries, so a code point without an entry resolves to element 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from colltab.build.colelem import col_elem
from colltab.build.model import EntryStore
from colltab.build.outcome import BuildOutcome
from colltab.build.weights import MAX_RUNE
from colltab.exceptions import PackingError
from colltab.order_contract import sort_once

logger = logging.getLogger(__name__)

VALUE_BLOCK_BITS = 6
INDEX_BLOCK_BITS = 8
ROOT_BITS = 7

VALUE_BLOCK_SIZE = 1 << VALUE_BLOCK_BITS
INDEX_BLOCK_SIZE = 1 << INDEX_BLOCK_BITS
ROOT_SIZE = 1 << ROOT_BITS
MAX_BLOCKS = 0x10000

_ROOT_SHIFT = VALUE_BLOCK_BITS + INDEX_BLOCK_BITS


@dataclass(frozen=True)
class CompiledTrie:
    root: Tuple[int, ...]
    index: Tuple[int, ...]
    values: Tuple[int, ...]

    @classmethod
    def empty(cls) -> "CompiledTrie":
        return cls(
            root=(0,) * ROOT_SIZE,
            index=(0,) * INDEX_BLOCK_SIZE,
            values=(0,) * VALUE_BLOCK_SIZE,
        )

    def lookup(self, rune: int) -> int:
        if rune < 0 or rune > MAX_RUNE:
            return 0
        block = self.root[rune >> _ROOT_SHIFT]
        value_block = self.index[
            block * INDEX_BLOCK_SIZE + ((rune >> VALUE_BLOCK_BITS) & (INDEX_BLOCK_SIZE - 1))
        ]
        return self.values[value_block * VALUE_BLOCK_SIZE + (rune & (VALUE_BLOCK_SIZE - 1))]

    @property
    def index_blocks(self) -> int:
        return len(self.index) // INDEX_BLOCK_SIZE

    @property
    def value_blocks(self) -> int:
        return len(self.values) // VALUE_BLOCK_SIZE


class TrieBuilder:
    def __init__(self) -> None:
        self._values: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._values)

    def insert(self, rune: int, value: int) -> None:
        self._values[rune] = value

    def generate(self) -> CompiledTrie:
        values: List[int] = [0] * VALUE_BLOCK_SIZE
        value_block_ids: Dict[Tuple[int, ...], int] = {tuple(values): 0}
        by_value_block: Dict[int, Dict[int, int]] = {}
        for rune, value in self._values.items():
            by_value_block.setdefault(rune >> VALUE_BLOCK_BITS, {})[rune] = value

        by_index_block: Dict[int, Dict[int, int]] = {}
        for block_key in sort_once(by_value_block, source="TrieBuilder.generate.value_blocks"):
            block = [0] * VALUE_BLOCK_SIZE
            for rune, value in by_value_block[block_key].items():
                block[rune & (VALUE_BLOCK_SIZE - 1)] = value
            block_id = _intern(value_block_ids, values, block, level="value")
            by_index_block.setdefault(block_key >> INDEX_BLOCK_BITS, {})[block_key] = block_id

        index: List[int] = [0] * INDEX_BLOCK_SIZE
        index_block_ids: Dict[Tuple[int, ...], int] = {tuple(index): 0}
        root: List[int] = [0] * ROOT_SIZE
        for root_key in sort_once(by_index_block, source="TrieBuilder.generate.index_blocks"):
            block = [0] * INDEX_BLOCK_SIZE
            for block_key, block_id in by_index_block[root_key].items():
                block[block_key & (INDEX_BLOCK_SIZE - 1)] = block_id
            root[root_key] = _intern(index_block_ids, index, block, level="index")
        return CompiledTrie(root=tuple(root), index=tuple(index), values=tuple(values))


def _intern(
    ids: Dict[Tuple[int, ...], int],
    flat: List[int],
    block: List[int],
    *,
    level: str,
) -> int:
    key = tuple(block)
    block_id = ids.get(key)
    if block_id is not None:
        return block_id
    block_id = len(ids)
    if block_id >= MAX_BLOCKS:
        raise PackingError(
            f"too many {level} blocks: {block_id + 1} exceeds {MAX_BLOCKS}",
            level=level,
        )
    ids[key] = block_id
    flat.extend(block)
    return block_id


def build_trie(store: EntryStore, outcome: BuildOutcome) -> CompiledTrie:
    builder = TrieBuilder()
    for entry in store:
        if entry.skip:
            continue
        try:
            builder.insert(entry.starter, col_elem(entry))
        except PackingError as exc:
            exc.env.setdefault("runes", list(entry.runes))
            outcome.record(exc)
    try:
        trie = builder.generate()
    except PackingError as exc:
        outcome.record(exc)
        return CompiledTrie.empty()
    logger.info(
        "trie: %d runes, %d index blocks, %d value blocks",
        len(builder),
        trie.index_blocks,
        trie.value_blocks,
    )
    return trie
