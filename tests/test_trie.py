from __future__ import annotations

import pytest

from colltab.build import trie as trie_module
from colltab.build.colelem import make_ce, unpack
from colltab.build.model import Entry, EntryStore, Weight
from colltab.build.outcome import BuildOutcome
from colltab.build.trie import (
    INDEX_BLOCK_SIZE,
    ROOT_SIZE,
    VALUE_BLOCK_SIZE,
    CompiledTrie,
    TrieBuilder,
    build_trie,
)
from colltab.exceptions import PackingError


def test_lookup_returns_inserted_values() -> None:
    builder = TrieBuilder()
    samples = {0x00: 11, 0x41: 12, 0x7F: 13, 0x4E00: 14, 0x1F600: 15, 0x10FFFF: 16}
    for rune, value in samples.items():
        builder.insert(rune, value)
    trie = builder.generate()
    for rune, value in samples.items():
        assert trie.lookup(rune) == value
    assert trie.lookup(0x42) == 0
    assert trie.lookup(0x20000) == 0
    assert trie.lookup(0x110000) == 0
    assert trie.lookup(-1) == 0


def test_identical_blocks_are_shared() -> None:
    builder = TrieBuilder()
    # Same offsets under two root slots: both levels collapse to one block.
    builder.insert(0x0041, 7)
    builder.insert(0x4041, 7)
    builder.insert(0x8081, 8)
    trie = builder.generate()
    assert trie.value_blocks == 3
    assert trie.index_blocks == 3
    assert trie.root[0] == trie.root[1] != trie.root[2]
    assert len(trie.root) == ROOT_SIZE
    assert len(trie.index) == 3 * INDEX_BLOCK_SIZE
    assert len(trie.values) == 3 * VALUE_BLOCK_SIZE
    assert [trie.lookup(rune) for rune in (0x0041, 0x4041, 0x8081, 0x8041)] == [7, 7, 8, 0]


def test_empty_trie_resolves_everything_to_zero() -> None:
    trie = TrieBuilder().generate()
    assert trie == CompiledTrie.empty()
    assert trie.lookup(0x61) == 0


def test_block_overflow_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(trie_module, "MAX_BLOCKS", 2)
    builder = TrieBuilder()
    builder.insert(0x0041, 1)
    builder.insert(0x0081, 2)
    with pytest.raises(PackingError):
        builder.generate()


def test_build_trie_skips_contractions_and_records_overflow() -> None:
    store = EntryStore()
    store.put(Entry(runes=(0x61,), weights=[Weight(100, 0x20, 2, 100)]))
    store.put(Entry(runes=(0x61, 0x62), weights=[Weight(200, 0x20, 2, 200)]))
    store.put(Entry(runes=(0x63,), weights=[Weight(1, 0x10000, 2, 1)]))
    store.put(Entry(runes=(0x64,), weights=[Weight(300, 0x20, 2, 300)]))
    outcome = BuildOutcome()

    trie = build_trie(store, outcome)

    assert isinstance(outcome.error, PackingError)
    assert outcome.error.env["runes"] == [0x63]
    assert trie.lookup(0x61) == make_ce(Weight(100, 0x20, 2, 100))
    assert trie.lookup(0x63) == 0
    assert unpack(trie.lookup(0x64)).fields == (300, 0x20, 2)
