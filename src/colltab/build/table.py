from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from colltab.build.colelem import ELEMENT_BITS
from colltab.build.contraction import TrieNode
from colltab.build.trie import CompiledTrie
from colltab.build.weights import MAX_TERTIARY
from colltab.runtime.stable_encode import stable_digest


@dataclass(frozen=True)
class CollationTable:
    """Compiled collation table.

    All arrays are tuples of packed integers so the table can be shared
    freely once built. Serializers and runtime collators read it through
    the accessors below.
    """

    locale: str
    trie: CompiledTrie
    expansion_elements: Tuple[int, ...]
    contraction_tries: Tuple[TrieNode, ...]
    contraction_elements: Tuple[int, ...]
    max_contraction_len: int
    max_tertiary: int = MAX_TERTIARY
    element_bits: int = ELEMENT_BITS

    @property
    def root_index(self) -> Tuple[int, ...]:
        return self.trie.root

    @property
    def index(self) -> Tuple[int, ...]:
        return self.trie.index

    @property
    def values(self) -> Tuple[int, ...]:
        return self.trie.values

    def lookup(self, rune: int) -> int:
        return self.trie.lookup(rune)

    def expansion(self, index: int) -> Tuple[int, ...]:
        count = self.expansion_elements[index]
        return self.expansion_elements[index + 1 : index + 1 + count]

    def payload(self) -> dict[str, object]:
        return {
            "locale": self.locale,
            "root_index": list(self.root_index),
            "index": list(self.index),
            "values": list(self.values),
            "expansion_elements": list(self.expansion_elements),
            "contraction_tries": [list(node) for node in self.contraction_tries],
            "contraction_elements": list(self.contraction_elements),
            "max_contraction_len": self.max_contraction_len,
            "max_tertiary": self.max_tertiary,
            "element_bits": self.element_bits,
        }

    def digest(self) -> str:
        return stable_digest(self.payload())

    def stats(self) -> dict[str, object]:
        return {
            "locale": self.locale,
            "index_blocks": self.trie.index_blocks,
            "value_blocks": self.trie.value_blocks,
            "expansion_elements": len(self.expansion_elements),
            "contraction_trie_nodes": len(self.contraction_tries),
            "contraction_elements": len(self.contraction_elements),
            "max_contraction_len": self.max_contraction_len,
            "max_tertiary": self.max_tertiary,
            "digest": self.digest(),
        }
