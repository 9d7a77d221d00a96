from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, NamedTuple, Optional, Tuple

Runes = Tuple[int, ...]
WeightKey = Tuple[int, int, int]


class CollationLevel(IntEnum):
    PRIMARY = 0
    SECONDARY = 1
    TERTIARY = 2
    QUATERNARY = 3
    IDENTITY = 4


class Weight(NamedTuple):
    primary: int
    secondary: int
    tertiary: int
    quaternary: int

    def key(self) -> WeightKey:
        # The quaternary level is derived at lookup time and never compared.
        return (self.primary, self.secondary, self.tertiary)


class ContractionHandle(NamedTuple):
    """Location of a suffix trie's root block in the shared node list."""

    offset: int
    count: int


def weights_key(weights: List[Weight]) -> Tuple[WeightKey, ...]:
    return tuple(weight.key() for weight in weights)


@dataclass
class Entry:
    """One mapping from a rune sequence to its collation elements."""

    runes: Runes
    weights: List[Weight] = field(default_factory=list)
    decompose: bool = False
    expansion_index: Optional[int] = None
    contraction_handle: Optional[ContractionHandle] = None
    contraction_index: int = 0

    @property
    def is_contraction(self) -> bool:
        return len(self.runes) > 1

    @property
    def is_expansion(self) -> bool:
        return not self.decompose and len(self.weights) > 1

    @property
    def is_contraction_starter(self) -> bool:
        return self.contraction_handle is not None

    @property
    def skip(self) -> bool:
        # Contractions are reached through their starter's suffix trie.
        return self.is_contraction

    @property
    def starter(self) -> int:
        return self.runes[0]

    @property
    def text(self) -> str:
        return "".join(chr(rune) for rune in self.runes)

    def __str__(self) -> str:
        runes = " ".join(f"{rune:04X}" for rune in self.runes)
        weights = " ".join(
            "[" + ".".join(f"{value:04X}" for value in weight) + "]"
            for weight in self.weights
        )
        return (
            f"{runes} -> {weights} "
            f"(ch:{self.contraction_handle}; ci:{self.contraction_index}; "
            f"ei:{self.expansion_index})"
        )


class EntryStore:
    """Ingested entries keyed by their exact rune sequence, in ingestion order."""

    def __init__(self) -> None:
        self._entries: dict[Runes, Entry] = {}

    def put(self, entry: Entry) -> None:
        self._entries[entry.runes] = entry

    def get(self, runes: Runes) -> Optional[Entry]:
        return self._entries.get(runes)

    def remove(self, runes: Runes) -> None:
        del self._entries[runes]

    def __contains__(self, runes: object) -> bool:
        return runes in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries.values()))
