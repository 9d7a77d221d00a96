"""Packed collation elements.

Every element stored in the compiled table is a 64-bit integer whose top
nibble is a discriminant tag. Payload fields, most significant first::

    plain          primary:24 secondary:16 tertiary:8
    expansion      index:32
    contraction    trie_offset:20 trie_count:12 base_index:24
    decomposition  tertiary:8 tertiary:8

A value of 0 is the empty element used for runes without an entry. Fields
never truncate: an out-of-range value raises :class:`PackingError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

from colltab.build.model import ContractionHandle, Entry, Weight
from colltab.exceptions import PackingError
from colltab.invariants import never, require_not_none

ELEMENT_BITS = 64
_TAG_SHIFT = 60

_PRIMARY_BITS = 24
_SECONDARY_BITS = 16
_TERTIARY_BITS = 8
_EXPANSION_INDEX_BITS = 32
_TRIE_OFFSET_BITS = 20
_TRIE_COUNT_BITS = 12
_CONTRACTION_INDEX_BITS = 24
_DECOMPOSE_TERTIARY_BITS = 8


class ElementTag(IntEnum):
    EMPTY = 0
    PLAIN = 1
    EXPANSION = 2
    CONTRACTION = 3
    DECOMPOSITION = 4


@dataclass(frozen=True)
class UnpackedElement:
    tag: ElementTag
    fields: Tuple[int, ...] = ()

    def weight(self) -> Weight:
        if self.tag is not ElementTag.PLAIN:
            raise ValueError(f"{self.tag.name.lower()} element carries no literal weight")
        primary, secondary, tertiary = self.fields
        return Weight(primary, secondary, tertiary, primary)


def _check(name: str, value: int, bits: int) -> int:
    if value < 0 or value >= 1 << bits:
        raise PackingError(
            f"{name} out of bounds: {value:#x} does not fit in {bits} bits",
            field=name,
            value=value,
            bits=bits,
        )
    return value


def _tagged(tag: ElementTag, payload: int) -> int:
    return (int(tag) << _TAG_SHIFT) | payload


def make_ce(weight: Weight) -> int:
    primary = _check("primary", weight.primary, _PRIMARY_BITS)
    secondary = _check("secondary", weight.secondary, _SECONDARY_BITS)
    tertiary = _check("tertiary", weight.tertiary, _TERTIARY_BITS)
    payload = (primary << (_SECONDARY_BITS + _TERTIARY_BITS)) | (secondary << _TERTIARY_BITS) | tertiary
    return _tagged(ElementTag.PLAIN, payload)


def make_expand_index(index: int) -> int:
    return _tagged(ElementTag.EXPANSION, _check("expansion index", index, _EXPANSION_INDEX_BITS))


def make_contract_index(handle: ContractionHandle, index: int) -> int:
    offset = _check("contraction trie offset", handle.offset, _TRIE_OFFSET_BITS)
    count = _check("contraction trie count", handle.count, _TRIE_COUNT_BITS)
    index = _check("contraction index", index, _CONTRACTION_INDEX_BITS)
    payload = (
        (offset << (_TRIE_COUNT_BITS + _CONTRACTION_INDEX_BITS))
        | (count << _CONTRACTION_INDEX_BITS)
        | index
    )
    return _tagged(ElementTag.CONTRACTION, payload)


def make_decompose(t1: int, t2: int) -> int:
    t1 = _check("decomposition tertiary", t1, _DECOMPOSE_TERTIARY_BITS)
    t2 = _check("decomposition tertiary", t2, _DECOMPOSE_TERTIARY_BITS)
    return _tagged(ElementTag.DECOMPOSITION, (t1 << _DECOMPOSE_TERTIARY_BITS) | t2)


def _mask(bits: int) -> int:
    return (1 << bits) - 1


def unpack(element: int) -> UnpackedElement:
    tag = ElementTag(element >> _TAG_SHIFT)
    payload = element & _mask(_TAG_SHIFT)
    if tag is ElementTag.PLAIN:
        tertiary = payload & _mask(_TERTIARY_BITS)
        secondary = (payload >> _TERTIARY_BITS) & _mask(_SECONDARY_BITS)
        primary = payload >> (_SECONDARY_BITS + _TERTIARY_BITS)
        return UnpackedElement(tag, (primary, secondary, tertiary))
    if tag is ElementTag.EXPANSION:
        return UnpackedElement(tag, (payload,))
    if tag is ElementTag.CONTRACTION:
        index = payload & _mask(_CONTRACTION_INDEX_BITS)
        count = (payload >> _CONTRACTION_INDEX_BITS) & _mask(_TRIE_COUNT_BITS)
        offset = payload >> (_TRIE_COUNT_BITS + _CONTRACTION_INDEX_BITS)
        return UnpackedElement(tag, (offset, count, index))
    if tag is ElementTag.DECOMPOSITION:
        t2 = payload & _mask(_DECOMPOSE_TERTIARY_BITS)
        t1 = payload >> _DECOMPOSE_TERTIARY_BITS
        return UnpackedElement(tag, (t1, t2))
    return UnpackedElement(tag)


def base_col_elem(entry: Entry) -> int:
    """Pack the element an entry contributes when reached directly or via a contraction."""
    if entry.decompose:
        never("decomposition entries are packed by col_elem", runes=list(entry.runes))
    if entry.is_expansion:
        return make_expand_index(require_not_none(entry.expansion_index, runes=list(entry.runes)))
    if not entry.weights:
        # An entry ingested without elements is completely ignorable.
        return make_ce(Weight(0, 0, 0, 0))
    return make_ce(entry.weights[0])


def col_elem(entry: Entry) -> int:
    """Pack the primary trie element for ``entry``."""
    if entry.skip:
        never("contraction entries have no primary trie slot", runes=list(entry.runes))
    if entry.decompose:
        t1 = entry.weights[0].tertiary
        t2 = entry.weights[1].tertiary if len(entry.weights) > 1 else 0
        return make_decompose(t1, t2)
    if entry.contraction_handle is not None:
        return make_contract_index(entry.contraction_handle, entry.contraction_index)
    return base_col_elem(entry)
