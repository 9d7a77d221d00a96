"""Weight constants and the per-element weight transforms.

Raw weights come from a DUCET-style table where each collation element is a
list of up to four levels. :func:`normalize_weights` fills the levels the
table leaves out, and :func:`convert_large_weights` rewrites the synthesized
double-primary encoding used for CJK and unassigned code points into a
single element carrying one fused primary.

See http://unicode.org/reports/tr10/#Implicit_Weights.
"""

from __future__ import annotations

from typing import Sequence

from colltab.build.model import Weight
from colltab.exceptions import MalformedDoubleWeight


DEFAULT_SECONDARY = 0x20
DEFAULT_TERTIARY = 0x02
MAX_TERTIARY = 0x1F

MAX_RUNE = 0x10FFFF

COMMON_UNIFIED_OFFSET = 0x10000
RARE_UNIFIED_OFFSET = 0x20000
OTHER_OFFSET = 0x50000
ILLEGAL_OFFSET = OTHER_OFFSET + MAX_RUNE
MAX_PRIMARY = ILLEGAL_OFFSET + 1

_MIN_UNIFIED = 0x4E00
_MAX_UNIFIED = 0x9FFF
_MIN_COMPATIBILITY = 0xF900
_MAX_COMPATIBILITY = 0xFAFF

_FIRST_LARGE_PRIMARY = 0xFB40
_ILLEGAL_PRIMARY = 0xFFFE
_HIGH_BITS_MASK = 0x3F
_LOW_BITS_MASK = 0x7FFF
_LOW_BITS_FLAG = 0x8000
_SHIFT_BITS = 15

# Code points with the Ideographic property, from Unicode 15.1 PropList.txt.
# Not derived from unicodedata, which exposes no property lookup.
_IDEOGRAPHIC_RANGES: tuple[tuple[int, int], ...] = (
    (0x3006, 0x3007),
    (0x3021, 0x3029),
    (0x3038, 0x303A),
    (0x3400, 0x4DBF),
    (0x4E00, 0x9FFF),
    (0xF900, 0xFA6D),
    (0xFA70, 0xFAD9),
    (0x16FE4, 0x16FE4),
    (0x17000, 0x187F7),
    (0x18800, 0x18CD5),
    (0x18D00, 0x18D08),
    (0x1B170, 0x1B2FB),
    (0x20000, 0x2A6DF),
    (0x2A700, 0x2B739),
    (0x2B740, 0x2B81D),
    (0x2B820, 0x2CEA1),
    (0x2CEB0, 0x2EBE0),
    (0x2EBF0, 0x2EE5D),
    (0x2F800, 0x2FA1D),
    (0x30000, 0x3134A),
    (0x31350, 0x323AF),
)


def is_ideographic(rune: int) -> bool:
    for low, high in _IDEOGRAPHIC_RANGES:
        if rune < low:
            return False
        if rune <= high:
            return True
    return False


def implicit_primary(rune: int) -> int:
    """Return the primary weight for a rune with no explicit table entry."""
    if is_ideographic(rune):
        if _MIN_UNIFIED <= rune <= _MAX_UNIFIED:
            # The most common case for CJK.
            return rune + COMMON_UNIFIED_OFFSET
        if _MIN_COMPATIBILITY <= rune <= _MAX_COMPATIBILITY:
            # Rarely hit: the DUCET lists every compatibility ideograph that
            # does not decompose.
            return rune + COMMON_UNIFIED_OFFSET
        return rune + RARE_UNIFIED_OFFSET
    return rune + OTHER_OFFSET


def implicit_weight(rune: int) -> Weight:
    return Weight(implicit_primary(rune), DEFAULT_SECONDARY, DEFAULT_TERTIARY, rune)


def normalize_weights(weight_lists: Sequence[Sequence[int]]) -> list[Weight]:
    weights: list[Weight] = []
    for raw in weight_lists:
        if len(raw) == 0:
            weights.append(Weight(0, 0, 0, 0))
            break
        primary = raw[0]
        secondary = raw[1] if len(raw) > 1 else DEFAULT_SECONDARY
        tertiary = raw[2] if len(raw) > 2 else DEFAULT_TERTIARY
        quaternary = raw[3] if len(raw) > 3 else primary
        weights.append(Weight(primary, secondary, tertiary, quaternary))
    return weights


def convert_large_weights(weights: list[Weight]) -> list[Weight]:
    """Rewrite large primaries (double primaries and illegal runes) in place.

    A CJK character C is represented in the DUCET as
    ``[.FBxx.0020.0002.C][.BBBB.0000.0000.C]``; the pair becomes one element.
    Raises :class:`MalformedDoubleWeight` without touching later elements
    when the second half of a pair is missing or lacks its flag bit.
    """
    i = 0
    while i < len(weights):
        weight = weights[i]
        primary = weight.primary
        if primary < _FIRST_LARGE_PRIMARY:
            i += 1
            continue
        if primary >= _ILLEGAL_PRIMARY:
            weights[i] = weight._replace(primary=ILLEGAL_OFFSET + primary - _ILLEGAL_PRIMARY)
            i += 1
            continue
        if i + 1 >= len(weights):
            raise MalformedDoubleWeight(
                "second part of double primary weight missing",
                weights=[list(w) for w in weights],
            )
        second = weights[i + 1].primary
        if second & _LOW_BITS_FLAG == 0:
            raise MalformedDoubleWeight(
                "malformed second part of double primary weight",
                weights=[list(w) for w in weights],
            )
        rune = ((primary & _HIGH_BITS_MASK) << _SHIFT_BITS) | (second & _LOW_BITS_MASK)
        weights[i] = weight._replace(primary=implicit_primary(rune))
        del weights[i + 1]
        i += 1
    return weights
