from __future__ import annotations

import pytest

from colltab.build.model import Weight
from colltab.build.weights import (
    DEFAULT_SECONDARY,
    DEFAULT_TERTIARY,
    ILLEGAL_OFFSET,
    convert_large_weights,
    implicit_primary,
    implicit_weight,
    is_ideographic,
    normalize_weights,
)
from colltab.exceptions import MalformedDoubleWeight


def test_normalize_defaults_quaternary_to_primary() -> None:
    assert normalize_weights([[50]]) == [
        Weight(50, DEFAULT_SECONDARY, DEFAULT_TERTIARY, 50)
    ]
    assert normalize_weights([[50, 7]]) == [Weight(50, 7, DEFAULT_TERTIARY, 50)]
    assert normalize_weights([[50, 7, 3, 9]]) == [Weight(50, 7, 3, 9)]


def test_normalize_empty_list_terminates_elements() -> None:
    assert normalize_weights([[10, 1, 1], []]) == [
        Weight(10, 1, 1, 10),
        Weight(0, 0, 0, 0),
    ]
    assert normalize_weights([[], [10, 1, 1]]) == [Weight(0, 0, 0, 0)]


def test_normalize_without_elements() -> None:
    assert normalize_weights([]) == []


def test_implicit_primary_offsets() -> None:
    assert implicit_primary(0x4E00) == 0x4E00 + 0x10000
    assert implicit_primary(0xFA0E) == 0xFA0E + 0x10000
    assert implicit_primary(0x3400) == 0x3400 + 0x20000
    assert implicit_primary(0x20000) == 0x20000 + 0x20000
    assert implicit_primary(0x0041) == 0x0041 + 0x50000
    # CJK Unified Ideographs Extension I.
    assert implicit_primary(0x2EBF0) == 0x2EBF0 + 0x20000
    assert implicit_primary(0x2EE5E) == 0x2EE5E + 0x50000


def test_is_ideographic_boundaries() -> None:
    assert is_ideographic(0x4E00)
    assert is_ideographic(0x9FFF)
    assert not is_ideographic(0x4DC0)
    assert not is_ideographic(0x0041)
    assert not is_ideographic(0x10FFFF)


def test_implicit_weight_uses_common_levels() -> None:
    assert implicit_weight(0x41) == Weight(0x50041, DEFAULT_SECONDARY, DEFAULT_TERTIARY, 0x41)


def test_double_primary_fuses_into_one_element() -> None:
    k, low = 1, 0x1234
    weights = normalize_weights([[0xFB40 + k, 0, 0, 0], [0x8000 | low, 0, 0, 0]])
    converted = convert_large_weights(weights)
    rune = (k << 15) | low
    assert converted == [Weight(implicit_primary(rune), 0, 0, 0)]


def test_double_primary_shifts_following_elements() -> None:
    weights = normalize_weights(
        [[0xFB40, 0x20, 2], [0xCE00, 0, 0], [300, 0x20, 2]]
    )
    converted = convert_large_weights(weights)
    assert [w.primary for w in converted] == [0x4E00 + 0x10000, 300]


def test_illegal_primaries_stay_single() -> None:
    weights = normalize_weights([[0xFFFE], [0xFFFF], [12]])
    converted = convert_large_weights(weights)
    assert [w.primary for w in converted] == [ILLEGAL_OFFSET, ILLEGAL_OFFSET + 1, 12]


def test_double_primary_without_flag_is_malformed() -> None:
    weights = normalize_weights([[0xFB40, 0, 0, 0], [0x1234, 0, 0, 0]])
    with pytest.raises(MalformedDoubleWeight) as excinfo:
        convert_large_weights(weights)
    assert "malformed" in excinfo.value.reason


def test_double_primary_without_continuation_is_malformed() -> None:
    weights = normalize_weights([[0xFB41]])
    with pytest.raises(MalformedDoubleWeight) as excinfo:
        convert_large_weights(weights)
    assert "missing" in excinfo.value.reason
