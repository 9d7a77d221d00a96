from __future__ import annotations

import json
from pathlib import Path

import pytest

from colltab.runtime.json_io import (
    EntryPayloadError,
    dump_json_pretty,
    load_entries_path,
    parse_entries,
)
from colltab.runtime.stable_encode import stable_compact_text, stable_digest


def test_parse_entries_accepts_text_and_runes() -> None:
    entries = parse_entries(
        [
            {"text": "ab", "weights": [[1, 2, 3], []]},
            {"runes": ["U+00E9", "u+0301", 0x302], "weights": [[4]]},
        ]
    )
    assert entries == [
        ([0x61, 0x62], [[1, 2, 3], []]),
        ([0xE9, 0x301, 0x302], [[4]]),
    ]


def test_parse_entries_accepts_wrapped_document() -> None:
    assert parse_entries({"entries": [{"text": "a", "weights": []}]}) == [([0x61], [])]


@pytest.mark.parametrize(
    "payload",
    [
        {"entries": "nope"},
        ["nope"],
        [{"weights": [[1]]}],
        [{"text": "a"}],
        [{"text": "a", "weights": [[1, 2, 3, 4, 5]]}],
        [{"text": "a", "weights": [[-1]]}],
        [{"text": "a", "weights": ["1"]}],
        [{"runes": [1.5], "weights": [[1]]}],
        [{"runes": ["U+ZZZZ"], "weights": [[1]]}],
        [{"runes": ["a"], "weights": [[1]]}],
        [{"runes": ["00E9"], "weights": [[1]]}],
        [{"runes": [0x110000], "weights": [[1]]}],
        [{"text": "", "runes": [], "weights": [[1]]}],
    ],
)
def test_parse_entries_rejects_bad_shapes(payload: object) -> None:
    with pytest.raises(EntryPayloadError):
        parse_entries(payload)


def test_load_entries_path_reports_unreadable_files(tmp_path: Path) -> None:
    with pytest.raises(EntryPayloadError):
        load_entries_path(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{")
    with pytest.raises(EntryPayloadError):
        load_entries_path(broken)


def test_load_entries_path_round_trips_written_file(tmp_path: Path, write_entries) -> None:
    path = write_entries(tmp_path / "entries.json", [{"text": "a", "weights": [[7]]}])
    assert load_entries_path(path) == [([0x61], [[7]])]


def test_stable_encoding_is_key_order_invariant() -> None:
    left = {"b": [1, (2, 3)], "a": {"y": 1, "x": None}}
    right = {"a": {"x": None, "y": 1}, "b": [1, [2, 3]]}
    assert stable_compact_text(left) == stable_compact_text(right)
    assert stable_digest(left) == stable_digest(right)
    assert json.loads(dump_json_pretty(left)) == {"a": {"x": None, "y": 1}, "b": [1, [2, 3]]}


def test_stable_encoding_rejects_unordered_values() -> None:
    with pytest.raises(TypeError):
        stable_compact_text({"a": {1, 2}})
