from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from colltab.runtime.stable_encode import stable_json_value
from colltab.schema import EntriesDocument


class EntryPayloadError(ValueError):
    """Raised when an entries document does not have the expected shape."""


def load_entries_path(
    path: Path,
    *,
    encoding: str = "utf-8",
) -> list[tuple[list[int], list[list[int]]]]:
    try:
        payload = json.loads(path.read_text(encoding=encoding))
    except (OSError, UnicodeError) as exc:
        raise EntryPayloadError(f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise EntryPayloadError(f"{path} is not valid JSON: {exc}") from exc
    return parse_entries(payload)


def parse_entries(payload: object) -> list[tuple[list[int], list[list[int]]]]:
    """Turn an entries document into ``(runes, weight_lists)`` pairs.

    The document is either a list of records or a mapping with an
    ``entries`` list. Each record names its key with ``runes`` (ints or
    ``U+XXXX`` strings; other strings are rejected) or ``text`` for literal
    characters, and its collation elements with ``weights``.
    """
    if not isinstance(payload, Mapping):
        payload = {"entries": payload}
    try:
        document = EntriesDocument.model_validate(payload)
    except ValidationError as exc:
        raise EntryPayloadError(str(exc)) from exc
    return [(entry.key(), [list(element) for element in entry.weights]) for entry in document.entries]


def dump_json_pretty(payload: object) -> str:
    ordered = stable_json_value(payload, source="json_io.dump_json_pretty")
    return json.dumps(ordered, indent=2, sort_keys=False)
