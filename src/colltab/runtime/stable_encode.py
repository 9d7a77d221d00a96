from __future__ import annotations

import hashlib
import json
from typing import Mapping

from colltab.order_contract import sort_once


def stable_compact_text(
    value: object,
    *,
    ensure_ascii: bool = True,
) -> str:
    """Deterministic text encoder for digest surfaces.

    Sort-contract note:
    - Mapping keys are sorted lexically exactly once per normalized carrier.
    - Sequence order is preserved; tuple/list normalize to JSON lists.
    """
    normalized = stable_json_value(
        value,
        source="stable_encode.stable_compact_text",
    )
    return json.dumps(
        normalized,
        separators=(",", ":"),
        sort_keys=False,
        ensure_ascii=ensure_ascii,
    )


def stable_compact_bytes(
    value: object,
    *,
    ensure_ascii: bool = True,
) -> bytes:
    return stable_compact_text(value, ensure_ascii=ensure_ascii).encode("utf-8")


def stable_digest(value: object) -> str:
    return hashlib.sha256(stable_compact_bytes(value)).hexdigest()


def stable_json_value(
    value: object,
    *,
    source: str,
) -> object:
    """Normalize arbitrary values into deterministic JSON-compatible carriers.

    Unsupported objects are rejected so that object identity never leaks
    into a digest.
    """
    return _normalize(value, source=source)


def _normalize(value: object, *, source: str) -> object:
    if isinstance(value, Mapping):
        keys = sort_once(
            (str(key) for key in value),
            source=f"{source}.mapping_keys",
        )
        normalized_items = {str(key): item for key, item in value.items()}
        return {
            key: _normalize(normalized_items[key], source=f"{source}.{key}")
            for key in keys
        }
    if isinstance(value, (tuple, list)):
        return [
            _normalize(item, source=f"{source}.item")
            for item in value
        ]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    raise TypeError(
        "stable_json_value does not support value type "
        f"{type(value).__name__} at {source}"
    )
