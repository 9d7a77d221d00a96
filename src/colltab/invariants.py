"""Invariant markers for the table compiler."""

from __future__ import annotations

from typing import NoReturn, TypeVar

from colltab.exceptions import ContractionIndexConsistency, InvariantViolation

T = TypeVar("T")

_KINDS: dict[str, type[InvariantViolation]] = {
    "invariant": InvariantViolation,
    "contraction_index": ContractionIndexConsistency,
}


def never(reason: str = "", *, kind: str = "invariant", **env: object) -> NoReturn:
    """Mark a code path as unreachable for well-formed input.

    The optional env payload is attached to the raised exception for
    diagnostics; it is not evaluated.
    """
    exc_type = _KINDS.get(kind)
    if exc_type is None:
        raise InvariantViolation(
            "unknown invariant kind",
            env={"kind": kind, "allowed": sorted(_KINDS)},
        )
    raise exc_type(reason or f"{kind} invariant violated", env=env)


def require_not_none(value: T | None, *, reason: str = "", **env: object) -> T:
    if value is None:
        never(reason or "required value is None", **env)
    return value
