from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from colltab.invariants import never


T = TypeVar("T")


def sort_once(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> list[T]:
    """Canonical sort for values whose order defines an identity.

    ``source`` names the call site; it is not used for sorting.
    """
    return sorted(values, key=key, reverse=reverse)


def enforce_ordered(
    values: Iterable[T],
    *,
    source: str,
    key: Callable[[T], Any] | None = None,
) -> list[T]:
    """Return ``values`` unchanged, failing via `never()` if they are out of order."""
    items = list(values)
    violation = _first_order_violation(items, key=key)
    if violation is not None:
        previous_index, current_index, previous_key, current_key = violation
        never(
            "caller-ordered invariant violated",
            source=source,
            previous_index=previous_index,
            current_index=current_index,
            previous_key=repr(previous_key),
            current_key=repr(current_key),
        )
    return items


def _first_order_violation(
    values: list[T],
    *,
    key: Callable[[T], Any] | None = None,
) -> tuple[int, int, Any, Any] | None:
    markers = [key(value) if key is not None else value for value in values]
    for index in range(1, len(markers)):
        if markers[index - 1] > markers[index]:
            return (index - 1, index, markers[index - 1], markers[index])
    return None
