from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from colltab.build.colelem import make_ce
from colltab.build.model import Entry, EntryStore, WeightKey, weights_key
from colltab.build.outcome import BuildOutcome
from colltab.exceptions import PackingError

logger = logging.getLogger(__name__)


def append_expansion(elements: List[int], entry: Entry) -> int:
    """Append a count-prefixed record for ``entry`` and return its index.

    ``elements`` is left unchanged when a weight does not pack.
    """
    try:
        packed = [make_ce(weight) for weight in entry.weights]
    except PackingError as exc:
        exc.env.update(runes=list(entry.runes), weights=[list(w) for w in entry.weights])
        raise
    index = len(elements)
    elements.append(len(packed))
    elements.extend(packed)
    return index


def process_expansions(
    store: EntryStore,
    elements: List[int],
    outcome: BuildOutcome,
) -> int:
    """Assign expansion indexes, sharing records between equal weight runs."""
    index_by_key: Dict[Tuple[WeightKey, ...], int] = {}
    for entry in store:
        if not entry.is_expansion:
            continue
        key = weights_key(entry.weights)
        index = index_by_key.get(key)
        if index is None:
            try:
                index = append_expansion(elements, entry)
            except PackingError as exc:
                outcome.record(exc)
                index = -1
            index_by_key[key] = index
        entry.expansion_index = index
    logger.info(
        "expansions: %d records, %d elements",
        sum(1 for index in index_by_key.values() if index >= 0),
        len(elements),
    )
    return len(index_by_key)
