"""Builder for collation tables.

The typical use is to :meth:`Builder.add` every entry of the root table
(and, eventually, declare tailorings with :meth:`Builder.add_tailoring`)
before calling :meth:`Builder.build`. The weights passed to ``add`` are
only a guide: the stored weights may differ once large primaries are
fused and decomposable entries are pruned.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Sequence

from colltab.build.contraction import SuffixTrieSet, process_contractions
from colltab.build.expansion import process_expansions
from colltab.build.model import CollationLevel, Entry, EntryStore
from colltab.build.outcome import BuildOutcome
from colltab.build.simplify import simplify
from colltab.build.table import CollationTable
from colltab.build.trie import build_trie
from colltab.build.weights import MAX_RUNE, convert_large_weights, normalize_weights
from colltab.exceptions import MalformedDoubleWeight

logger = logging.getLogger(__name__)

ROOT_LOCALE = ""


class Builder:
    """Collects root-table entries and compiles them into a :class:`CollationTable`."""

    def __init__(self) -> None:
        self._store = EntryStore()

    def __len__(self) -> int:
        return len(self._store)

    def add(
        self,
        runes: Sequence[int | str] | str,
        weight_lists: Sequence[Sequence[int]],
    ) -> None:
        """Add an entry mapping ``runes`` to a sequence of collation elements.

        ``runes`` holds code points or single characters. Each element is a
        list of weights ``[primary, secondary, tertiary, quaternary]`` of
        which trailing levels may be left out. An empty list terminates the
        element sequence. Adding the same rune sequence again replaces the
        earlier entry.
        """
        key = tuple(ord(rune) if isinstance(rune, str) else int(rune) for rune in runes)
        if not key:
            raise ValueError("an entry needs at least one rune")
        for rune in key:
            if not 0 <= rune <= MAX_RUNE:
                raise ValueError(f"rune {rune:#x} outside the code point range")
        self._store.put(Entry(runes=key, weights=normalize_weights(weight_lists)))

    def add_tailoring(self, locale: str, x: str, y: str, level: CollationLevel) -> None:
        """Define a tailoring ``x <_level y`` for ``locale``.

        For example, ``add_tailoring("se", "z", "ä", CollationLevel.PRIMARY)``
        sorts "ä" after "z" at the primary level for Swedish. Tailorings are
        not applied yet; the declaration is accepted and ignored.
        See http://www.unicode.org/reports/tr10/#Tailoring_Example.
        """
        logger.debug("ignoring tailoring %r <%s %r for locale %r", x, level.name, y, locale)

    def build(self, locale: str = ROOT_LOCALE) -> CollationTable:
        """Compile the root table.

        Raises the first recorded :class:`~colltab.exceptions.CollationBuildError`
        once every stage has run, or
        :class:`~colltab.exceptions.ContractionIndexConsistency` immediately.
        """
        if locale != ROOT_LOCALE:
            # TODO: support locale tables once add_tailoring records tailorings.
            logger.warning("locale %r is not supported; building the root table", locale)
        store = self._working_copy()
        outcome = BuildOutcome()

        contract_cjk(store, outcome)
        simplify(store)  # requires contract_cjk
        expansion_elements: list[int] = []
        process_expansions(store, expansion_elements, outcome)  # requires simplify
        tries = SuffixTrieSet()
        contraction_elements: list[int] = []
        contractions = process_contractions(store, tries, contraction_elements, outcome)
        trie = build_trie(store, outcome)  # requires process_*

        if outcome.error is not None:
            raise outcome.error
        return CollationTable(
            locale=ROOT_LOCALE,
            trie=trie,
            expansion_elements=tuple(expansion_elements),
            contraction_tries=tuple(tries.nodes),
            contraction_elements=tuple(contraction_elements),
            max_contraction_len=contractions.max_contraction_len,
        )

    def _working_copy(self) -> EntryStore:
        # Stages rewrite entries in place; builds must not see earlier builds.
        store = EntryStore()
        for entry in self._store:
            store.put(dataclasses.replace(entry, weights=list(entry.weights)))
        return store


def contract_cjk(store: EntryStore, outcome: BuildOutcome) -> None:
    """Rewrite DUCET double primaries of every entry into single elements."""
    for entry in store:
        try:
            convert_large_weights(entry.weights)
        except MalformedDoubleWeight as exc:
            exc.env["runes"] = list(entry.runes)
            outcome.record(exc)
