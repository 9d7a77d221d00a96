"""Error kinds raised and recorded while compiling collation tables."""

from __future__ import annotations

from typing import Mapping


class InvariantViolation(RuntimeError):
    """Sentinel exception for states that corrupt input data makes reachable.

    Raising this exception aborts the build outright. It does not derive from
    :class:`CollationBuildError` so that callers handling recorded errors
    cannot accidentally swallow it.
    """

    def __init__(self, message: str, *, env: Mapping[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})


class ContractionIndexConsistency(InvariantViolation):
    """Suffix-trie lookup produced an out-of-range or duplicated position."""


class CollationBuildError(Exception):
    """Base class for errors recorded by a build stage.

    Recorded errors do not stop the pipeline; the first one is surfaced by
    :meth:`colltab.build.builder.Builder.build` once all stages ran.
    """

    kind = "collation_build_error"

    def __init__(self, message: str, **env: object):
        super().__init__(message)
        self.reason = message
        self.env = env

    def __str__(self) -> str:
        runes = self.env.get("runes")
        if isinstance(runes, (list, tuple)) and runes:
            return f"{format_runes(runes)}: {self.reason}"
        return self.reason

    def payload(self) -> dict[str, object]:
        return {"kind": self.kind, "reason": self.reason, "env": dict(self.env)}


class MalformedDoubleWeight(CollationBuildError):
    kind = "malformed_double_weight"


class ContractionMissingBaseEntry(CollationBuildError):
    kind = "contraction_missing_base_entry"


class PackingError(CollationBuildError):
    """A value does not fit the packed collation element representation."""

    kind = "packing_error"


def format_runes(runes: object) -> str:
    if not isinstance(runes, (list, tuple)):
        return str(runes)
    return " ".join(f"U+{int(rune):04X}" for rune in runes)
