"""colltab package root."""

from colltab.exceptions import (
    CollationBuildError,
    ContractionIndexConsistency,
    ContractionMissingBaseEntry,
    InvariantViolation,
    MalformedDoubleWeight,
    PackingError,
)
from colltab.invariants import never

__all__ = [
    "__version__",
    "CollationBuildError",
    "ContractionIndexConsistency",
    "ContractionMissingBaseEntry",
    "InvariantViolation",
    "MalformedDoubleWeight",
    "PackingError",
    "never",
]

__version__ = "0.1.0"
