"""Collation table build pipeline."""

from colltab.build.builder import ROOT_LOCALE, Builder
from colltab.build.colelem import ElementTag, UnpackedElement, unpack
from colltab.build.model import CollationLevel, ContractionHandle, Entry, Weight
from colltab.build.table import CollationTable
from colltab.build.weights import (
    DEFAULT_SECONDARY,
    DEFAULT_TERTIARY,
    MAX_TERTIARY,
    implicit_primary,
)

__all__ = [
    "Builder",
    "CollationLevel",
    "CollationTable",
    "ContractionHandle",
    "DEFAULT_SECONDARY",
    "DEFAULT_TERTIARY",
    "ElementTag",
    "Entry",
    "MAX_TERTIARY",
    "ROOT_LOCALE",
    "UnpackedElement",
    "Weight",
    "implicit_primary",
    "unpack",
]
