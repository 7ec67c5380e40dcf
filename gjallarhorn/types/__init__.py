# ᛏᚢᛈᛖᛊ • Types - Provenance-Tracked Values
"""Provenance-tracked values shared by parsers, adapters and rules."""

from gjallarhorn.types.range import Range, Metadata, NO_RANGE
from gjallarhorn.types.values import Value, StringValue, BoolValue, IntValue

__all__ = [
    "Range",
    "Metadata",
    "NO_RANGE",
    "Value",
    "StringValue",
    "BoolValue",
    "IntValue",
]
