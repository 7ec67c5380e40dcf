# ᚹᚢᚾᛃᛟ • Wunjo - The Rune of Values
"""
Provenance-tracked scalar values.

Every field of every typed domain object is one of these. A value knows its
payload and where it came from; a default value knows the block it would have
been written in. Unresolvable values answer False to every predicate so that
rules stay quiet about input they cannot see.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, TypeVar

from gjallarhorn.types.range import Metadata, Range

T = TypeVar("T")


@dataclass(frozen=True)
class Value(Generic[T]):
    """A scalar payload together with its provenance."""
    value: T
    metadata: Metadata

    @property
    def range(self) -> Range:
        return self.metadata.range

    @property
    def reference(self) -> str:
        return self.metadata.reference

    @property
    def is_default(self) -> bool:
        return self.metadata.is_default

    @property
    def is_set(self) -> bool:
        """True when the attribute was present in the source."""
        return not self.metadata.is_default

    @property
    def is_resolvable(self) -> bool:
        return not self.metadata.is_unresolvable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "range": self.metadata.range.to_dict(),
            "default": self.metadata.is_default,
            "resolvable": self.is_resolvable,
        }


@dataclass(frozen=True)
class StringValue(Value[str]):

    @classmethod
    def of(cls, value: str, metadata: Metadata) -> "StringValue":
        return cls(value, metadata)

    @classmethod
    def default(cls, value: str, metadata: Metadata) -> "StringValue":
        return cls(value, metadata.as_default())

    @classmethod
    def unresolvable(cls, metadata: Metadata) -> "StringValue":
        return cls("", metadata.as_unresolvable())

    def is_empty(self) -> bool:
        return self.is_resolvable and self.value == ""

    def is_not_empty(self) -> bool:
        return self.is_resolvable and self.value != ""

    def equal_to(self, other: str, ignore_case: bool = False) -> bool:
        if not self.is_resolvable:
            return False
        if ignore_case:
            return self.value.lower() == other.lower()
        return self.value == other

    def is_one_of(self, *values: str, ignore_case: bool = False) -> bool:
        return any(self.equal_to(v, ignore_case=ignore_case) for v in values)

    def starts_with(self, prefix: str) -> bool:
        return self.is_resolvable and self.value.startswith(prefix)

    def ends_with(self, suffix: str) -> bool:
        return self.is_resolvable and self.value.endswith(suffix)

    def contains(self, fragment: str) -> bool:
        return self.is_resolvable and fragment in self.value


@dataclass(frozen=True)
class BoolValue(Value[bool]):

    @classmethod
    def of(cls, value: bool, metadata: Metadata) -> "BoolValue":
        return cls(value, metadata)

    @classmethod
    def default(cls, value: bool, metadata: Metadata) -> "BoolValue":
        return cls(value, metadata.as_default())

    @classmethod
    def unresolvable(cls, metadata: Metadata) -> "BoolValue":
        return cls(False, metadata.as_unresolvable())

    def is_true(self) -> bool:
        return self.is_resolvable and self.value is True

    def is_false(self) -> bool:
        return self.is_resolvable and self.value is False


@dataclass(frozen=True)
class IntValue(Value[int]):

    @classmethod
    def of(cls, value: int, metadata: Metadata) -> "IntValue":
        return cls(value, metadata)

    @classmethod
    def default(cls, value: int, metadata: Metadata) -> "IntValue":
        return cls(value, metadata.as_default())

    @classmethod
    def unresolvable(cls, metadata: Metadata) -> "IntValue":
        return cls(0, metadata.as_unresolvable())

    def equal_to(self, other: int) -> bool:
        return self.is_resolvable and self.value == other

    def less_than(self, other: int) -> bool:
        return self.is_resolvable and self.value < other

    def greater_than(self, other: int) -> bool:
        return self.is_resolvable and self.value > other
