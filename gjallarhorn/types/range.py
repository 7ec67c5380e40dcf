# ᚱᚨᛁᛞᛟ • Raidho - The Rune of the Journey (Source Ranges)
"""
Source ranges and the metadata attached to every extracted value.

A Range answers "where was this written?", Metadata answers "where, under
which logical path, and was it actually written at all?".
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict


@dataclass(frozen=True)
class Range:
    """A span of lines (and optionally columns) inside one source file."""
    filename: str
    start_line: int
    end_line: int
    start_column: int = 0
    end_column: int = 0

    def __post_init__(self):
        if self.end_line < self.start_line:
            raise ValueError(
                f"Range end line {self.end_line} precedes start line {self.start_line}"
            )

    @property
    def is_multi_line(self) -> bool:
        return self.end_line > self.start_line

    def includes(self, other: "Range") -> bool:
        """Check whether another range lies entirely inside this one."""
        return (
            self.filename == other.filename
            and self.start_line <= other.start_line
            and other.end_line <= self.end_line
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}"
        return f"{self.filename}:{self.start_line}-{self.end_line}"


NO_RANGE = Range(filename="", start_line=0, end_line=0)


@dataclass(frozen=True)
class Metadata:
    """
    Provenance of a value or typed object.

    Only the range takes part in equality; the logical path and the flags
    describe how the value came to be and are ignored when comparing.

    Attributes:
        range: Where the value was declared (or, for defaults, the enclosing block)
        reference: Logical path, e.g. "openstack_compute_instance_v2.web.admin_pass"
        is_managed: False for aggregates that do not map to any source block
        is_default: True when the value was synthesized because the source omitted it
        is_unresolvable: True when the source expression could not be evaluated
    """
    range: Range
    reference: str = field(default="", compare=False)
    is_managed: bool = field(default=True, compare=False)
    is_default: bool = field(default=False, compare=False)
    is_unresolvable: bool = field(default=False, compare=False)

    @classmethod
    def unmanaged(cls) -> "Metadata":
        """Metadata for aggregate nodes (provider roots) with no source of their own."""
        return cls(range=NO_RANGE, is_managed=False)

    def as_default(self) -> "Metadata":
        return replace(self, is_default=True, is_unresolvable=False)

    def as_unresolvable(self) -> "Metadata":
        return replace(self, is_unresolvable=True, is_default=False)

    def with_reference(self, reference: str) -> "Metadata":
        return replace(self, reference=reference)

    @property
    def is_explicit(self) -> bool:
        """True when the value was written in the source and could be read."""
        return self.is_managed and not self.is_default and not self.is_unresolvable

    def to_dict(self) -> Dict[str, Any]:
        data = self.range.to_dict()
        data["reference"] = self.reference
        return data
