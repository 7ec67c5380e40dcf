# ᚱᛖᛊᚢᛚᛏ • Results - Located Findings
"""
Findings produced by rules.

A check collects (message, flagged entities) pairs in a Results list. The
engine turns each pair into a Result stamped with the rule definition. The
flagged entities are typed domain objects or values; their metadata gives
the finding its source locations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from gjallarhorn.types import Metadata, NO_RANGE, Range

if TYPE_CHECKING:
    from gjallarhorn.rules.definition import RuleDefinition, Severity


def _metadata_of(entity: Any) -> Metadata:
    if isinstance(entity, Metadata):
        return entity
    metadata = getattr(entity, "metadata", None)
    if not isinstance(metadata, Metadata):
        raise TypeError(f"Cannot flag {type(entity).__name__}: it carries no metadata")
    return metadata


class Results(List[Tuple[str, Tuple[Any, ...]]]):
    """What a check function returns."""

    def add(self, message: str, *entities: Any) -> None:
        if not entities:
            raise ValueError("A result must flag at least one entity")
        for entity in entities:
            _metadata_of(entity)
        self.append((message, tuple(entities)))


@dataclass(frozen=True)
class Result:
    rule: "RuleDefinition"
    message: str
    flagged: Tuple[Any, ...]

    @property
    def rule_id(self) -> str:
        return self.rule.avd_id

    @property
    def severity(self) -> "Severity":
        return self.rule.severity

    @property
    def ranges(self) -> Tuple[Range, ...]:
        return tuple(_metadata_of(entity).range for entity in self.flagged)

    @property
    def range(self) -> Range:
        """The primary location: the first flagged entity."""
        ranges = self.ranges
        return ranges[0] if ranges else NO_RANGE

    @property
    def locations(self) -> Tuple[Tuple[str, int, int], ...]:
        return tuple((r.filename, r.start_line, r.end_line) for r in self.ranges)

    @property
    def reference(self) -> str:
        return _metadata_of(self.flagged[0]).reference if self.flagged else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule.avd_id,
            "long_id": self.rule.long_id,
            "severity": self.rule.severity.value,
            "message": self.message,
            "resource": self.reference,
            "locations": [r.to_dict() for r in self.ranges],
            "resolution": self.rule.resolution,
            "links": list(self.rule.links),
        }

    def __str__(self) -> str:
        return f"{self.rule_id} [{self.severity.value}] {self.range}: {self.message}"
