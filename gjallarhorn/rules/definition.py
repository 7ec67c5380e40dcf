# ᛏᛁᚹᚨᛉ • Tiwaz - The Rune of Law (Rule Definitions)
"""
Rule definitions and the @rule decorator.

A rule is an immutable value: its definition (identity, severity, prose and
per-format examples) plus a check function that reads the frozen state and
returns Results. Declaring a rule does not register it anywhere; registries
pick rules up explicitly.

Usage:
    @rule(
        avd_id="AVD-AWS-0081",
        provider=Provider.AWS,
        service="rds",
        short_code="no-classic-resources",
        summary="AWS Classic resource usage.",
        severity=Severity.CRITICAL,
    )
    def check_no_classic_resources(state: State) -> Results:
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple

from gjallarhorn.providers import Provider
from gjallarhorn.rules.result import Result, Results

if TYPE_CHECKING:
    from gjallarhorn.state import State


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def at_least(self, other: "Severity") -> bool:
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str) -> "Severity":
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown severity '{value}', expected one of: {', '.join(s.value for s in cls)}"
            ) from None


_SEVERITY_RANK: Dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


@dataclass(frozen=True)
class EngineMetadata:
    """Per-format documentation: example sources, links and remediation text."""
    good_examples: Tuple[str, ...] = ()
    bad_examples: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()
    remediation_markdown: str = ""


@dataclass(frozen=True)
class RuleDefinition:
    avd_id: str
    provider: Provider
    service: str
    short_code: str
    summary: str
    severity: Severity
    impact: str = ""
    resolution: str = ""
    explanation: str = ""
    links: Tuple[str, ...] = ()
    terraform: Optional[EngineMetadata] = None
    cloudformation: Optional[EngineMetadata] = None

    @property
    def long_id(self) -> str:
        """e.g. aws-rds-no-classic-resources"""
        return f"{self.provider.value}-{self.service}-{self.short_code}"

    @property
    def formats(self) -> List[str]:
        found = []
        if self.terraform is not None:
            found.append("terraform")
        if self.cloudformation is not None:
            found.append("cloudformation")
        return found

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.avd_id,
            "long_id": self.long_id,
            "provider": self.provider.value,
            "service": self.service,
            "short_code": self.short_code,
            "severity": self.severity.value,
            "summary": self.summary,
            "impact": self.impact,
            "resolution": self.resolution,
            "links": list(self.links),
            "formats": self.formats,
        }


CheckFunction = Callable[["State"], Results]


@dataclass(frozen=True)
class Rule:
    definition: RuleDefinition
    check: CheckFunction

    @property
    def id(self) -> str:
        return self.definition.avd_id

    @property
    def severity(self) -> Severity:
        return self.definition.severity

    def evaluate(self, state: "State") -> List[Result]:
        """Run the check and stamp every result with this rule's definition."""
        results = self.check(state) or Results()
        return [
            Result(rule=self.definition, message=message, flagged=flagged)
            for message, flagged in results
        ]


def rule(
    *,
    avd_id: str,
    provider: Provider,
    service: str,
    short_code: str,
    summary: str,
    severity: Severity,
    impact: str = "",
    resolution: str = "",
    explanation: str = "",
    links: Sequence[str] = (),
    terraform: Optional[EngineMetadata] = None,
    cloudformation: Optional[EngineMetadata] = None,
) -> Callable[[CheckFunction], Rule]:
    """Turn a check function into an immutable Rule."""
    definition = RuleDefinition(
        avd_id=avd_id,
        provider=provider,
        service=service,
        short_code=short_code,
        summary=summary,
        severity=severity,
        impact=impact,
        resolution=resolution,
        explanation=explanation,
        links=tuple(links),
        terraform=terraform,
        cloudformation=cloudformation,
    )

    def decorator(check: CheckFunction) -> Rule:
        return Rule(definition=definition, check=check)

    return decorator
