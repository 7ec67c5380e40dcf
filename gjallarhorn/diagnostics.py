# ᚾᚨᚢᚦᛁᛉ • Naudiz - The Rune of Need (Diagnostics)
"""
Non-fatal diagnostics.

Anything that goes wrong for a single document, resource or rule is recorded
here instead of propagating, so that a scan always completes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from gjallarhorn.types.range import Range


class DiagnosticKind(str, Enum):
    PARSE = "parse"
    ADAPTATION = "adaptation"
    REFERENCE = "reference"
    RULE_EXECUTION = "rule_execution"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Diagnostic:
    """A partial failure that did not stop the scan."""
    kind: DiagnosticKind
    message: str
    source: str = ""  # filename, resource address or rule id
    range: Optional[Range] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "source": self.source,
            "range": self.range.to_dict() if self.range else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        where = str(self.range) if self.range else self.source
        return f"[{self.kind.value}] {where}: {self.message}"
