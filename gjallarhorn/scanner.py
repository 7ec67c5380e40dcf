# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                         ᚷᛃᚨᛚᛚᚨᚱᚺᛟᚱᚾ • THE SCAN
#                  From Files on Disk to Located Findings
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   load (parsers) -> adapt (adapters) -> evaluate (rules) -> baseline
#
#   Every stage records what went wrong as diagnostics and carries on, so
#   a scan always produces a report.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from gjallarhorn import __version__
from gjallarhorn.adapters import adapt
from gjallarhorn.baseline import Baseline
from gjallarhorn.config import ScanConfig
from gjallarhorn.diagnostics import Diagnostic
from gjallarhorn.parsers.loader import LoadedSources, SourceLoader
from gjallarhorn.rules.definition import Severity
from gjallarhorn.rules.engine import Engine
from gjallarhorn.rules.registry import RuleRegistry
from gjallarhorn.rules.result import Result
from gjallarhorn.state import State

logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """Everything a scan produced."""
    results: List[Result] = field(default_factory=list)
    ignored: List[Dict[str, Any]] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    cancelled: bool = False
    rules_evaluated: int = 0
    files_read: int = 0
    resources: Dict[str, int] = field(default_factory=dict)
    ignore_stats: Dict[str, Any] = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def severity_summary(self) -> Dict[str, int]:
        summary = {severity.value: 0 for severity in Severity}
        for result in self.results:
            summary[result.severity.value] += 1
        return summary

    def has_findings_at_or_above(self, severity: Severity) -> bool:
        return any(r.severity.at_least(severity) for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": __version__,
            "summary": {
                "total": len(self.results),
                "ignored": len(self.ignored),
                "by_severity": self.severity_summary,
                "rules_evaluated": self.rules_evaluated,
                "files_read": self.files_read,
                "cancelled": self.cancelled,
                "duration_seconds": round(self.duration_seconds, 3),
            },
            "resources": self.resources,
            "results": [r.to_dict() for r in self.results],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class Scanner:
    """Runs a configured scan over files and directories."""

    def __init__(self, config: Optional[ScanConfig] = None, registry: Optional[RuleRegistry] = None):
        self.config = config or ScanConfig()
        self.registry = registry if registry is not None else RuleRegistry.builtin()

    def selected_rules(self) -> RuleRegistry:
        return self.registry.filtered(
            include=self.config.include_rules,
            exclude=self.config.exclude_rules,
            providers=self.config.providers,
            minimum_severity=self.config.minimum_severity,
        )

    def scan_paths(self, paths: Iterable[str], cancel_event: Optional[threading.Event] = None) -> ScanReport:
        started = time.monotonic()
        paths = list(paths)
        logger.info(f"Scanning {', '.join(paths)}")

        sources = SourceLoader(self.config.exclude_paths).load(paths)
        report = self.scan_sources(sources, cancel_event)
        report.duration_seconds = time.monotonic() - started
        logger.info(
            f"Scan finished in {report.duration_seconds:.2f}s: "
            f"{len(report.results)} result(s), {len(report.ignored)} ignored"
        )
        return report

    def scan_sources(self, sources: LoadedSources, cancel_event: Optional[threading.Event] = None) -> ScanReport:
        state, adapt_diagnostics = adapt(modules=sources.terraform, templates=sources.cloudformation)
        report = self.scan_state(state, cancel_event)
        report.files_read = sources.files_read
        report.diagnostics = sources.diagnostics + adapt_diagnostics + report.diagnostics
        return report

    def scan_state(self, state: State, cancel_event: Optional[threading.Event] = None) -> ScanReport:
        engine = Engine(self.selected_rules(), workers=self.config.workers, timeout=self.config.timeout)
        evaluation = engine.evaluate(state, cancel_event)

        baseline = Baseline.load(self.config.ignore_file)
        kept, ignored, stats = baseline.filter_results(evaluation.results)

        return ScanReport(
            results=kept,
            ignored=ignored,
            diagnostics=list(evaluation.diagnostics),
            cancelled=evaluation.cancelled,
            rules_evaluated=evaluation.rules_evaluated,
            resources=state.counts(),
            ignore_stats=stats,
        )
