# ᛒᚨᛊᛖᛚᛁᚾᛖ • Baseline - Accepted Findings
"""
Baseline system for ignoring known/accepted findings.

Like Odin's ravens Huginn and Muninn, this module remembers which findings
have been reviewed and accepted.

Reads a .gjallarhorn-ignore file, either one rule per line:

    rule:AVD-AWS-0089            # access logs go to the SIEM instead
    rule:aws-sam-*               # serverless stack is tracked elsewhere
    path:examples/*              # sample code
    severity:LOW
    hash:3f9a0c1d2e4b5a69

or JSON:

    {"rules": [{"rule": "AVD-AWS-0089", "reason": "...", "expires": "2027-01-01"}]}

Usage:
    baseline = Baseline.load('.gjallarhorn-ignore')
    kept, ignored, stats = baseline.filter_results(results)
"""

from __future__ import annotations

import fnmatch
import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from gjallarhorn.exceptions import ConfigError
from gjallarhorn.rules.result import Result

logger = logging.getLogger(__name__)

IGNORE_FILENAMES = (".gjallarhorn-ignore", ".gjallarhorn-baseline", "gjallarhorn-ignore.json")


@dataclass
class IgnoreRule:
    """A single ignore rule from a baseline file."""
    pattern: str = ""
    reason: str = ""
    expires: Optional[str] = None  # ISO date
    added_at: str = ""

    # Match criteria
    rule: Optional[str] = None
    path: Optional[str] = None
    severity: Optional[str] = None
    finding_hash: Optional[str] = None

    @property
    def label(self) -> str:
        for prefix, value in (("rule", self.rule), ("path", self.path),
                              ("severity", self.severity), ("hash", self.finding_hash)):
            if value:
                return f"{prefix}:{value}"
        return self.pattern or "unknown"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self.expires:
            return False
        try:
            expire_date = datetime.fromisoformat(self.expires)
        except ValueError:
            logger.warning(f"Ignoring invalid expiry date '{self.expires}' on {self.label}")
            return False
        return (now or datetime.now()) > expire_date

    def matches(self, result: Result) -> bool:
        if self.is_expired():
            return False

        if self.finding_hash:
            return generate_result_hash(result) == self.finding_hash

        criteria = False
        if self.rule:
            criteria = True
            if not any(fnmatch.fnmatch(name, self.rule) for name in (result.rule_id, result.rule.long_id)):
                return False

        if self.path:
            criteria = True
            if not any(_path_matches(filename, self.path) for filename, _, _ in result.locations):
                return False

        if self.severity:
            criteria = True
            if result.severity.value != self.severity.upper():
                return False

        if criteria:
            return True

        # bare pattern: substring of the rule ids, the message or a file name
        if self.pattern:
            haystack = " ".join([result.rule_id, result.rule.long_id, result.message]
                                + [filename for filename, _, _ in result.locations])
            return self.pattern in haystack
        return False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "pattern": self.pattern,
            "rule": self.rule,
            "path": self.path,
            "severity": self.severity,
            "hash": self.finding_hash,
            "reason": self.reason,
            "expires": self.expires,
            "added_at": self.added_at,
        }
        return {k: v for k, v in data.items() if v}


def _path_matches(filename: str, pattern: str) -> bool:
    posix = Path(filename).as_posix()
    return fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(posix, f"*/{pattern}")


@dataclass
class Baseline:
    """Manages baseline/ignore rules."""
    rules: List[IgnoreRule] = field(default_factory=list)
    file_path: Optional[str] = None

    @classmethod
    def load(cls, file_path: Optional[str] = None, directory: str = ".") -> "Baseline":
        """
        Load the ignore file at file_path, or the first default ignore file in
        directory. A missing default file gives an empty baseline.
        """
        baseline = cls()
        if file_path:
            if not Path(file_path).is_file():
                raise ConfigError(f"Ignore file not found: {file_path}")
            search_paths = [Path(file_path)]
        else:
            search_paths = [Path(directory) / name for name in IGNORE_FILENAMES]

        for path in search_paths:
            if path.is_file():
                baseline.file_path = str(path)
                baseline._load_file(path)
                logger.info(f"Loaded {len(baseline.rules)} ignore rule(s) from {path}")
                break
        return baseline

    def _load_file(self, path: Path) -> None:
        content = path.read_text(encoding="utf-8").strip()
        if path.suffix == ".json" or content.startswith(("{", "[")):
            self._load_json(content, path)
        else:
            self._load_text(content)

    def _load_json(self, content: str, path: Path) -> None:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from None

        rules_data = data if isinstance(data, list) else data.get("rules", data.get("ignore", []))
        for rule_data in rules_data:
            if isinstance(rule_data, str):
                self.rules.append(_parse_pattern(rule_data))
                continue
            self.rules.append(IgnoreRule(
                pattern=rule_data.get("pattern", ""),
                reason=rule_data.get("reason", ""),
                expires=rule_data.get("expires"),
                added_at=rule_data.get("added_at", ""),
                rule=rule_data.get("rule"),
                path=rule_data.get("path"),
                severity=rule_data.get("severity"),
                finding_hash=rule_data.get("hash"),
            ))

    def _load_text(self, content: str) -> None:
        for line in content.split("\n"):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            # pattern [# reason]
            pattern, _, reason = line.partition("#")
            self.rules.append(_parse_pattern(pattern.strip(), reason.strip()))

    def filter_results(self, results: List[Result]) -> Tuple[List[Result], List[Dict[str, Any]], Dict[str, Any]]:
        """
        Split results into kept and ignored.

        Returns:
            (kept_results, ignored_entries, ignore_stats)
        """
        kept: List[Result] = []
        ignored: List[Dict[str, Any]] = []
        stats: Dict[str, Any] = {
            "total": len(results),
            "ignored": 0,
            "by_rule": {},
        }

        for result in results:
            matched = next((r for r in self.rules if r.matches(result)), None)
            if matched is None:
                kept.append(result)
                continue
            ignored.append({"result": result, "rule": matched.label, "reason": matched.reason})
            stats["ignored"] += 1
            stats["by_rule"][matched.label] = stats["by_rule"].get(matched.label, 0) + 1

        if stats["ignored"]:
            logger.info(f"Baseline ignored {stats['ignored']} of {stats['total']} result(s)")
        return kept, ignored, stats

    def add_result(self, result: Result, reason: str = "") -> str:
        """Accept one exact result; returns its hash."""
        finding_hash = generate_result_hash(result)
        self.rules.append(IgnoreRule(
            finding_hash=finding_hash,
            reason=reason or f"{result.rule_id} at {result.range}",
            added_at=datetime.now().isoformat(timespec="seconds"),
        ))
        return finding_hash

    def save(self, file_path: Optional[str] = None) -> str:
        """Write the baseline as JSON; returns the path written."""
        path = file_path or self.file_path or IGNORE_FILENAMES[0]
        data = {
            "version": "1.0",
            "updated_at": datetime.now().isoformat(timespec="seconds"),
            "rules": [r.to_dict() for r in self.rules],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return path


def _parse_pattern(pattern: str, reason: str = "") -> IgnoreRule:
    """Turn a `prefix:value` line into an IgnoreRule."""
    rule = IgnoreRule(reason=reason)
    prefix, sep, value = pattern.partition(":")
    value = value.strip()
    if sep and prefix == "rule":
        rule.rule = value
    elif sep and prefix == "path":
        rule.path = value
    elif sep and prefix == "severity":
        rule.severity = value
    elif sep and prefix == "hash":
        rule.finding_hash = value
    else:
        rule.pattern = pattern
    return rule


def generate_result_hash(result: Result) -> str:
    """Stable identifier of a result: rule, file and line range."""
    r = result.range
    key_str = "|".join([result.rule_id, Path(r.filename).as_posix(), str(r.start_line), str(r.end_line)])
    return hashlib.sha256(key_str.encode()).hexdigest()[:16]
