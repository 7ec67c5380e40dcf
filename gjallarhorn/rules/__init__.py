# ᛏᛁᚹᚨᛉ • Tiwaz - The Rules of the Watch
"""
Security rules and the machinery that runs them.

Built-in rules live in the provider/service sub-packages below and are found
by RuleRegistry.builtin(); importing this package does not load them.
"""

from gjallarhorn.rules.definition import EngineMetadata, Rule, RuleDefinition, Severity, rule
from gjallarhorn.rules.engine import Engine, Evaluation, evaluate
from gjallarhorn.rules.registry import RuleRegistry
from gjallarhorn.rules.result import Result, Results

__all__ = [
    "Engine",
    "EngineMetadata",
    "Evaluation",
    "Result",
    "Results",
    "Rule",
    "RuleDefinition",
    "RuleRegistry",
    "Severity",
    "evaluate",
    "rule",
]
