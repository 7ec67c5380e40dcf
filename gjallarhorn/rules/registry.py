# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                       ᚺᛖᛁᛗᛞᚨᛚᛚ • RULE REGISTRY
#                  Registration, Discovery and Freezing of Rules
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   A registry is an ordinary object handed to the engine. Nothing registers
#   itself on import: RuleRegistry.builtin() walks the gjallarhorn.rules
#   package tree and registers every Rule it finds.
#
#   Iteration order is always by rule identifier, so results do not depend
#   on the order in which rules were registered or modules were imported.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import Dict, Iterable, Iterator, List, Optional

from gjallarhorn.exceptions import DuplicateRuleError, RegistryFrozenError
from gjallarhorn.providers import Provider
from gjallarhorn.rules.definition import Rule, Severity

logger = logging.getLogger(__name__)

BUILTIN_PACKAGE = "gjallarhorn.rules"


class RuleRegistry:
    """Rules keyed by identifier."""

    def __init__(self, rules: Iterable[Rule] = ()):
        self._rules: Dict[str, Rule] = {}
        self._frozen = False
        for item in rules:
            self.register(item)

    # ────────────────────────────────────────────────────────────────────
    # Registration
    # ────────────────────────────────────────────────────────────────────

    def register(self, rule: Rule) -> Rule:
        """Insert a rule; returns it so the caller can keep a handle."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{rule.id}': registry is frozen")
        if rule.id in self._rules:
            raise DuplicateRuleError(rule.id)
        self._rules[rule.id] = rule
        logger.debug(f"Registered rule {rule.id} ({rule.definition.long_id})")
        return rule

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ────────────────────────────────────────────────────────────────────
    # Lookup
    # ────────────────────────────────────────────────────────────────────

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def rules(self) -> List[Rule]:
        """All rules, sorted by identifier."""
        return [self._rules[rule_id] for rule_id in sorted(self._rules)]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules())

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def filtered(
        self,
        include: Iterable[str] = (),
        exclude: Iterable[str] = (),
        providers: Iterable[Provider] = (),
        minimum_severity: Optional[Severity] = None,
    ) -> "RuleRegistry":
        """A new, frozen registry holding the rules that pass every filter."""
        include_ids = {i for i in include}
        exclude_ids = {e for e in exclude}
        provider_set = set(providers)

        def keep(rule: Rule) -> bool:
            names = {rule.id, rule.definition.long_id}
            if include_ids and not names & include_ids:
                return False
            if names & exclude_ids:
                return False
            if provider_set and rule.definition.provider not in provider_set:
                return False
            if minimum_severity is not None and not rule.severity.at_least(minimum_severity):
                return False
            return True

        return RuleRegistry(r for r in self.rules() if keep(r)).freeze()

    # ────────────────────────────────────────────────────────────────────
    # Discovery
    # ────────────────────────────────────────────────────────────────────

    @classmethod
    def builtin(cls) -> "RuleRegistry":
        """A registry holding every rule shipped in the gjallarhorn.rules package."""
        registry = cls()
        for item in discover(BUILTIN_PACKAGE):
            registry.register(item)
        logger.debug(f"Discovered {len(registry)} built-in rules")
        return registry


def discover(package_name: str) -> List[Rule]:
    """Import every module below package_name and collect module-level Rule objects."""
    package = importlib.import_module(package_name)
    found: List[Rule] = []
    seen = set()
    for info in pkgutil.walk_packages(package.__path__, prefix=f"{package_name}."):
        module = importlib.import_module(info.name)
        for value in vars(module).values():
            if isinstance(value, Rule) and id(value) not in seen:
                seen.add(id(value))
                found.append(value)
    return found
