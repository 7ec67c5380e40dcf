from __future__ import annotations

import pytest

from gjallarhorn.exceptions import DuplicateRuleError, RegistryFrozenError
from gjallarhorn.providers import Provider
from gjallarhorn.rules import Results, RuleRegistry, Severity, rule


def make_rule(avd_id: str, severity: Severity = Severity.LOW, provider: Provider = Provider.AWS):
    @rule(
        avd_id=avd_id,
        provider=provider,
        service="test",
        short_code=avd_id.lower(),
        summary=f"Rule {avd_id}",
        severity=severity,
    )
    def check(state):
        return Results()
    return check


def test_duplicate_identifiers_are_rejected() -> None:
    registry = RuleRegistry([make_rule("AVD-TEST-0001")])

    with pytest.raises(DuplicateRuleError) as excinfo:
        registry.register(make_rule("AVD-TEST-0001"))

    assert excinfo.value.rule_id == "AVD-TEST-0001"
    assert len(registry) == 1


def test_frozen_registry_refuses_registration() -> None:
    registry = RuleRegistry().freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register(make_rule("AVD-TEST-0001"))


def test_iteration_is_sorted_by_identifier() -> None:
    registry = RuleRegistry([make_rule("AVD-TEST-0003"), make_rule("AVD-TEST-0001"), make_rule("AVD-TEST-0002")])

    assert [r.id for r in registry] == ["AVD-TEST-0001", "AVD-TEST-0002", "AVD-TEST-0003"]
    assert "AVD-TEST-0002" in registry
    assert registry.get("AVD-TEST-0009") is None


def test_builtin_rules() -> None:
    registry = RuleRegistry.builtin()
    ids = [r.id for r in registry]

    assert len(registry) == 26
    assert ids == sorted(ids)
    assert len({r.definition.long_id for r in registry}) == 26
    assert "AVD-AWS-0081" in registry
    assert registry.get("AVD-AWS-0081").definition.long_id == "aws-rds-no-classic-resources"
    assert all(r.definition.formats for r in registry)


def test_builtin_returns_a_fresh_registry() -> None:
    first = RuleRegistry.builtin().freeze()
    second = RuleRegistry.builtin()

    assert not second.frozen
    assert [r.id for r in first] == [r.id for r in second]


def test_filtering_by_identifier() -> None:
    registry = RuleRegistry.builtin()

    included = registry.filtered(include=["AVD-AWS-0081", "openstack-compute-no-plaintext-password"])
    assert [r.id for r in included] == ["AVD-AWS-0081", "AVD-OPNSTK-0001"]
    assert included.frozen

    excluded = registry.filtered(exclude=["AVD-AWS-0081"])
    assert len(excluded) == 25
    assert "AVD-AWS-0081" not in excluded


def test_filtering_by_provider_and_severity() -> None:
    registry = RuleRegistry.builtin()

    openstack = registry.filtered(providers=[Provider.OPENSTACK])
    assert len(openstack) == 5
    assert all(r.definition.provider == Provider.OPENSTACK for r in openstack)

    critical = registry.filtered(minimum_severity=Severity.CRITICAL)
    assert [r.id for r in critical] == ["AVD-AWS-0081", "AVD-AWS-0082"]
    assert all(r.severity == Severity.CRITICAL for r in critical)

    assert len(registry.filtered(minimum_severity=Severity.LOW)) == 26
    assert len(registry.filtered(providers=[Provider.OPENSTACK], minimum_severity=Severity.MEDIUM)) == 4


def test_severity_parsing_and_order() -> None:
    assert Severity.parse(" high ") == Severity.HIGH
    assert Severity.CRITICAL.at_least(Severity.HIGH)
    assert not Severity.LOW.at_least(Severity.MEDIUM)

    with pytest.raises(ValueError):
        Severity.parse("urgent")
