from __future__ import annotations

import dataclasses
import os
import subprocess
import sys
import textwrap
import threading
import time
from pathlib import Path

import pytest

from gjallarhorn.diagnostics import DiagnosticKind
from gjallarhorn.providers import Provider
from gjallarhorn.rules import Engine, Results, RuleRegistry, Severity, evaluate, rule
from gjallarhorn.state import State
from gjallarhorn.types import Metadata, Range


def make_rule(avd_id: str, check):
    return rule(
        avd_id=avd_id,
        provider=Provider.AWS,
        service="test",
        short_code=avd_id.lower(),
        summary=f"Rule {avd_id}",
        severity=Severity.MEDIUM,
    )(check)


def flagging(line: int):
    def check(state):
        results = Results()
        results.add(f"line {line}", Metadata(Range("main.tf", line, line)))
        return results
    return check


def failing(state):
    raise RuntimeError("boom")


def test_results_follow_rule_identifier_order() -> None:
    registry = RuleRegistry([
        make_rule("AVD-TEST-0003", flagging(3)),
        make_rule("AVD-TEST-0001", flagging(1)),
        make_rule("AVD-TEST-0002", flagging(2)),
    ])

    evaluation = Engine(registry, workers=3).evaluate(State())

    assert [r.rule_id for r in evaluation.results] == ["AVD-TEST-0001", "AVD-TEST-0002", "AVD-TEST-0003"]
    assert [r.range.start_line for r in evaluation.results] == [1, 2, 3]
    assert evaluation.rules_evaluated == 3
    assert not evaluation.cancelled
    assert registry.frozen


def test_a_failing_rule_does_not_stop_the_others() -> None:
    registry = RuleRegistry([
        make_rule("AVD-TEST-0001", flagging(1)),
        make_rule("AVD-TEST-0002", failing),
        make_rule("AVD-TEST-0003", flagging(3)),
    ])

    evaluation = Engine(registry, workers=2).evaluate(State())

    assert [r.rule_id for r in evaluation.results] == ["AVD-TEST-0001", "AVD-TEST-0003"]
    assert evaluation.failed_rules == ["AVD-TEST-0002"]
    assert evaluation.diagnostics[0].kind == DiagnosticKind.RULE_EXECUTION
    assert "boom" in evaluation.diagnostics[0].message
    assert evaluation.rules_evaluated == 3
    assert evaluation.results_for("AVD-TEST-0003")[0].message == "line 3"


def test_timeout_keeps_finished_results() -> None:
    release = threading.Event()

    def blocking(state):
        release.wait(5)
        return Results()

    registry = RuleRegistry([
        make_rule("AVD-TEST-0001", flagging(1)),
        make_rule("AVD-TEST-0002", blocking),
    ])

    try:
        evaluation = Engine(registry, workers=2, timeout=0.5).evaluate(State())
    finally:
        release.set()

    assert evaluation.cancelled
    assert [r.rule_id for r in evaluation.results] == ["AVD-TEST-0001"]
    assert [(d.kind, d.source) for d in evaluation.diagnostics] == [(DiagnosticKind.CANCELLED, "AVD-TEST-0002")]
    assert evaluation.rules_evaluated == 1


def test_cancel_event_set_before_evaluation() -> None:
    cancel = threading.Event()
    cancel.set()
    registry = RuleRegistry([make_rule("AVD-TEST-0001", flagging(1)), make_rule("AVD-TEST-0002", flagging(2))])

    evaluation = Engine(registry, workers=1).evaluate(State(), cancel_event=cancel)

    assert evaluation.cancelled
    assert evaluation.results == []
    assert {d.kind for d in evaluation.diagnostics} == {DiagnosticKind.CANCELLED}
    assert [d.source for d in evaluation.diagnostics] == ["AVD-TEST-0001", "AVD-TEST-0002"]


def test_empty_registry() -> None:
    evaluation = Engine(RuleRegistry(), workers=1).evaluate(State())

    assert evaluation.results == []
    assert evaluation.rules_evaluated == 0
    assert not evaluation.cancelled


@pytest.mark.parametrize("kwargs", [{"workers": 0}, {"timeout": 0}, {"timeout": -1.0}])
def test_engine_rejects_bad_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        Engine(RuleRegistry(), **kwargs)


def test_builtin_rules_on_an_empty_state() -> None:
    evaluation = evaluate(State())

    assert evaluation.rules_evaluated == 26
    assert evaluation.results == []
    assert evaluation.diagnostics == []
    assert not evaluation.cancelled


def test_a_rule_that_tries_to_mutate_the_state_leaves_it_intact(terraform_state) -> None:
    state = terraform_state("""
        resource "openstack_compute_instance_v2" "web" {
          admin_pass = "N0tSoS3cret"
        }

        resource "openstack_compute_instance_v2" "db" {
          admin_pass = "Als0S3cret"
        }
    """)
    original = state.openstack.compute.instances

    def mutating(state):
        instances = state.openstack.compute.instances
        try:
            instances[0] = None
        except TypeError:
            pass
        state.openstack.compute.instances = ()

    def counting(state):
        results = Results()
        for instance in state.openstack.compute.instances:
            results.add("instance", instance.admin_password)
        return results

    registry = RuleRegistry([make_rule("AVD-TEST-0001", mutating), make_rule("AVD-TEST-0002", counting)])

    evaluation = Engine(registry, workers=1).evaluate(state)

    assert evaluation.failed_rules == ["AVD-TEST-0001"]
    assert "FrozenInstanceError" in evaluation.diagnostics[0].message
    assert [r.range.start_line for r in evaluation.results] == [2, 6]
    assert state.openstack.compute.instances is original
    with pytest.raises(dataclasses.FrozenInstanceError):
        state.openstack = None


def test_a_stuck_rule_does_not_hold_the_process_open(tmp_path: Path) -> None:
    script = tmp_path / "stuck.py"
    script.write_text(textwrap.dedent("""
        import time

        from gjallarhorn.providers import Provider
        from gjallarhorn.rules import Engine, Results, RuleRegistry, Severity, rule
        from gjallarhorn.state import State

        @rule(avd_id="AVD-TEST-0001", provider=Provider.AWS, service="test",
              short_code="stuck", summary="Stuck", severity=Severity.LOW)
        def stuck(state):
            time.sleep(30)
            return Results()

        evaluation = Engine(RuleRegistry([stuck]), workers=1, timeout=0.2).evaluate(State())
        print("cancelled", evaluation.cancelled)
    """), encoding="utf-8")
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [str(root), os.environ.get("PYTHONPATH")])))

    started = time.monotonic()
    completed = subprocess.run(
        [sys.executable, str(script)], capture_output=True, text=True, timeout=25, env=env
    )

    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.strip() == "cancelled True"
    assert time.monotonic() - started < 10
