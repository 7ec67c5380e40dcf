# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                       ᚺᛖᛁᛗᛞᚨᛚᛚ'ᛊ ᚹᚨᛏᚲᚺ • EVALUATION ENGINE
#                Every rule against the frozen state, in parallel
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Rules run on a bounded thread pool. Each rule is isolated: a check that
#   raises becomes a RULE_EXECUTION diagnostic and the others carry on.
#
#   Output order is the registry's (rule identifier), never completion order.
#
#   A timeout or a set cancel event stops waiting for the remaining rules.
#   Results already produced are kept, the evaluation is flagged cancelled
#   and every rule that did not finish gets a CANCELLED diagnostic. Checks
#   already running cannot be interrupted; their output is discarded, and
#   since workers are daemon threads a stuck check never holds the process
#   open.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import concurrent.futures
import logging
import os
import queue
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gjallarhorn.diagnostics import Diagnostic, DiagnosticKind
from gjallarhorn.rules.definition import Rule
from gjallarhorn.rules.registry import RuleRegistry
from gjallarhorn.rules.result import Result
from gjallarhorn.state import State

logger = logging.getLogger(__name__)

# How often a wait re-checks the cancel event
_CANCEL_POLL_SECONDS = 0.05


@dataclass
class Evaluation:
    """Outcome of running a registry against one state."""
    results: List[Result] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    cancelled: bool = False
    rules_evaluated: int = 0

    def results_for(self, rule_id: str) -> List[Result]:
        return [r for r in self.results if r.rule_id == rule_id]

    @property
    def failed_rules(self) -> List[str]:
        return [d.source for d in self.diagnostics if d.kind == DiagnosticKind.RULE_EXECUTION]


def default_workers() -> int:
    return os.cpu_count() or 1


class Engine:
    """Runs the rules of a registry against a state."""

    def __init__(
        self,
        registry: RuleRegistry,
        workers: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        if workers is not None and workers < 1:
            raise ValueError("workers must be at least 1")
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")
        self.registry = registry
        self.workers = workers or default_workers()
        self.timeout = timeout

    def evaluate(self, state: State, cancel_event: Optional[threading.Event] = None) -> Evaluation:
        self.registry.freeze()
        rules = self.registry.rules()
        evaluation = Evaluation()
        if not rules:
            return evaluation

        logger.info(f"Evaluating {len(rules)} rules with {self.workers} worker(s)")
        deadline = time.monotonic() + self.timeout if self.timeout else None

        work: "queue.Queue[Tuple[Rule, concurrent.futures.Future]]" = queue.Queue()
        futures: List[Tuple[Rule, concurrent.futures.Future]] = []
        for item in rules:
            future: concurrent.futures.Future = concurrent.futures.Future()
            futures.append((item, future))
            work.put((item, future))
        for index in range(min(self.workers, len(rules))):
            threading.Thread(
                target=_work,
                args=(work, state, cancel_event),
                name=f"gjallarhorn-rule-{index}",
                daemon=True,
            ).start()

        try:
            evaluation.cancelled = not self._wait(
                {future for _, future in futures}, deadline, cancel_event
            )
        finally:
            # rules not yet picked up by a worker never start
            for _, future in futures:
                future.cancel()

        for item, future in futures:
            outcome = _outcome(future)
            if outcome is None:
                evaluation.cancelled = True
                evaluation.diagnostics.append(Diagnostic(
                    DiagnosticKind.CANCELLED,
                    "Rule did not complete before the evaluation was stopped",
                    source=item.id,
                ))
                continue
            results, diagnostic = outcome
            evaluation.rules_evaluated += 1
            evaluation.results.extend(results)
            if diagnostic is not None:
                evaluation.diagnostics.append(diagnostic)

        if evaluation.cancelled:
            logger.warning(
                f"Evaluation stopped early: {evaluation.rules_evaluated}/{len(rules)} rules completed"
            )
        logger.info(f"Evaluation produced {len(evaluation.results)} result(s)")
        return evaluation

    def _wait(
        self,
        pending: set,
        deadline: Optional[float],
        cancel_event: Optional[threading.Event],
    ) -> bool:
        """Wait for every future. False when stopped by the deadline or the cancel event."""
        while pending:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Evaluation cancelled")
                return False
            timeout = None
            if deadline is not None:
                timeout = deadline - time.monotonic()
                if timeout <= 0:
                    logger.warning(f"Evaluation timed out after {self.timeout}s")
                    return False
            if cancel_event is not None:
                timeout = _CANCEL_POLL_SECONDS if timeout is None else min(timeout, _CANCEL_POLL_SECONDS)
            _, pending = concurrent.futures.wait(
                pending,
                timeout=timeout,
                return_when=concurrent.futures.FIRST_COMPLETED,
            )
        return True


RuleOutcome = Tuple[List[Result], Optional[Diagnostic]]


def _work(
    work: "queue.Queue[Tuple[Rule, concurrent.futures.Future]]",
    state: State,
    cancel_event: Optional[threading.Event],
) -> None:
    while True:
        try:
            item, future = work.get_nowait()
        except queue.Empty:
            return
        if not future.set_running_or_notify_cancel():
            continue
        future.set_result(_run_rule(item, state, cancel_event))


def _run_rule(item: Rule, state: State, cancel_event: Optional[threading.Event]) -> Optional[RuleOutcome]:
    if cancel_event is not None and cancel_event.is_set():
        return None
    try:
        results = item.evaluate(state)
    except Exception as e:
        logger.error(f"Rule {item.id} failed: {type(e).__name__}: {e}")
        return [], Diagnostic(
            DiagnosticKind.RULE_EXECUTION,
            f"{type(e).__name__}: {e}",
            source=item.id,
        )
    logger.debug(f"Rule {item.id}: {len(results)} result(s)")
    return results, None


def _outcome(future: concurrent.futures.Future) -> Optional[RuleOutcome]:
    if not future.done() or future.cancelled():
        return None
    return future.result()


def evaluate(
    state: State,
    registry: Optional[RuleRegistry] = None,
    workers: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Evaluation:
    """Evaluate a registry (the built-in rules by default) against a state."""
    if registry is None:
        registry = RuleRegistry.builtin()
    return Engine(registry, workers=workers, timeout=timeout).evaluate(state, cancel_event)
