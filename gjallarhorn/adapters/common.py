# ᚷᛖᛒᛟ • Gebo - The Rune of Exchange (Adapter Plumbing)
"""
Shared helpers for adapters.

Adapters are plain functions. They never raise for a single bad block: the
failure is logged, recorded as a diagnostic in the active collector, and the
block is skipped.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, TypeVar

from gjallarhorn.diagnostics import Diagnostic, DiagnosticKind
from gjallarhorn.parsers.block import Attribute, Block

logger = logging.getLogger(__name__)

T = TypeVar("T")

_collector: ContextVar[Optional[List[Diagnostic]]] = ContextVar("gjallarhorn_adapter_diagnostics", default=None)


@contextmanager
def collect_diagnostics() -> Iterator[List[Diagnostic]]:
    """Collect every diagnostic adapters report inside the with-block."""
    diagnostics: List[Diagnostic] = []
    token = _collector.set(diagnostics)
    try:
        yield diagnostics
    finally:
        _collector.reset(token)


def report(diagnostic: Diagnostic) -> None:
    collector = _collector.get()
    if collector is not None:
        collector.append(diagnostic)


def adapt_each(blocks: Iterable[Block], adapt_block: Callable[[Block], T]) -> Tuple[T, ...]:
    """Adapt blocks one by one, in document order, isolating failures."""
    adapted: List[T] = []
    for block in blocks:
        try:
            adapted.append(adapt_block(block))
        except Exception as e:
            logger.warning(f"Could not adapt {block.full_name} ({block.range}): {e}")
            report(Diagnostic(
                DiagnosticKind.ADAPTATION,
                f"{type(e).__name__}: {e}",
                source=block.full_name,
                range=block.range,
            ))
    return tuple(adapted)


def dangling_reference(attribute: Attribute, block: Block) -> None:
    """Record a reference that points at nothing in the document set."""
    targets = ", ".join(str(ref) for ref in attribute.references())
    logger.debug(f"{attribute.address}: unresolved reference to {targets}")
    report(Diagnostic(
        DiagnosticKind.REFERENCE,
        f"'{attribute.name}' refers to {targets}, which is not defined",
        source=block.full_name,
        range=attribute.range,
    ))
