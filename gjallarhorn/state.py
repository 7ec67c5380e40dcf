# ᛟᚦᚨᛚᚨ • Othala - The Rune of Inheritance (Scan State)
"""
The domain state tree: one frozen root per scan, one sub-tree per provider.

Adapters for each source format produce partial states; merge() folds them
together by concatenating collections, keeping document order.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable

from gjallarhorn.providers.aws import AWS
from gjallarhorn.providers.openstack import OpenStack
from gjallarhorn.types import Metadata


@dataclass(frozen=True)
class State:
    aws: AWS = field(default_factory=AWS)
    openstack: OpenStack = field(default_factory=OpenStack)

    def counts(self) -> Dict[str, int]:
        """Number of objects in every non-empty collection, keyed by dotted path."""
        found: Dict[str, int] = {}
        _count(self, "", found)
        return found


def _count(node: Any, prefix: str, found: Dict[str, int]) -> None:
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        path = f"{prefix}{f.name}"
        if isinstance(value, tuple):
            if value:
                found[path] = len(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, Metadata):
            _count(value, f"{path}.", found)


def _merge_nodes(left: Any, right: Any) -> Any:
    changes = {}
    for f in dataclasses.fields(left):
        a, b = getattr(left, f.name), getattr(right, f.name)
        if isinstance(a, tuple):
            changes[f.name] = a + b
        elif isinstance(a, Metadata):
            # aggregates have no source of their own; keep whichever is managed
            changes[f.name] = a if a.is_managed or not b.is_managed else b
        elif dataclasses.is_dataclass(a):
            changes[f.name] = _merge_nodes(a, b)
    return dataclasses.replace(left, **changes)


def merge(states: Iterable[State]) -> State:
    merged = State()
    for state in states:
        merged = _merge_nodes(merged, state)
    return merged
