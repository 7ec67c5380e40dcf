# ᛁᚨᛗ • AWS IAM
"""IAM policy documents as they appear inline in other resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from gjallarhorn.types import Metadata, StringValue


@dataclass(frozen=True)
class Statement:
    """One policy statement; every action and resource keeps its own range."""
    metadata: Metadata
    effect: StringValue
    actions: Tuple[StringValue, ...] = ()
    resources: Tuple[StringValue, ...] = ()

    @property
    def is_allow(self) -> bool:
        return self.effect.equal_to("Allow", ignore_case=True)


@dataclass(frozen=True)
class Document:
    metadata: Metadata
    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Policy:
    metadata: Metadata
    name: StringValue
    document: Document

    def wildcard_actions(self) -> Tuple[StringValue, ...]:
        return tuple(
            action
            for statement in self.document.statements if statement.is_allow
            for action in statement.actions if action.contains("*")
        )

    def wildcard_resources(self) -> Tuple[StringValue, ...]:
        return tuple(
            resource
            for statement in self.document.statements if statement.is_allow
            for resource in statement.resources if resource.equal_to("*")
        )
