# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Compute
"""Compute instances and FWaaS firewall rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from gjallarhorn.types import BoolValue, Metadata, StringValue


@dataclass(frozen=True)
class Instance:
    metadata: Metadata
    admin_password: StringValue


@dataclass(frozen=True)
class FirewallRule:
    metadata: Metadata
    source: StringValue
    destination: StringValue
    source_port: StringValue
    destination_port: StringValue
    enabled: BoolValue


@dataclass(frozen=True)
class Firewall:
    """All FWaaS rules of a scan, split by action."""
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    allow_rules: Tuple[FirewallRule, ...] = ()
    deny_rules: Tuple[FirewallRule, ...] = ()


@dataclass(frozen=True)
class Compute:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    instances: Tuple[Instance, ...] = ()
    firewall: Firewall = field(default_factory=Firewall)
