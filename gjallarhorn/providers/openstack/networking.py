# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Networking
"""Neutron security groups and their rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from gjallarhorn.types import BoolValue, IntValue, Metadata, StringValue


@dataclass(frozen=True)
class SecurityGroupRule:
    metadata: Metadata
    is_ingress: BoolValue
    ethertype: IntValue  # 4 or 6
    protocol: StringValue
    port_min: IntValue
    port_max: IntValue
    cidr: StringValue


@dataclass(frozen=True)
class SecurityGroup:
    metadata: Metadata
    name: StringValue
    description: StringValue
    rules: Tuple[SecurityGroupRule, ...] = ()


@dataclass(frozen=True)
class Networking:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    security_groups: Tuple[SecurityGroup, ...] = ()
