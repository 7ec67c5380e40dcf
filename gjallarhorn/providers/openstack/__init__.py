# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack - Provider Root
"""OpenStack sub-tree of the scan state."""

from __future__ import annotations

from dataclasses import dataclass, field

from gjallarhorn.providers.openstack.compute import Compute, Firewall, FirewallRule, Instance
from gjallarhorn.providers.openstack.networking import Networking, SecurityGroup, SecurityGroupRule
from gjallarhorn.types import Metadata


@dataclass(frozen=True)
class OpenStack:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    compute: Compute = field(default_factory=Compute)
    networking: Networking = field(default_factory=Networking)


__all__ = [
    "OpenStack",
    "Compute",
    "Instance",
    "Firewall",
    "FirewallRule",
    "Networking",
    "SecurityGroup",
    "SecurityGroupRule",
]
