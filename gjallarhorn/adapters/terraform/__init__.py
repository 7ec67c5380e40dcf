# ᛏᛖᚱᚱᚨᚠᛟᚱᛗ • Terraform Adapters
"""Adapters from parsed Terraform modules to the typed state."""

from gjallarhorn.adapters.terraform import aws, openstack
from gjallarhorn.parsers.block import Modules
from gjallarhorn.state import State


def adapt(modules: Modules) -> State:
    return State(
        aws=aws.adapt(modules),
        openstack=openstack.adapt(modules),
    )
