# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • Terraform -> OpenStack
"""OpenStack provider adapter for Terraform modules."""

from gjallarhorn.adapters.terraform.openstack import compute, networking
from gjallarhorn.parsers.block import Modules
from gjallarhorn.providers.openstack import OpenStack


def adapt(modules: Modules) -> OpenStack:
    return OpenStack(
        compute=compute.adapt(modules),
        networking=networking.adapt(modules),
    )
