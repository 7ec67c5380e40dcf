# ᛈᚱᛟᚹᛁᛞᛖᚱᛊ • Providers - Typed Domain Objects per Cloud
"""
Strongly typed domain objects, one sub-package per cloud provider.

Every field is a provenance-tracked value, a nested typed object or a tuple
of them. All objects are frozen: rules can read them from any thread.
"""

from enum import Enum


class Provider(str, Enum):
    AWS = "aws"
    OPENSTACK = "openstack"
