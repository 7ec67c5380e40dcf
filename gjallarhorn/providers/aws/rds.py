# ᚱᛞᛊ • AWS RDS
"""Relational Database Service: instances and EC2-Classic DB security groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from gjallarhorn.types import BoolValue, IntValue, Metadata, StringValue


@dataclass(frozen=True)
class DBSecurityGroup:
    """A classic (pre-VPC) DB security group. Its existence is the finding."""
    metadata: Metadata


@dataclass(frozen=True)
class Classic:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    db_security_groups: Tuple[DBSecurityGroup, ...] = ()


@dataclass(frozen=True)
class Instance:
    metadata: Metadata
    storage_encrypted: BoolValue
    kms_key_id: StringValue
    publicly_accessible: BoolValue
    backup_retention_period_days: IntValue
    replication_source_arn: StringValue

    @property
    def is_replica(self) -> bool:
        return self.replication_source_arn.is_not_empty()


@dataclass(frozen=True)
class RDS:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    instances: Tuple[Instance, ...] = ()
    classic: Classic = field(default_factory=Classic)
