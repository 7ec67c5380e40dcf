# ᚨᚹᛊ • AWS - Provider Root
"""AWS sub-tree of the scan state."""

from __future__ import annotations

from dataclasses import dataclass, field

from gjallarhorn.providers.aws.rds import RDS
from gjallarhorn.providers.aws.s3 import S3
from gjallarhorn.providers.aws.sam import SAM
from gjallarhorn.types import Metadata


@dataclass(frozen=True)
class AWS:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    rds: RDS = field(default_factory=RDS)
    s3: S3 = field(default_factory=S3)
    sam: SAM = field(default_factory=SAM)


__all__ = ["AWS", "RDS", "S3", "SAM"]
