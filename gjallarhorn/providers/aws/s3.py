# ᛊᛃ • AWS S3
"""S3 buckets, with the settings Terraform spreads over sibling resources folded in."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from gjallarhorn.types import BoolValue, Metadata, StringValue

PUBLIC_ACLS = ("public-read", "public-read-write", "website", "authenticated-read")


@dataclass(frozen=True)
class Logging:
    metadata: Metadata
    enabled: BoolValue
    target_bucket: StringValue


@dataclass(frozen=True)
class Versioning:
    metadata: Metadata
    enabled: BoolValue
    mfa_delete: BoolValue


@dataclass(frozen=True)
class Encryption:
    metadata: Metadata
    enabled: BoolValue
    algorithm: StringValue
    kms_key_id: StringValue


@dataclass(frozen=True)
class PublicAccessBlock:
    """
    Bucket-level public access block.

    A bucket without one gets a block whose metadata is marked default and
    whose four flags are false.
    """
    metadata: Metadata
    block_public_acls: BoolValue
    block_public_policy: BoolValue
    ignore_public_acls: BoolValue
    restrict_public_buckets: BoolValue

    @property
    def is_declared(self) -> bool:
        return not self.metadata.is_default

    @classmethod
    def missing(cls, bucket_metadata: Metadata) -> "PublicAccessBlock":
        metadata = bucket_metadata.as_default()
        return cls(
            metadata=metadata,
            block_public_acls=BoolValue.default(False, metadata),
            block_public_policy=BoolValue.default(False, metadata),
            ignore_public_acls=BoolValue.default(False, metadata),
            restrict_public_buckets=BoolValue.default(False, metadata),
        )


@dataclass(frozen=True)
class Bucket:
    metadata: Metadata
    name: StringValue
    acl: StringValue
    logging: Logging
    versioning: Versioning
    encryption: Encryption
    public_access_block: PublicAccessBlock

    def has_public_acl(self) -> bool:
        return self.acl.is_one_of(*PUBLIC_ACLS)


@dataclass(frozen=True)
class S3:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    buckets: Tuple[Bucket, ...] = ()
