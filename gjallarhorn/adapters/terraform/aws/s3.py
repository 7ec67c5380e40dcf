# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                      ᛊᛃ • TERRAFORM -> AWS S3
#             One typed bucket from a family of sibling resources
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Since AWS provider v4 a bucket's settings live in their own resources:
#
#     aws_s3_bucket_acl, aws_s3_bucket_logging, aws_s3_bucket_versioning,
#     aws_s3_bucket_server_side_encryption_configuration,
#     aws_s3_bucket_public_access_block
#
#   Each points at its bucket through `bucket`, either as a reference
#   (aws_s3_bucket.logs.id) or as the bucket's literal name. The older inline
#   blocks on aws_s3_bucket itself are still read when no sibling exists.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
from typing import Optional

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Attribute, Block, Modules
from gjallarhorn.providers.aws.s3 import S3, Bucket, Encryption, Logging, PublicAccessBlock, Versioning
from gjallarhorn.types import BoolValue, StringValue

logger = logging.getLogger(__name__)

BUCKET = "aws_s3_bucket"
ACL = "aws_s3_bucket_acl"
LOGGING = "aws_s3_bucket_logging"
VERSIONING = "aws_s3_bucket_versioning"
ENCRYPTION = "aws_s3_bucket_server_side_encryption_configuration"
PUBLIC_ACCESS_BLOCK = "aws_s3_bucket_public_access_block"


def adapt(modules: Modules) -> S3:
    return S3(buckets=adapt_each(
        modules.get_resources_by_type(BUCKET),
        lambda block: _adapt_bucket(modules, block),
    ))


def _related(modules: Modules, bucket: Block, resource_type: str) -> Optional[Block]:
    """The sibling resource of resource_type configuring this bucket, if any."""
    referencing = modules.get_referencing_resources(bucket, resource_type, "bucket")
    if referencing:
        return referencing[0]
    name = bucket.get_attribute("bucket").as_string()
    if not name:
        return None
    candidates = bucket.module.get_resources_by_type(resource_type) if bucket.module else []
    for candidate in candidates:
        if candidate.get_attribute("bucket").equals(name):
            return candidate
    return None


def _status_enabled(attribute: Attribute, block: Block) -> BoolValue:
    """Versioning-style "Enabled"/"Suspended" strings as a bool."""
    if attribute.is_string():
        return BoolValue.of(attribute.equals("Enabled", ignore_case=True), attribute.metadata)
    return attribute.as_bool_value_or_default(False, block)


def _adapt_bucket(modules: Modules, block: Block) -> Bucket:
    logger.debug(f"Adapting S3 bucket {block.full_name}")
    return Bucket(
        metadata=block.metadata,
        name=block.get_attribute("bucket").as_string_value_or_default("", block),
        acl=_acl(modules, block),
        logging=_logging(modules, block),
        versioning=_versioning(modules, block),
        encryption=_encryption(modules, block),
        public_access_block=_public_access_block(modules, block),
    )


def _acl(modules: Modules, bucket: Block) -> StringValue:
    acl_block = _related(modules, bucket, ACL)
    if acl_block is not None:
        return acl_block.get_attribute("acl").as_string_value_or_default("private", acl_block)
    return bucket.get_attribute("acl").as_string_value_or_default("private", bucket)


def _logging(modules: Modules, bucket: Block) -> Logging:
    source = _related(modules, bucket, LOGGING) or bucket.get_block("logging")
    if source is None:
        return Logging(
            metadata=bucket.metadata,
            enabled=BoolValue.default(False, bucket.metadata),
            target_bucket=StringValue.default("", bucket.metadata),
        )
    return Logging(
        metadata=source.metadata,
        enabled=BoolValue.of(True, source.metadata),
        target_bucket=source.get_attribute("target_bucket").as_string_value_or_default("", source),
    )


def _versioning(modules: Modules, bucket: Block) -> Versioning:
    resource = _related(modules, bucket, VERSIONING)
    if resource is not None:
        configuration = resource.get_block("versioning_configuration") or resource
        return Versioning(
            metadata=resource.metadata,
            enabled=_status_enabled(configuration.get_attribute("status"), configuration),
            mfa_delete=_status_enabled(configuration.get_attribute("mfa_delete"), configuration),
        )

    inline = bucket.get_block("versioning")
    if inline is not None:
        return Versioning(
            metadata=inline.metadata,
            enabled=inline.get_attribute("enabled").as_bool_value_or_default(True, inline),
            mfa_delete=inline.get_attribute("mfa_delete").as_bool_value_or_default(False, inline),
        )

    return Versioning(
        metadata=bucket.metadata,
        enabled=BoolValue.default(False, bucket.metadata),
        mfa_delete=BoolValue.default(False, bucket.metadata),
    )


def _encryption(modules: Modules, bucket: Block) -> Encryption:
    source = _related(modules, bucket, ENCRYPTION) or bucket.get_block("server_side_encryption_configuration")
    if source is None:
        return Encryption(
            metadata=bucket.metadata,
            enabled=BoolValue.default(False, bucket.metadata),
            algorithm=StringValue.default("", bucket.metadata),
            kms_key_id=StringValue.default("", bucket.metadata),
        )

    rule = source.get_block("rule")
    default = rule.get_block("apply_server_side_encryption_by_default") if rule is not None else None
    if default is None:
        return Encryption(
            metadata=source.metadata,
            enabled=BoolValue.default(False, source.metadata),
            algorithm=StringValue.default("", source.metadata),
            kms_key_id=StringValue.default("", source.metadata),
        )

    algorithm = default.get_attribute("sse_algorithm").as_string_value_or_default("", default)
    return Encryption(
        metadata=source.metadata,
        enabled=BoolValue.of(algorithm.is_not_empty() or not algorithm.is_resolvable, algorithm.metadata),
        algorithm=algorithm,
        kms_key_id=default.get_attribute("kms_master_key_id").as_string_value_or_default("", default),
    )


def _public_access_block(modules: Modules, bucket: Block) -> PublicAccessBlock:
    resource = _related(modules, bucket, PUBLIC_ACCESS_BLOCK)
    if resource is None:
        return PublicAccessBlock.missing(bucket.metadata)
    return PublicAccessBlock(
        metadata=resource.metadata,
        block_public_acls=resource.get_attribute("block_public_acls").as_bool_value_or_default(False, resource),
        block_public_policy=resource.get_attribute("block_public_policy").as_bool_value_or_default(False, resource),
        ignore_public_acls=resource.get_attribute("ignore_public_acls").as_bool_value_or_default(False, resource),
        restrict_public_buckets=resource.get_attribute("restrict_public_buckets").as_bool_value_or_default(False, resource),
    )
