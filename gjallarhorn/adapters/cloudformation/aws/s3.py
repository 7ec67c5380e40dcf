# ᛊᛃ • CloudFormation -> AWS S3
"""Adapts AWS::S3::Bucket resources."""

from __future__ import annotations

import re
from typing import Optional

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.s3 import S3, Bucket, Encryption, Logging, PublicAccessBlock, Versioning
from gjallarhorn.types import BoolValue, StringValue

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def adapt(template: Module) -> S3:
    return S3(buckets=adapt_each(template.get_resources_by_type("AWS::S3::Bucket"), _adapt_bucket))


def canned_acl(access_control: str) -> str:
    """'PublicReadWrite' -> 'public-read-write', the Terraform spelling of a canned ACL."""
    return _CAMEL_BOUNDARY.sub("-", access_control).lower()


def _adapt_bucket(block: Block) -> Bucket:
    return Bucket(
        metadata=block.metadata,
        name=block.get_attribute("BucketName").as_string_value_or_default("", block),
        acl=_acl(block),
        logging=_logging(block),
        versioning=_versioning(block),
        encryption=_encryption(block),
        public_access_block=_public_access_block(block),
    )


def _acl(block: Block) -> StringValue:
    attribute = block.get_attribute("AccessControl")
    if attribute.is_string():
        return StringValue.of(canned_acl(attribute.as_string()), attribute.metadata)
    return attribute.as_string_value_or_default("private", block)


def _logging(block: Block) -> Logging:
    configuration = block.get_block("LoggingConfiguration")
    if configuration is None:
        return Logging(
            metadata=block.metadata,
            enabled=BoolValue.default(False, block.metadata),
            target_bucket=StringValue.default("", block.metadata),
        )
    return Logging(
        metadata=configuration.metadata,
        enabled=BoolValue.of(True, configuration.metadata),
        target_bucket=configuration.get_attribute("DestinationBucketName").as_string_value_or_default("", configuration),
    )


def _versioning(block: Block) -> Versioning:
    configuration = block.get_block("VersioningConfiguration")
    if configuration is None:
        return Versioning(
            metadata=block.metadata,
            enabled=BoolValue.default(False, block.metadata),
            mfa_delete=BoolValue.default(False, block.metadata),
        )
    status = configuration.get_attribute("Status")
    if status.is_string():
        enabled = BoolValue.of(status.equals("Enabled", ignore_case=True), status.metadata)
    else:
        enabled = status.as_bool_value_or_default(False, configuration)
    return Versioning(
        metadata=configuration.metadata,
        enabled=enabled,
        mfa_delete=BoolValue.default(False, configuration.metadata),
    )


def _encryption_default(block: Block) -> Optional[Block]:
    encryption = block.get_block("BucketEncryption")
    if encryption is None:
        return None
    rule = encryption.get_block("ServerSideEncryptionConfiguration")
    if rule is None:
        return None
    return rule.get_block("ServerSideEncryptionByDefault")


def _encryption(block: Block) -> Encryption:
    default = _encryption_default(block)
    if default is None:
        owner = block.get_block("BucketEncryption") or block
        return Encryption(
            metadata=owner.metadata,
            enabled=BoolValue.default(False, owner.metadata),
            algorithm=StringValue.default("", owner.metadata),
            kms_key_id=StringValue.default("", owner.metadata),
        )
    algorithm = default.get_attribute("SSEAlgorithm").as_string_value_or_default("", default)
    return Encryption(
        metadata=default.metadata,
        enabled=BoolValue.of(algorithm.is_not_empty() or not algorithm.is_resolvable, algorithm.metadata),
        algorithm=algorithm,
        kms_key_id=default.get_attribute("KMSMasterKeyID").as_string_value_or_default("", default),
    )


def _public_access_block(block: Block) -> PublicAccessBlock:
    configuration = block.get_block("PublicAccessBlockConfiguration")
    if configuration is None:
        return PublicAccessBlock.missing(block.metadata)
    return PublicAccessBlock(
        metadata=configuration.metadata,
        block_public_acls=configuration.get_attribute("BlockPublicAcls").as_bool_value_or_default(False, configuration),
        block_public_policy=configuration.get_attribute("BlockPublicPolicy").as_bool_value_or_default(False, configuration),
        ignore_public_acls=configuration.get_attribute("IgnorePublicAcls").as_bool_value_or_default(False, configuration),
        restrict_public_buckets=configuration.get_attribute("RestrictPublicBuckets").as_bool_value_or_default(False, configuration),
    )
