# ᚱᛞᛊ • Terraform -> AWS RDS
"""Adapts aws_db_instance and aws_db_security_group resources."""

from __future__ import annotations

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Modules
from gjallarhorn.providers.aws.rds import RDS, Classic, DBSecurityGroup, Instance
from gjallarhorn.types import StringValue


def adapt(modules: Modules) -> RDS:
    return RDS(
        instances=adapt_each(modules.get_resources_by_type("aws_db_instance"), _adapt_instance),
        classic=Classic(
            db_security_groups=adapt_each(modules.get_resources_by_type("aws_db_security_group"), _adapt_security_group),
        ),
    )


def _adapt_security_group(block: Block) -> DBSecurityGroup:
    return DBSecurityGroup(metadata=block.metadata)


def _adapt_instance(block: Block) -> Instance:
    return Instance(
        metadata=block.metadata,
        storage_encrypted=block.get_attribute("storage_encrypted").as_bool_value_or_default(False, block),
        kms_key_id=block.get_attribute("kms_key_id").as_string_value_or_default("", block),
        publicly_accessible=block.get_attribute("publicly_accessible").as_bool_value_or_default(False, block),
        backup_retention_period_days=block.get_attribute("backup_retention_period").as_int_value_or_default(0, block),
        replication_source_arn=_replication_source(block),
    )


def _replication_source(block: Block) -> StringValue:
    attribute = block.get_attribute("replicate_source_db")
    if attribute.exists and not attribute.is_null() and not attribute.is_resolvable():
        # a reference to the primary still marks this instance as a replica
        references = attribute.references()
        source = str(references[0]) if references else getattr(attribute.value, "expression", "")
        return StringValue.of(source or "unknown", attribute.metadata)
    return attribute.as_string_value_or_default("", block)
