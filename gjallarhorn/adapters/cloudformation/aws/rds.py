# ᚱᛞᛊ • CloudFormation -> AWS RDS
"""Adapts AWS::RDS::DBInstance and AWS::RDS::DBSecurityGroup resources."""

from __future__ import annotations

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.rds import RDS, Classic, DBSecurityGroup, Instance


def adapt(template: Module) -> RDS:
    return RDS(
        instances=adapt_each(template.get_resources_by_type("AWS::RDS::DBInstance"), _adapt_instance),
        classic=Classic(
            db_security_groups=adapt_each(
                template.get_resources_by_type("AWS::RDS::DBSecurityGroup"),
                lambda block: DBSecurityGroup(metadata=block.metadata),
            ),
        ),
    )


def _adapt_instance(block: Block) -> Instance:
    return Instance(
        metadata=block.metadata,
        storage_encrypted=block.get_attribute("StorageEncrypted").as_bool_value_or_default(False, block),
        kms_key_id=block.get_attribute("KmsKeyId").as_string_value_or_default("", block),
        publicly_accessible=block.get_attribute("PubliclyAccessible").as_bool_value_or_default(False, block),
        # CloudFormation keeps one day of backups when the property is omitted
        backup_retention_period_days=block.get_attribute("BackupRetentionPeriod").as_int_value_or_default(1, block),
        replication_source_arn=block.get_attribute("SourceDBInstanceIdentifier").as_string_value_or_default("", block),
    )
