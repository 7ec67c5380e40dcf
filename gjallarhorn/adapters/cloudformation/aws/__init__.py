# ᚨᚹᛊ • CloudFormation -> AWS
"""AWS provider adapter for CloudFormation and SAM templates."""

from gjallarhorn.adapters.cloudformation.aws import rds, s3, sam
from gjallarhorn.parsers.block import Module
from gjallarhorn.providers.aws import AWS


def adapt(template: Module) -> AWS:
    return AWS(
        rds=rds.adapt(template),
        s3=s3.adapt(template),
        sam=sam.adapt(template),
    )
