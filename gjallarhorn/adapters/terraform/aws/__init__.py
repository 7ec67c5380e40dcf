# ᚨᚹᛊ • Terraform -> AWS
"""AWS provider adapter for Terraform modules."""

from gjallarhorn.adapters.terraform.aws import rds, s3
from gjallarhorn.parsers.block import Modules
from gjallarhorn.providers.aws import AWS


def adapt(modules: Modules) -> AWS:
    return AWS(
        rds=rds.adapt(modules),
        s3=s3.adapt(modules),
    )
