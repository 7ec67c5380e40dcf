# ᛏᚨᛒᛚᛖ • SAM Simple Tables
"""Adapts AWS::Serverless::SimpleTable resources."""

from __future__ import annotations

from typing import Tuple

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.sam import SimpleTable, SSESpecification

SIMPLE_TABLE_TYPE = "AWS::Serverless::SimpleTable"


def get_simple_tables(template: Module) -> Tuple[SimpleTable, ...]:
    return adapt_each(template.get_resources_by_type(SIMPLE_TABLE_TYPE), _adapt_table)


def _adapt_table(block: Block) -> SimpleTable:
    sse = block.get_block("SSESpecification")
    owner = sse if sse is not None else block
    return SimpleTable(
        metadata=block.metadata,
        table_name=block.get_attribute("TableName").as_string_value_or_default("", block),
        sse_specification=SSESpecification(
            metadata=owner.metadata,
            enabled=owner.get_attribute("SSEEnabled").as_bool_value_or_default(False, owner),
            kms_master_key_id=owner.get_attribute("KMSMasterKeyId").as_string_value_or_default("", owner),
        ),
    )
