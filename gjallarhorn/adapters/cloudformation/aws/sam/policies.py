# ᛁᚨᛗ • SAM Policies
"""
Splits a SAM `Policies` property into managed policy names and inline documents.

    Policies: AWSLambdaBasicExecutionRole          -> one managed policy
    Policies: [AmazonS3ReadOnlyAccess, {...}]       -> managed + inline
    Policies: {Statement: [...]}                    -> one inline document

SAM policy templates (`- S3ReadPolicy: {BucketName: x}`) carry no statements
of their own and are skipped.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from gjallarhorn.parsers.block import Attribute, Block
from gjallarhorn.providers.aws.iam import Document, Policy, Statement
from gjallarhorn.types import StringValue

logger = logging.getLogger(__name__)


def adapt_policies(resource: Block) -> Tuple[Tuple[StringValue, ...], Tuple[Policy, ...]]:
    managed: List[StringValue] = []
    documents: List[Policy] = []

    attribute = resource.get_attribute("Policies")
    if attribute.is_list():
        for item in attribute.items():
            if isinstance(item, Attribute):
                managed.extend(item.as_string_values())
            else:
                _append_policy(item, documents)
    elif attribute.exists:
        managed.extend(attribute.as_string_values())
    else:
        for block in resource.get_blocks("Policies"):
            _append_policy(block, documents)

    return tuple(managed), tuple(documents)


def _append_policy(block: Block, documents: List[Policy]) -> None:
    policy = _adapt_policy(block)
    if policy is None:
        logger.debug(f"{block.full_name}: policy template without statements, skipping")
        return
    documents.append(policy)


def _adapt_policy(block: Block) -> Optional[Policy]:
    document = block.get_block("PolicyDocument") or block
    if document.missing_child("Statement"):
        return None
    return Policy(
        metadata=block.metadata,
        name=block.get_attribute("PolicyName").as_string_value_or_default("", block),
        document=Document(
            metadata=document.metadata,
            statements=tuple(_adapt_statement(s) for s in document.get_blocks("Statement")),
        ),
    )


def _adapt_statement(block: Block) -> Statement:
    return Statement(
        metadata=block.metadata,
        effect=block.get_attribute("Effect").as_string_value_or_default("Allow", block),
        actions=block.get_attribute("Action").as_string_values(),
        resources=block.get_attribute("Resource").as_string_values(),
    )
