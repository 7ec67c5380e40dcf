# ᚠᚢᚾᚲ • SAM Functions
"""Adapts AWS::Serverless::Function resources."""

from __future__ import annotations

from typing import Tuple

from gjallarhorn.adapters.cloudformation.aws.sam.policies import adapt_policies
from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.sam import Function

FUNCTION_TYPE = "AWS::Serverless::Function"


def get_functions(template: Module) -> Tuple[Function, ...]:
    return adapt_each(template.get_resources_by_type(FUNCTION_TYPE), _adapt_function)


def _adapt_function(block: Block) -> Function:
    managed, policies = adapt_policies(block)
    return Function(
        metadata=block.metadata,
        function_name=block.get_attribute("FunctionName").as_string_value_or_default("", block),
        tracing=block.get_attribute("Tracing").as_string_value_or_default("PassThrough", block),
        managed_policies=managed,
        policies=policies,
    )
