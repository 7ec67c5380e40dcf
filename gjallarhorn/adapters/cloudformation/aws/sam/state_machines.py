# ᛊᛏᚨᛏᛖ • SAM State Machines
"""Adapts AWS::Serverless::StateMachine resources."""

from __future__ import annotations

from typing import Tuple

from gjallarhorn.adapters.cloudformation.aws.sam.policies import adapt_policies
from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.sam import LoggingConfiguration, StateMachine, TracingConfiguration
from gjallarhorn.types import BoolValue

STATE_MACHINE_TYPE = "AWS::Serverless::StateMachine"


def get_state_machines(template: Module) -> Tuple[StateMachine, ...]:
    return adapt_each(template.get_resources_by_type(STATE_MACHINE_TYPE), _adapt_state_machine)


def _adapt_state_machine(block: Block) -> StateMachine:
    managed, policies = adapt_policies(block)
    return StateMachine(
        metadata=block.metadata,
        name=block.get_attribute("Name").as_string_value_or_default("", block),
        logging_configuration=_logging(block),
        tracing=_tracing(block),
        managed_policies=managed,
        policies=policies,
    )


def _logging(block: Block) -> LoggingConfiguration:
    logging_block = block.get_block("Logging")
    if logging_block is None:
        return LoggingConfiguration(
            metadata=block.metadata,
            logging_enabled=BoolValue.default(False, block.metadata),
        )
    level = logging_block.get_attribute("Level")
    if level.is_string():
        enabled = BoolValue.of(not level.equals("OFF", ignore_case=True), level.metadata)
    else:
        enabled = level.as_bool_value_or_default(False, logging_block)
    return LoggingConfiguration(metadata=logging_block.metadata, logging_enabled=enabled)


def _tracing(block: Block) -> TracingConfiguration:
    tracing = block.get_block("Tracing")
    owner = tracing if tracing is not None else block
    return TracingConfiguration(
        metadata=owner.metadata,
        enabled=owner.get_attribute("Enabled").as_bool_value_or_default(False, owner),
    )
