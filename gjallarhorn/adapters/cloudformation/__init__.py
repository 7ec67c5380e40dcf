# ᚲᛚᛟᚢᛞᚠᛟᚱᛗᚨᛏᛁᛟᚾ • CloudFormation Adapters
"""Adapters from parsed CloudFormation templates to the typed state."""

from gjallarhorn.adapters.cloudformation import aws
from gjallarhorn.parsers.block import Module
from gjallarhorn.state import State


def adapt(template: Module) -> State:
    return State(aws=aws.adapt(template))
