# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • Terraform -> OpenStack Compute
"""Adapts openstack_compute_instance_v2 and openstack_fw_rule_v1 resources."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Modules
from gjallarhorn.providers.openstack.compute import Compute, Firewall, FirewallRule, Instance

logger = logging.getLogger(__name__)


def adapt(modules: Modules) -> Compute:
    return Compute(
        instances=adapt_instances(modules),
        firewall=adapt_firewall(modules),
    )


def adapt_instances(modules: Modules) -> Tuple[Instance, ...]:
    return adapt_each(modules.get_resources_by_type("openstack_compute_instance_v2"), _adapt_instance)


def _adapt_instance(block: Block) -> Instance:
    return Instance(
        metadata=block.metadata,
        admin_password=block.get_attribute("admin_pass").as_string_value_or_default("", block),
    )


def adapt_firewall(modules: Modules) -> Firewall:
    allow: List[FirewallRule] = []
    deny: List[FirewallRule] = []
    for action, rule in adapt_each(modules.get_resources_by_type("openstack_fw_rule_v1"), _adapt_firewall_rule):
        if action == "allow":
            allow.append(rule)
        elif action in ("deny", "reject"):
            deny.append(rule)
        else:
            logger.debug(f"Firewall rule at {rule.metadata.range} has no usable action, skipping")
    return Firewall(allow_rules=tuple(allow), deny_rules=tuple(deny))


def _adapt_firewall_rule(block: Block) -> Tuple[Optional[str], FirewallRule]:
    action = block.get_attribute("action").as_string()
    rule = FirewallRule(
        metadata=block.metadata,
        source=block.get_attribute("source_ip_address").as_string_value_or_default("", block),
        destination=block.get_attribute("destination_ip_address").as_string_value_or_default("", block),
        source_port=block.get_attribute("source_port").as_string_value_or_default("", block),
        destination_port=block.get_attribute("destination_port").as_string_value_or_default("", block),
        enabled=block.get_attribute("enabled").as_bool_value_or_default(True, block),
    )
    return (action.lower() if action else None), rule
