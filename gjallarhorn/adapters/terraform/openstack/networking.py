# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • Terraform -> OpenStack Networking
"""
Adapts openstack_networking_secgroup_v2 resources.

Rules are separate resources that point at their group through
security_group_id; each group collects the rules that reference it.
"""

from __future__ import annotations

from typing import List, Tuple

from gjallarhorn.adapters.common import adapt_each, dangling_reference
from gjallarhorn.parsers.block import Block, Modules
from gjallarhorn.providers.openstack.networking import Networking, SecurityGroup, SecurityGroupRule
from gjallarhorn.types import BoolValue, IntValue

GROUP_TYPE = "openstack_networking_secgroup_v2"
RULE_TYPE = "openstack_networking_secgroup_rule_v2"


def adapt(modules: Modules) -> Networking:
    return Networking(security_groups=adapt_security_groups(modules))


def adapt_security_groups(modules: Modules) -> Tuple[SecurityGroup, ...]:
    groups = modules.get_resources_by_type(GROUP_TYPE)
    _report_orphan_rules(modules, groups)

    def adapt_group(block: Block) -> SecurityGroup:
        rule_blocks = modules.get_referencing_resources(block, RULE_TYPE, "security_group_id")
        return SecurityGroup(
            metadata=block.metadata,
            name=block.get_attribute("name").as_string_value_or_default("", block),
            description=block.get_attribute("description").as_string_value_or_default("", block),
            rules=adapt_each(rule_blocks, _adapt_rule),
        )

    return adapt_each(groups, adapt_group)


def _adapt_rule(block: Block) -> SecurityGroupRule:
    direction = block.get_attribute("direction")
    if direction.is_string():
        is_ingress = BoolValue.of(direction.equals("ingress", ignore_case=True), direction.metadata)
    else:
        is_ingress = direction.as_bool_value_or_default(False, block)

    ethertype_attr = block.get_attribute("ethertype")
    if ethertype_attr.is_string():
        ethertype = IntValue.of(6 if ethertype_attr.equals("IPv6", ignore_case=True) else 4, ethertype_attr.metadata)
    else:
        ethertype = ethertype_attr.as_int_value_or_default(4, block)

    return SecurityGroupRule(
        metadata=block.metadata,
        is_ingress=is_ingress,
        ethertype=ethertype,
        protocol=block.get_attribute("protocol").as_string_value_or_default("", block),
        port_min=block.get_attribute("port_range_min").as_int_value_or_default(0, block),
        port_max=block.get_attribute("port_range_max").as_int_value_or_default(0, block),
        cidr=block.get_attribute("remote_ip_prefix").as_string_value_or_default("", block),
    )


def _report_orphan_rules(modules: Modules, groups: List[Block]) -> None:
    for rule in modules.get_resources_by_type(RULE_TYPE):
        attribute = rule.get_attribute("security_group_id")
        group_refs = [ref for ref in attribute.references() if ref.parts[:1] == (GROUP_TYPE,)]
        if group_refs and not any(ref.matches(group) for ref in group_refs for group in groups):
            dangling_reference(attribute, rule)
