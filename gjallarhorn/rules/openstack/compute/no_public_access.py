# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Compute - Firewall Allow Rules
"""
Allow rules of the FWaaS firewall must name internal source and destination
addresses. Disabled rules are ignored.
"""

from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule
from gjallarhorn.rules.cidr import is_public

TERRAFORM_GOOD = """
resource "openstack_fw_rule_v1" "rule_1" {
  name                   = "my_rule"
  description            = "let anyone in"
  action                 = "allow"
  protocol               = "tcp"
  destination_port       = "22"
  enabled                = "true"
  source_ip_address      = "10.10.10.1"
  destination_ip_address = "10.10.10.2"
}
"""

TERRAFORM_BAD = """
resource "openstack_fw_rule_v1" "rule_1" {
  name             = "my_rule"
  description      = "let anyone in"
  action           = "allow"
  protocol         = "tcp"
  destination_port = "22"
  enabled          = "true"
}
"""


@rule(
    avd_id="AVD-OPNSTK-0002",
    provider=Provider.OPENSTACK,
    service="compute",
    short_code="no-public-access",
    summary="A firewall rule allows traffic from/to the public internet",
    severity=Severity.MEDIUM,
    impact="Exposure of infrastructure to the public internet",
    resolution="Employ more restrictive firewall rules",
    explanation="Opening up ports to the public internet is generally to be avoided. You should restrict access to IP addresses or ranges that explicitly require it where possible.",
    links=("https://registry.terraform.io/providers/terraform-provider-openstack/openstack/latest/docs/resources/fw_rule_v1",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
)
def check_no_public_access(state):
    results = Results()
    for firewall_rule in state.openstack.compute.firewall.allow_rules:
        if firewall_rule.enabled.is_false():
            continue

        if firewall_rule.destination.is_empty():
            results.add("Firewall rule does not restrict destination address internally.", firewall_rule.destination)
        elif is_public(firewall_rule.destination.value):
            results.add("Firewall rule allows public egress.", firewall_rule.destination)

        if firewall_rule.source.is_empty():
            results.add("Firewall rule does not restrict source address internally.", firewall_rule.source)
        elif is_public(firewall_rule.source.value):
            results.add("Firewall rule allows public ingress.", firewall_rule.source)
    return results
