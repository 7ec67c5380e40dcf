# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Networking - Public Egress
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule
from gjallarhorn.rules.cidr import is_public

TERRAFORM_GOOD = """
resource "openstack_networking_secgroup_v2" "group_1" {
  name        = "group_1"
  description = "HTTPS to the internal proxy"
}

resource "openstack_networking_secgroup_rule_v2" "rule_1" {
  direction         = "egress"
  ethertype         = "IPv4"
  protocol          = "tcp"
  port_range_min    = 443
  port_range_max    = 443
  remote_ip_prefix  = "10.0.0.0/16"
  security_group_id = openstack_networking_secgroup_v2.group_1.id
}
"""

TERRAFORM_BAD = """
resource "openstack_networking_secgroup_v2" "group_1" {
  name        = "group_1"
  description = "HTTPS to anywhere"
}

resource "openstack_networking_secgroup_rule_v2" "rule_1" {
  direction         = "egress"
  ethertype         = "IPv4"
  protocol          = "tcp"
  port_range_min    = 443
  port_range_max    = 443
  remote_ip_prefix  = "1.2.3.4/32"
  security_group_id = openstack_networking_secgroup_v2.group_1.id
}
"""


@rule(
    avd_id="AVD-OPNSTK-0004",
    provider=Provider.OPENSTACK,
    service="networking",
    short_code="no-public-egress",
    summary="A security group rule allows egress traffic to multiple public addresses",
    severity=Severity.MEDIUM,
    impact="Potential exfiltration of data to the public internet",
    resolution="Employ more restrictive security group rules",
    explanation="Opening up ports to the public internet is generally to be avoided. You should restrict access to IP addresses or ranges that explicitly require it where possible.",
    links=("https://registry.terraform.io/providers/terraform-provider-openstack/openstack/latest/docs/resources/networking_secgroup_rule_v2",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
)
def check_no_public_egress(state):
    results = Results()
    for group in state.openstack.networking.security_groups:
        for group_rule in group.rules:
            if group_rule.is_ingress.is_true():
                continue
            if is_public(group_rule.cidr.value):
                results.add("Security group rule allows egress to multiple public addresses.", group_rule.cidr)
    return results
