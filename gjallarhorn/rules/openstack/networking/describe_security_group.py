# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Networking - Security Group Descriptions
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "openstack_networking_secgroup_v2" "group_1" {
  name        = "group_1"
  description = "Web servers in the public subnet"
}
"""

TERRAFORM_BAD = """
resource "openstack_networking_secgroup_v2" "group_1" {
  name = "group_1"
}
"""


@rule(
    avd_id="AVD-OPNSTK-0005",
    provider=Provider.OPENSTACK,
    service="networking",
    short_code="describe-security-group",
    summary="Missing description for security group.",
    severity=Severity.LOW,
    impact="Auditing capability and awareness limited.",
    resolution="Add descriptions for all security groups",
    explanation="Security groups should include a description for auditing purposes. Simplifies auditing, debugging, and managing security groups.",
    links=("https://registry.terraform.io/providers/terraform-provider-openstack/openstack/latest/docs/resources/networking_secgroup_v2",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
)
def check_describe_security_group(state):
    results = Results()
    for group in state.openstack.networking.security_groups:
        if group.description.is_empty():
            results.add("Network security group does not have a description.", group.description)
    return results
