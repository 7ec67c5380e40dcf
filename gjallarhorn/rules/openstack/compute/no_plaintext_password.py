# ᛟᛈᛖᚾᛊᛏᚨᚲᚲ • OpenStack Compute - Plaintext Admin Password
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "openstack_compute_instance_v2" "good_example" {
  name            = "basic"
  image_id        = "ad091b52-742f-469e-8f3c-fd81cadf0743"
  flavor_id       = "3"
  key_pair        = "my_key_pair_name"
  security_groups = ["default"]
  user_data       = "#cloud-config\\nhostname: instance_1.example.com\\nfqdn: instance_1.example.com"

  network {
    name = "my_network"
  }
}
"""

TERRAFORM_BAD = """
resource "openstack_compute_instance_v2" "bad_example" {
  name            = "basic"
  image_id        = "ad091b52-742f-469e-8f3c-fd81cadf0743"
  flavor_id       = "3"
  admin_pass      = "N0tSoS3cretP4ssw0rd"
  security_groups = ["default"]
  user_data       = "#cloud-config\\nhostname: instance_1.example.com\\nfqdn: instance_1.example.com"

  network {
    name = "my_network"
  }
}
"""


@rule(
    avd_id="AVD-OPNSTK-0001",
    provider=Provider.OPENSTACK,
    service="compute",
    short_code="no-plaintext-password",
    summary="No plaintext password for compute instance",
    severity=Severity.MEDIUM,
    impact="Including a plaintext password could lead to compromised instance",
    resolution="Do not use plaintext passwords in terraform files",
    explanation="Assigning a password to the compute instance using plaintext could lead to compromise; it would be preferable to use key-pairs as a login mechanism",
    links=("https://registry.terraform.io/providers/terraform-provider-openstack/openstack/latest/docs/resources/compute_instance_v2#admin_pass",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
)
def check_no_plaintext_password(state):
    results = Results()
    for instance in state.openstack.compute.instances:
        if instance.admin_password.is_not_empty():
            results.add("Instance has admin password set.", instance.admin_password)
    return results
