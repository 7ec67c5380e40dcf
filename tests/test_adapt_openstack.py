from __future__ import annotations

from gjallarhorn.adapters.common import adapt_each, collect_diagnostics
from gjallarhorn.diagnostics import DiagnosticKind
from gjallarhorn.types import Range

INSTANCE_WITH_PASSWORD = """
resource "openstack_compute_instance_v2" "bad_example" {
  name       = "basic"
  admin_pass = "N0tSoS3cretP4ssw0rd"
  image_id   = "ad091b52-742f-469e-8f3c-fd81cadf0743"
}
"""

INSTANCE_WITHOUT_PASSWORD = """
resource "openstack_compute_instance_v2" "good_example" {
  name      = "basic"
  image_id  = "ad091b52-742f-469e-8f3c-fd81cadf0743"
  flavor_id = "3"
}
"""

FIREWALL = """
resource "openstack_networking_secgroup_v2" "group" {
  name = "web"
}

resource "openstack_fw_rule_v1" "rule_1" {
  name                   = "my_rule"
  action                 = "allow"
  protocol               = "tcp"
  destination_port       = "22"
  destination_ip_address = "10.10.10.1"
  source_ip_address      = "10.10.10.2"
  enabled                = "false"
}

resource "openstack_fw_rule_v1" "rule_2" {
  action = "deny"
}
"""


def test_admin_password_keeps_its_declaration_line(terraform_state) -> None:
    state = terraform_state(INSTANCE_WITH_PASSWORD)
    instance = state.openstack.compute.instances[0]

    assert instance.admin_password.value == "N0tSoS3cretP4ssw0rd"
    assert instance.admin_password.range == Range("main.tf", 3, 3)
    assert instance.admin_password.is_set
    assert instance.metadata.range == Range("main.tf", 1, 5)


def test_omitted_admin_password_defaults_to_the_block_range(terraform_state) -> None:
    state = terraform_state(INSTANCE_WITHOUT_PASSWORD)
    instance = state.openstack.compute.instances[0]

    assert instance.admin_password.value == ""
    assert instance.admin_password.is_default
    assert instance.admin_password.range == Range("main.tf", 1, 5)
    assert instance.admin_password.range == instance.metadata.range
    assert instance.admin_password.range.start_line != 0


def test_firewall_rule_fields_keep_their_own_lines(terraform_state) -> None:
    state = terraform_state(FIREWALL)
    firewall = state.openstack.compute.firewall

    assert len(firewall.allow_rules) == 1
    assert len(firewall.deny_rules) == 1

    allowed = firewall.allow_rules[0]
    assert allowed.destination_port.range == Range("main.tf", 9, 9)
    assert allowed.destination.range == Range("main.tf", 10, 10)
    assert allowed.source.range == Range("main.tf", 11, 11)
    assert allowed.enabled.range == Range("main.tf", 12, 12)
    assert allowed.enabled.is_false()
    assert allowed.destination.value == "10.10.10.1"
    assert allowed.source.value == "10.10.10.2"


def test_firewall_rule_defaults(terraform_state) -> None:
    state = terraform_state(FIREWALL)
    denied = state.openstack.compute.firewall.deny_rules[0]

    assert denied.enabled.is_true()
    assert denied.enabled.is_default
    assert denied.enabled.range == Range("main.tf", 16, 18)
    assert denied.source.is_empty()


def test_security_groups_collect_the_rules_that_reference_them(terraform_state) -> None:
    state = terraform_state("""
        resource "openstack_networking_secgroup_v2" "web" {
          name        = "web"
          description = "Web servers"
        }

        resource "openstack_networking_secgroup_v2" "db" {
          name = "db"
        }

        resource "openstack_networking_secgroup_rule_v2" "ssh" {
          direction         = "ingress"
          ethertype         = "IPv4"
          protocol          = "tcp"
          port_range_min    = 22
          port_range_max    = 22
          remote_ip_prefix  = "0.0.0.0/0"
          security_group_id = openstack_networking_secgroup_v2.web.id
        }

        resource "openstack_networking_secgroup_rule_v2" "out" {
          direction         = "egress"
          ethertype         = "IPv6"
          remote_ip_prefix  = "::/0"
          security_group_id = openstack_networking_secgroup_v2.web.id
        }
    """)
    web, db = state.openstack.networking.security_groups

    assert web.description.value == "Web servers"
    assert db.description.is_empty()
    assert db.rules == ()
    assert len(web.rules) == 2

    ssh, out = web.rules
    assert ssh.is_ingress.is_true()
    assert ssh.ethertype.value == 4
    assert ssh.port_min.value == 22
    assert ssh.cidr.value == "0.0.0.0/0"
    assert ssh.cidr.range == Range("main.tf", 17, 17)
    assert out.is_ingress.is_false()
    assert out.ethertype.value == 6
    assert out.protocol.is_default


def test_rules_pointing_at_undeclared_groups_are_reported(adapt_terraform) -> None:
    state, diagnostics = adapt_terraform("""
        resource "openstack_networking_secgroup_rule_v2" "orphan" {
          direction         = "ingress"
          remote_ip_prefix  = "0.0.0.0/0"
          security_group_id = openstack_networking_secgroup_v2.missing.id
        }
    """)

    assert state.openstack.networking.security_groups == ()
    assert [d.kind for d in diagnostics] == [DiagnosticKind.REFERENCE]
    assert diagnostics[0].source == "openstack_networking_secgroup_rule_v2.orphan"
    assert diagnostics[0].range == Range("main.tf", 4, 4)


def test_adapting_twice_gives_equal_objects(adapt_terraform) -> None:
    first, _ = adapt_terraform(FIREWALL)
    second, _ = adapt_terraform(FIREWALL)

    assert first == second
    assert first is not second
    assert first.openstack.compute.firewall.allow_rules[0].source.range == Range("main.tf", 11, 11)


def test_a_failing_block_is_skipped_and_reported(terraform_module) -> None:
    module = terraform_module(INSTANCE_WITH_PASSWORD + INSTANCE_WITHOUT_PASSWORD)
    blocks = module.get_resources_by_type("openstack_compute_instance_v2")

    def adapt_block(block):
        if block.name_label == "bad_example":
            raise KeyError("admin_pass")
        return block.name_label

    with collect_diagnostics() as diagnostics:
        adapted = adapt_each(blocks, adapt_block)

    assert adapted == ("good_example",)
    assert [d.kind for d in diagnostics] == [DiagnosticKind.ADAPTATION]
    assert diagnostics[0].source == "openstack_compute_instance_v2.bad_example"
    assert diagnostics[0].range == Range("main.tf", 1, 5)
