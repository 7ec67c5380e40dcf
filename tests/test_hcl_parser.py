from __future__ import annotations

import pytest

from gjallarhorn.exceptions import HCLSyntaxError, ParseError
from gjallarhorn.parsers import Reference, Unknown
from gjallarhorn.parsers.hcl import MAX_NESTING, Interpolation, build_module, parse_hcl, split_template
from gjallarhorn.types import Range

from conftest import source_text


def test_comments_do_not_shift_lines() -> None:
    items = parse_hcl(source_text("""
        # leading comment
        // another
        /* a block
           comment */
        name = "web" # trailing
    """))

    assert [(item.name, item.start_line, item.end_line) for item in items] == [("name", 5, 5)]
    assert items[0].expr.value == "web"


def test_references_and_templates(terraform_module) -> None:
    module = terraform_module("""
        resource "openstack_networking_secgroup_rule_v2" "ssh" {
          security_group_id = openstack_networking_secgroup_v2.web.id
          description       = "${var.env}-ssh"
          count             = length(aws_s3_bucket.logs[0].tags)
          port              = "${22}"
        }
    """)
    block = module.get_resources_by_type("openstack_networking_secgroup_rule_v2")[0]

    assert block.get_attribute("security_group_id").value == Reference(("openstack_networking_secgroup_v2", "web", "id"))

    description = block.get_attribute("description").value
    assert isinstance(description, Unknown)
    assert description.expression == "${var.env}-ssh"
    assert description.references == (Reference(("var", "env")),)

    count = block.get_attribute("count").value
    assert isinstance(count, Unknown)
    assert count.references == (Reference(("aws_s3_bucket", "logs", "0", "tags")),)

    assert block.get_attribute("port").value == 22


def test_split_template_separates_interpolations() -> None:
    parts = split_template("${var.env}-data-$${literal}", 1)

    assert isinstance(parts[0], Interpolation)
    assert parts[0].source == "var.env"
    assert parts[1] == "-data-${literal}"


def test_blocks_and_attributes_keep_their_lines() -> None:
    items = parse_hcl(source_text("""
        /* header
           comment */
        resource "aws_s3_bucket" "data" {
          bucket = "data"

          logging {
            target_bucket = "logs"
          }
        }
    """), "main.tf")

    assert len(items) == 1
    block = items[0]
    assert block.type == "resource"
    assert block.labels == ["aws_s3_bucket", "data"]
    assert (block.start_line, block.end_line) == (3, 9)
    assert [(entry.start_line, entry.end_line) for entry in block.body] == [(4, 4), (6, 8)]


def test_list_items_carry_their_own_ranges(terraform_module) -> None:
    module = terraform_module("""
        resource "openstack_compute_instance_v2" "web" {
          security_groups = [
            "default",
            "web",
          ]
        }
    """)
    attribute = module.get_resources_by_type("openstack_compute_instance_v2")[0].get_attribute("security_groups")

    assert attribute.is_list()
    assert attribute.value == ["default", "web"]
    assert attribute.range == Range("main.tf", 2, 5)
    assert [v.range.start_line for v in attribute.as_string_values()] == [3, 4]


def test_heredoc_and_escapes(terraform_module) -> None:
    module = terraform_module('''
        resource "aws_iam_policy" "policy" {
          description = "line one\\nline two"
          policy      = <<EOF
        {"Statement": []}
        EOF
          name        = "after"
        }
    ''')
    block = module.get_resources_by_type("aws_iam_policy")[0]

    assert block.get_attribute("description").as_string() == "line one\nline two"
    assert block.get_attribute("policy").as_string() == '{"Statement": []}\n'
    assert block.get_attribute("policy").range == Range("main.tf", 3, 5)
    assert block.get_attribute("name").range == Range("main.tf", 6, 6)


def test_numbers_booleans_and_null(terraform_module) -> None:
    module = terraform_module("""
        resource "aws_db_instance" "db" {
          allocated_storage = 20
          ratio             = 0.5
          offset            = -3
          encrypted         = false
          kms_key_id        = null
        }
    """)
    block = module.get_resources_by_type("aws_db_instance")[0]

    assert block.get_attribute("allocated_storage").value == 20
    assert block.get_attribute("ratio").value == 0.5
    assert block.get_attribute("offset").value == -3
    assert block.get_attribute("encrypted").is_false()
    assert block.get_attribute("kms_key_id").is_null()
    assert block.get_attribute("kms_key_id").as_string_value_or_default("", block).is_default


def test_conditionals_and_for_expressions_are_opaque(terraform_module) -> None:
    module = terraform_module("""
        resource "aws_db_instance" "db" {
          publicly_accessible = var.public ? true : false
          names               = [for s in var.subnets : s.name]
          engine              = "postgres"
        }
    """)
    block = module.get_resources_by_type("aws_db_instance")[0]

    assert not block.get_attribute("publicly_accessible").is_resolvable()
    assert not block.get_attribute("names").is_resolvable()
    assert block.get_attribute("engine").as_string() == "postgres"
    assert block.get_attribute("engine").range == Range("main.tf", 4, 4)


def test_variables_declared_in_another_file_of_the_module() -> None:
    files = {
        "variables.tf": parse_hcl('variable "pass" {\n  default = "secret"\n}\n', "variables.tf"),
        "main.tf": parse_hcl(
            'resource "openstack_compute_instance_v2" "web" {\n  admin_pass = var.pass\n}\n',
            "main.tf",
        ),
    }
    module = build_module("infra", files)
    instance = module.get_resources_by_type("openstack_compute_instance_v2")[0]

    assert instance.get_attribute("admin_pass").as_string() == "secret"
    assert instance.range.filename == "main.tf"
    assert len(module.get_blocks("variable")) == 1


@pytest.mark.parametrize(
    "content, line",
    [
        ('resource "x" "y" {\n  name = "unterminated\n}\n', 3),
        ('resource "x" "y" {\n  name = "ok"\n', 2),
        ('resource "x" "y" {\n  name = "ok" "extra"\n}\n', 2),
        ('}\n', 1),
    ],
)
def test_syntax_errors_report_their_line(content: str, line: int) -> None:
    with pytest.raises(HCLSyntaxError) as excinfo:
        parse_hcl(content, "broken.tf")

    assert excinfo.value.line == line
    assert excinfo.value.filename == "broken.tf"
    assert isinstance(excinfo.value, ParseError)
    assert str(excinfo.value).startswith(f"broken.tf:{line}:")


def test_unterminated_input_is_reported_at_its_last_line() -> None:
    with pytest.raises(HCLSyntaxError, match="end of file") as excinfo:
        parse_hcl('resource "x" "y" {\n  name = "ok"\n\n\n', "broken.tf")

    assert excinfo.value.line == 2


@pytest.mark.parametrize(
    "content",
    [
        "locals {\n  x = " + "[" * 3000 + "]" * 3000 + "\n}\n",
        "a {\n" * (MAX_NESTING + 5) + "}\n" * (MAX_NESTING + 5),
    ],
)
def test_deep_nesting_is_a_syntax_error(content: str) -> None:
    with pytest.raises(HCLSyntaxError, match="Nesting") as excinfo:
        parse_hcl(content, "deep.tf")

    assert excinfo.value.filename == "deep.tf"
    assert excinfo.value.line >= 1
