from __future__ import annotations

from gjallarhorn.rules.aws.rds.no_classic_resources import check_no_classic_resources
from gjallarhorn.rules.aws.rds.specify_backup_retention import check_specify_backup_retention
from gjallarhorn.state import State
from gjallarhorn.types import Range

CLASSIC_GROUPS = """
resource "aws_db_security_group" "first" {
  name = "first"
}

resource "aws_db_security_group" "second" {
  name = "second"
}
"""


def test_each_classic_group_is_one_finding(terraform_state) -> None:
    state = terraform_state(CLASSIC_GROUPS)
    groups = state.aws.rds.classic.db_security_groups

    results = check_no_classic_resources.evaluate(state)

    assert len(results) == 2
    assert [r.range for r in results] == [g.metadata.range for g in groups]
    assert results[0].range == Range("main.tf", 1, 3)
    assert results[1].range == Range("main.tf", 5, 7)
    assert all(r.rule_id == "AVD-AWS-0081" for r in results)


def test_empty_state_has_no_classic_findings() -> None:
    assert check_no_classic_resources.evaluate(State()) == []


def test_terraform_instance_defaults(terraform_state) -> None:
    state = terraform_state("""
        resource "aws_db_instance" "db" {
          engine = "postgres"
        }
    """)
    instance = state.aws.rds.instances[0]

    assert instance.storage_encrypted.is_false()
    assert instance.storage_encrypted.is_default
    assert instance.publicly_accessible.is_false()
    assert instance.backup_retention_period_days.value == 0
    assert instance.backup_retention_period_days.range == Range("main.tf", 1, 3)
    assert not instance.is_replica


def test_template_instance_defaults(template_state) -> None:
    state = template_state("""
        Resources:
          Database:
            Type: AWS::RDS::DBInstance
            Properties:
              Engine: postgres
              StorageEncrypted: true
              KmsKeyId: alias/rds
    """)
    instance = state.aws.rds.instances[0]

    assert instance.backup_retention_period_days.value == 1
    assert instance.backup_retention_period_days.is_default
    assert instance.storage_encrypted.is_true()
    assert instance.storage_encrypted.range == Range("template.yaml", 6, 6)
    assert instance.kms_key_id.value == "alias/rds"


def test_replicas_are_not_checked_for_retention(terraform_state) -> None:
    state = terraform_state("""
        resource "aws_db_instance" "primary" {
          backup_retention_period = 7
        }

        resource "aws_db_instance" "replica" {
          replicate_source_db = aws_db_instance.primary.identifier
        }

        resource "aws_db_instance" "standalone" {
          backup_retention_period = 1
        }
    """)
    primary, replica, standalone = state.aws.rds.instances

    assert replica.is_replica
    assert replica.replication_source_arn.value == "aws_db_instance.primary.identifier"
    assert not primary.is_replica

    results = check_specify_backup_retention.evaluate(state)
    assert [r.range for r in results] == [Range("main.tf", 10, 10)]
    assert results[0].range == standalone.backup_retention_period_days.range
