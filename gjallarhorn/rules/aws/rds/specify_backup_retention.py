# ᚱᛞᛊ • AWS RDS - Backup Retention
"""
Instances should keep automated backups for more than a day.

Read replicas are skipped: their backups are governed by the source instance.
"""

from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

MINIMUM_RETENTION_DAYS = 2

TERRAFORM_GOOD = """
resource "aws_db_instance" "good_example" {
  allocated_storage       = 20
  engine                  = "mysql"
  backup_retention_period = 5
}
"""

TERRAFORM_BAD = """
resource "aws_db_instance" "bad_example" {
  allocated_storage = 20
  engine            = "mysql"
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::RDS::DBInstance
    Properties:
      Engine: mysql
      BackupRetentionPeriod: 30
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::RDS::DBInstance
    Properties:
      Engine: mysql
"""


@rule(
    avd_id="AVD-AWS-0077",
    provider=Provider.AWS,
    service="rds",
    short_code="specify-backup-retention",
    summary="RDS Cluster and RDS instance should have backup retention longer than default 1 day",
    severity=Severity.MEDIUM,
    impact="Potential loss of data and short opportunity for recovery",
    resolution="Explicitly set the retention period to greater than the default",
    explanation=(
        "RDS backup retention for clusters defaults to 1 day, this may not be enough to identify "
        "and respond to an issue. Backup retention periods should be set to a period that is a "
        "balance on cost and limiting risk."
    ),
    links=("https://docs.aws.amazon.com/AmazonRDS/latest/UserGuide/USER_WorkingWithAutomatedBackups.html#USER_WorkingWithAutomatedBackups.BackupRetention",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_specify_backup_retention(state):
    results = Results()
    for instance in state.aws.rds.instances:
        if instance.is_replica:
            continue
        if instance.backup_retention_period_days.less_than(MINIMUM_RETENTION_DAYS):
            results.add("Instance has very low backup retention period.", instance.backup_retention_period_days)
    return results
