# ᚱᛞᛊ • AWS RDS - Classic Resources
"""Flags DB security groups, which only exist on the EC2-Classic platform."""

from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_security_group" "good_example" {
  name        = "database"
  description = "Database access from the application subnet"
}
"""

TERRAFORM_BAD = """
resource "aws_db_security_group" "bad_example" {
  name = "database"

  ingress {
    cidr = "10.0.0.0/24"
  }
}
"""

CLOUDFORMATION_GOOD = """
AWSTemplateFormatVersion: "2010-09-09"
Resources:
  GoodExample:
    Type: AWS::EC2::SecurityGroup
    Properties:
      GroupDescription: Database access from the application subnet
"""

CLOUDFORMATION_BAD = """
AWSTemplateFormatVersion: "2010-09-09"
Resources:
  BadExample:
    Type: AWS::RDS::DBSecurityGroup
    Properties:
      GroupDescription: Database access
      DBSecurityGroupIngress:
        - CIDRIP: 10.0.0.0/24
"""


@rule(
    avd_id="AVD-AWS-0081",
    provider=Provider.AWS,
    service="rds",
    short_code="no-classic-resources",
    summary="AWS Classic resource usage.",
    severity=Severity.CRITICAL,
    impact="Classic resources are running in a shared environment with other customers",
    resolution="Switch to VPC resources",
    explanation=(
        "AWS Classic resources run in a shared environment with infrastructure owned by other "
        "AWS customers. You should run resources in a VPC instead."
    ),
    links=("https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/ec2-classic-platform.html",),
    terraform=EngineMetadata(
        good_examples=(TERRAFORM_GOOD,),
        bad_examples=(TERRAFORM_BAD,),
        remediation_markdown="Replace `aws_db_security_group` with a VPC `aws_security_group`.",
    ),
    cloudformation=EngineMetadata(
        good_examples=(CLOUDFORMATION_GOOD,),
        bad_examples=(CLOUDFORMATION_BAD,),
    ),
)
def check_no_classic_resources(state):
    results = Results()
    for group in state.aws.rds.classic.db_security_groups:
        results.add("Classic resources should not be used.", group)
    return results
