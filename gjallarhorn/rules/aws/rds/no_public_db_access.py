# ᚱᛞᛊ • AWS RDS - Public Access
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_db_instance" "good_example" {
  publicly_accessible = false
}
"""

TERRAFORM_BAD = """
resource "aws_db_instance" "bad_example" {
  publicly_accessible = true
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::RDS::DBInstance
    Properties:
      PubliclyAccessible: false
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::RDS::DBInstance
    Properties:
      PubliclyAccessible: true
"""


@rule(
    avd_id="AVD-AWS-0082",
    provider=Provider.AWS,
    service="rds",
    short_code="no-public-db-access",
    summary="A database resource is marked as publicly accessible.",
    severity=Severity.CRITICAL,
    impact="The database instance is publicly accessible",
    resolution="Set the database to not be publicly accessible",
    explanation=(
        "Database resources should not publicly available. You should limit all access "
        "to the minimum that is required for your application to function."
    ),
    links=("https://docs.aws.amazon.com/AmazonRDS/latest/UserGuide/USER_VPC.WorkingWithRDSInstanceinaVPC.html#USER_VPC.Hiding",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_no_public_db_access(state):
    results = Results()
    for instance in state.aws.rds.instances:
        if instance.publicly_accessible.is_true():
            results.add("Instance has Public Access enabled.", instance.publicly_accessible)
    return results
