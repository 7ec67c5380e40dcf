# ᚱᛞᛊ • AWS RDS - Storage Encryption
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_db_instance" "good_example" {
  engine            = "postgres"
  instance_class    = "db.t3.micro"
  storage_encrypted = true
  kms_key_id        = "arn:aws:kms:us-east-1:123456789012:key/database"
}
"""

TERRAFORM_BAD = """
resource "aws_db_instance" "bad_example" {
  engine            = "postgres"
  instance_class    = "db.t3.micro"
  storage_encrypted = false
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::RDS::DBInstance
    Properties:
      Engine: postgres
      DBInstanceClass: db.t3.micro
      StorageEncrypted: true
      KmsKeyId: arn:aws:kms:us-east-1:123456789012:key/database
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::RDS::DBInstance
    Properties:
      Engine: postgres
      DBInstanceClass: db.t3.micro
"""


@rule(
    avd_id="AVD-AWS-0080",
    provider=Provider.AWS,
    service="rds",
    short_code="encrypt-instance-storage-data",
    summary="RDS encryption has not been enabled at a DB Instance level.",
    severity=Severity.HIGH,
    impact="Data can be read from RDS instances if compromised",
    resolution="Enable encryption for RDS instances",
    explanation=(
        "Encryption should be enabled for an RDS Database instances. When enabling encryption "
        "by setting the kms_key_id."
    ),
    links=("https://docs.aws.amazon.com/AmazonRDS/latest/UserGuide/Overview.Encryption.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_encrypt_instance_storage_data(state):
    results = Results()
    for instance in state.aws.rds.instances:
        # replicas inherit the encryption setting of their source
        if instance.is_replica:
            continue
        if instance.storage_encrypted.is_false():
            results.add("Instance does not have storage encryption enabled.", instance.storage_encrypted)
    return results
