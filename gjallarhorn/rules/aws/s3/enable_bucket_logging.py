# ᛊᛃ • AWS S3 - Access Logging
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

# buckets with this ACL receive logs from other buckets
LOG_DELIVERY_ACL = "log-delivery-write"

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "application-data"

  logging {
    target_bucket = "access-logs"
    target_prefix = "log/"
  }
}
"""

TERRAFORM_BAD = """
resource "aws_s3_bucket" "bad_example" {
  bucket = "application-data"
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: application-data
      LoggingConfiguration:
        DestinationBucketName: access-logs
        LogFilePrefix: log/
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: application-data
"""


@rule(
    avd_id="AVD-AWS-0089",
    provider=Provider.AWS,
    service="s3",
    short_code="enable-bucket-logging",
    summary="S3 Bucket does not have logging enabled.",
    severity=Severity.MEDIUM,
    impact="There is no way to determine the access to this bucket",
    resolution="Add a logging block to the resource to enable access logging",
    explanation=(
        "Buckets should have logging enabled so that access can be audited."
    ),
    links=("https://docs.aws.amazon.com/AmazonS3/latest/dev/ServerLogs.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_enable_bucket_logging(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        if bucket.acl.equal_to(LOG_DELIVERY_ACL):
            continue
        if bucket.logging.enabled.is_false():
            results.add("Bucket does not have logging enabled", bucket.logging.enabled)
    return results
