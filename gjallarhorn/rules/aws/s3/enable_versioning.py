# ᛊᛃ • AWS S3 - Versioning
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_versioning" "good_example" {
  bucket = aws_s3_bucket.good_example.id

  versioning_configuration {
    status = "Enabled"
  }
}
"""

TERRAFORM_BAD = """
resource "aws_s3_bucket" "bad_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_versioning" "bad_example" {
  bucket = aws_s3_bucket.bad_example.id

  versioning_configuration {
    status = "Suspended"
  }
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::S3::Bucket
    Properties:
      VersioningConfiguration:
        Status: Enabled
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: application-data
"""


@rule(
    avd_id="AVD-AWS-0090",
    provider=Provider.AWS,
    service="s3",
    short_code="enable-versioning",
    summary="S3 Data should be versioned",
    severity=Severity.MEDIUM,
    impact="Deleted or modified data would not be recoverable",
    resolution="Enable versioning to protect against accidental/malicious removal or modification",
    explanation=(
        "Versioning in Amazon S3 is a means of keeping multiple variants of an object in the same "
        "bucket. You can use the S3 Versioning feature to preserve, retrieve, and restore every "
        "version of every object stored in your buckets."
    ),
    links=("https://docs.aws.amazon.com/AmazonS3/latest/userguide/Versioning.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_enable_versioning(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        if bucket.versioning.enabled.is_false():
            results.add("Bucket does not have versioning enabled", bucket.versioning.enabled)
    return results
