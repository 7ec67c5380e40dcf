# ᛊᛃ • AWS S3 - Public ACLs
"""Buckets must not grant access to everyone through a canned ACL."""

from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "internal-reports"
}

resource "aws_s3_bucket_acl" "good_example" {
  bucket = aws_s3_bucket.good_example.id
  acl    = "private"
}
"""

TERRAFORM_BAD = """
resource "aws_s3_bucket" "bad_example" {
  bucket = "internal-reports"
}

resource "aws_s3_bucket_acl" "bad_example" {
  bucket = aws_s3_bucket.bad_example.id
  acl    = "public-read"
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::S3::Bucket
    Properties:
      AccessControl: Private
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      AccessControl: PublicRead
"""


@rule(
    avd_id="AVD-AWS-0092",
    provider=Provider.AWS,
    service="s3",
    short_code="no-public-access-with-acl",
    summary="S3 Buckets not publicly accessible through ACL.",
    severity=Severity.HIGH,
    impact="Public access to the bucket can lead to data leakage",
    resolution="Don't use canned ACLs or switch to private acl",
    explanation=(
        "Buckets should not have ACLs that allow public access. The canned ACLs "
        "public-read, public-read-write, website and authenticated-read all grant "
        "access to principals outside of the account."
    ),
    links=("https://docs.aws.amazon.com/AmazonS3/latest/userguide/acl-overview.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_no_public_access_with_acl(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        if bucket.has_public_acl():
            results.add(f"Bucket has a public ACL: '{bucket.acl.value}'.", bucket.acl)
    return results
