# ᛊᛃ • AWS S3 - Public Access Block (ACLs)
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_public_access_block" "good_example" {
  bucket            = aws_s3_bucket.good_example.id
  block_public_acls = true
}
"""

TERRAFORM_BAD = """
resource "aws_s3_bucket" "bad_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_public_access_block" "bad_example" {
  bucket            = aws_s3_bucket.bad_example.id
  block_public_acls = false
}
"""

CLOUDFORMATION_GOOD = """
Resources:
  GoodExample:
    Type: AWS::S3::Bucket
    Properties:
      PublicAccessBlockConfiguration:
        BlockPublicAcls: true
        BlockPublicPolicy: true
        IgnorePublicAcls: true
        RestrictPublicBuckets: true
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: application-data
"""


@rule(
    avd_id="AVD-AWS-0086",
    provider=Provider.AWS,
    service="s3",
    short_code="block-public-acls",
    summary="S3 Access block should block public ACL",
    severity=Severity.HIGH,
    impact="PUT calls with public ACLs specified can make objects public",
    resolution="Enable blocking any PUT calls with a public ACL specified",
    explanation=(
        "S3 buckets should block public ACLs on buckets and any objects they contain. "
        "With blocking enabled, PUT calls fail when the request carries a public ACL."
    ),
    links=("https://docs.aws.amazon.com/AmazonS3/latest/dev-retired/access-control-block-public-access.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_block_public_acls(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        access_block = bucket.public_access_block
        if not access_block.is_declared:
            results.add("No public access block so not blocking public acls", bucket)
        elif access_block.block_public_acls.is_false():
            results.add("Public access block does not block public ACLs", access_block.block_public_acls)
    return results
