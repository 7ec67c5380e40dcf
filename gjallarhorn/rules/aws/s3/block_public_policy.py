# ᛊᛃ • AWS S3 - Public Access Block (Policies)
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_public_access_block" "good_example" {
  bucket              = aws_s3_bucket.good_example.id
  block_public_policy = true
}
"""

TERRAFORM_BAD = """
resource "aws_s3_bucket" "bad_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_public_access_block" "bad_example" {
  bucket = aws_s3_bucket.bad_example.id
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
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      PublicAccessBlockConfiguration:
        BlockPublicAcls: true
        BlockPublicPolicy: false
"""


@rule(
    avd_id="AVD-AWS-0087",
    provider=Provider.AWS,
    service="s3",
    short_code="block-public-policy",
    summary="S3 Access block should block public policy",
    severity=Severity.HIGH,
    impact="Users could put a policy that allows public access",
    resolution="Prevent policies that allow public access being PUT",
    explanation=(
        "S3 bucket policy should have block public policy to prevent users from putting a "
        "policy that enable public access."
    ),
    links=("https://docs.aws.amazon.com/AmazonS3/latest/dev-retired/access-control-block-public-access.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_block_public_policy(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        access_block = bucket.public_access_block
        if not access_block.is_declared:
            results.add("No public access block so not blocking public policies", bucket)
        elif access_block.block_public_policy.is_false():
            results.add("Public access block does not block public policies", access_block.block_public_policy)
    return results
