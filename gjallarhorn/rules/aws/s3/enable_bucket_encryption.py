# ᛊᛃ • AWS S3 - Encryption at Rest
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

TERRAFORM_GOOD = """
resource "aws_s3_bucket" "good_example" {
  bucket = "application-data"
}

resource "aws_s3_bucket_server_side_encryption_configuration" "good_example" {
  bucket = aws_s3_bucket.good_example.id

  rule {
    apply_server_side_encryption_by_default {
      kms_master_key_id = "arn:aws:kms:us-east-1:123456789012:key/bucket"
      sse_algorithm     = "aws:kms"
    }
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
      BucketEncryption:
        ServerSideEncryptionConfiguration:
          - ServerSideEncryptionByDefault:
              SSEAlgorithm: aws:kms
              KMSMasterKeyID: arn:aws:kms:us-east-1:123456789012:key/bucket
"""

CLOUDFORMATION_BAD = """
Resources:
  BadExample:
    Type: AWS::S3::Bucket
    Properties:
      BucketName: application-data
"""


@rule(
    avd_id="AVD-AWS-0088",
    provider=Provider.AWS,
    service="s3",
    short_code="enable-bucket-encryption",
    summary="Unencrypted S3 bucket.",
    severity=Severity.HIGH,
    impact="The bucket objects could be read if compromised",
    resolution="Configure bucket encryption",
    explanation="S3 Buckets should be encrypted to protect the data that is stored within them if access is compromised.",
    links=("https://docs.aws.amazon.com/AmazonS3/latest/userguide/bucket-encryption.html",),
    terraform=EngineMetadata(good_examples=(TERRAFORM_GOOD,), bad_examples=(TERRAFORM_BAD,)),
    cloudformation=EngineMetadata(good_examples=(CLOUDFORMATION_GOOD,), bad_examples=(CLOUDFORMATION_BAD,)),
)
def check_enable_bucket_encryption(state):
    results = Results()
    for bucket in state.aws.s3.buckets:
        if bucket.encryption.enabled.is_false():
            results.add("Bucket does not have encryption enabled", bucket.encryption.enabled)
    return results
