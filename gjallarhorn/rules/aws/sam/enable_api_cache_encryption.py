# ᛊᚨᛗ • SAM API - Cache Encryption
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Good SAM API example
      StageName: Prod
      MethodSettings:
        - CacheDataEncrypted: true
          ResourcePath: "/*"
          HttpMethod: "*"
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Bad SAM API example
      StageName: Prod
      MethodSettings:
        - CacheDataEncrypted: false
          ResourcePath: "/*"
          HttpMethod: "*"
"""


@rule(
    avd_id="AVD-AWS-0110",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-api-cache-encryption",
    summary="SAM API must have data cache enabled",
    severity=Severity.MEDIUM,
    impact="Data stored in the cache that is unencrypted may be vulnerable to compromise",
    resolution="Enable cache encryption",
    explanation="Method cache encryption ensures that any sensitive data in the cache is not vulnerable to compromise in the event of interception",
    links=("https://docs.aws.amazon.com/AWSCloudFormation/latest/UserGuide/aws-properties-apigateway-stage-methodsetting.html#cfn-apigateway-stage-methodsetting-cachedataencrypted",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_api_cache_encryption(state):
    results = Results()
    for api in state.aws.sam.apis:
        if api.rest_method_settings.cache_data_encrypted.is_false():
            results.add("Cache data is not encrypted.", api.rest_method_settings.cache_data_encrypted)
    return results
