# ᛊᚨᛗ • SAM HTTP API - Access Logging
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::HttpApi
    Properties:
      Name: Good SAM HTTP API example
      StageName: Prod
      AccessLogSettings:
        DestinationArn: arn:aws:logs:us-east-1:123456789012:log-group:http-api-access
        Format: $context.requestId
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::HttpApi
    Properties:
      Name: Bad SAM HTTP API example
      StageName: Prod
"""


@rule(
    avd_id="AVD-AWS-0116",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-http-api-access-logging",
    summary="SAM HTTP API stages for V1 and V2 should have access logging enabled",
    severity=Severity.MEDIUM,
    impact="Logging provides vital information about access and usage",
    resolution="Enable logging for API Gateway stages",
    explanation=(
        "API Gateway stages should have access log settings block configured to track all "
        "access to a particular stage. This should be applied to both v1 and v2 gateway stages."
    ),
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-httpapi.html#sam-httpapi-accesslogsettings",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_http_api_access_logging(state):
    results = Results()
    for api in state.aws.sam.http_apis:
        if api.access_logging.cloudwatch_log_group_arn.is_empty():
            results.add("Access logging is not configured.", api.access_logging.cloudwatch_log_group_arn)
    return results
