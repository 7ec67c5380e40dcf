# ᛊᚨᛗ • SAM API - X-Ray Tracing
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Good SAM API example
      StageName: Prod
      TracingEnabled: true
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Bad SAM API example
      StageName: Prod
      TracingEnabled: false
"""


@rule(
    avd_id="AVD-AWS-0111",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-api-tracing",
    summary="SAM API must have X-Ray tracing enabled",
    severity=Severity.LOW,
    impact="Without full tracing enabled it is difficult to trace the flow of logs",
    resolution="Enable tracing",
    explanation="X-Ray tracing enables end-to-end debugging and analysis of all API Gateway HTTP requests.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-api.html#sam-api-tracingenabled",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_api_tracing(state):
    results = Results()
    for api in state.aws.sam.apis:
        if api.tracing_enabled.is_false():
            results.add("X-Ray tracing is not enabled.", api.tracing_enabled)
    return results
