# ᛊᚨᛗ • SAM Function - X-Ray Tracing
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::Function
    Properties:
      Handler: index.handler
      Runtime: python3.12
      CodeUri: src/
      Tracing: Active
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::Function
    Properties:
      Handler: index.handler
      Runtime: python3.12
      CodeUri: src/
"""


@rule(
    avd_id="AVD-AWS-0117",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-function-tracing",
    summary="SAM Functions should have X-Ray tracing enabled",
    severity=Severity.LOW,
    impact="Without full tracing enabled it is difficult to trace the flow of logs",
    resolution="Enable tracing",
    explanation="X-Ray tracing enables end-to-end debugging and analysis of the function.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-function.html#sam-function-tracing",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_function_tracing(state):
    results = Results()
    for function in state.aws.sam.functions:
        if function.tracing.is_resolvable and not function.tracing.equal_to("Active"):
            results.add("X-Ray tracing is not enabled.", function.tracing)
    return results
