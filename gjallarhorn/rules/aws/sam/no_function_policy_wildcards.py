# ᛊᚨᛗ • SAM Function - Policy Wildcards
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule
from gjallarhorn.rules.aws.sam.wildcards import report_wildcards

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::Function
    Properties:
      Handler: index.handler
      Runtime: python3.12
      CodeUri: src/
      Policies:
        - AWSLambdaExecute
        - Version: "2012-10-17"
          Statement:
            - Effect: Allow
              Action:
                - s3:GetObject
                - s3:GetObjectACL
              Resource: arn:aws:s3:::my-bucket/*
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::Function
    Properties:
      Handler: index.handler
      Runtime: python3.12
      CodeUri: src/
      Policies:
        - AWSLambdaExecute
        - Version: "2012-10-17"
          Statement:
            - Effect: Allow
              Action:
                - s3:*
              Resource: "*"
"""


@rule(
    avd_id="AVD-AWS-0120",
    provider=Provider.AWS,
    service="sam",
    short_code="no-function-policy-wildcards",
    summary="Function policies should avoid use of wildcards and instead apply the principle of least privilege",
    severity=Severity.HIGH,
    impact="Overly permissive policies may grant access to sensitive resources",
    resolution="Specify the exact permissions required, and to which resources they should apply instead of using wildcards.",
    explanation=(
        "You should use the principle of least privilege when defining your IAM policies. "
        "This means you should specify each exact permission required without using wildcards, "
        "as this could cause the granting of access to certain undesired actions, resources and principals."
    ),
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-function.html#sam-function-policies",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_no_function_policy_wildcards(state):
    results = Results()
    for function in state.aws.sam.functions:
        report_wildcards(function.policies, results)
    return results
