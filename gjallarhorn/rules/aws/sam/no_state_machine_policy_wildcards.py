# ᛊᚨᛗ • SAM State Machine - Policy Wildcards
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule
from gjallarhorn.rules.aws.sam.wildcards import report_wildcards

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: good-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Policies:
        - Version: "2012-10-17"
          Statement:
            - Effect: Allow
              Action:
                - lambda:InvokeFunction
              Resource: arn:aws:lambda:us-east-1:123456789012:function:worker
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: bad-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Policies:
        - Version: "2012-10-17"
          Statement:
            - Effect: Allow
              Action:
                - lambda:*
              Resource: "*"
"""


@rule(
    avd_id="AVD-AWS-0122",
    provider=Provider.AWS,
    service="sam",
    short_code="no-state-machine-policy-wildcards",
    summary="State machine policies should avoid use of wildcards and instead apply the principle of least privilege",
    severity=Severity.HIGH,
    impact="Overly permissive policies may grant access to sensitive resources",
    resolution="Specify the exact permissions required, and to which resources they should apply instead of using wildcards.",
    explanation=(
        "You should use the principle of least privilege when defining your IAM policies. "
        "This means you should specify each exact permission required without using wildcards, "
        "as this could cause the granting of access to certain undesired actions, resources and principals."
    ),
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-statemachine.html#sam-statemachine-policies",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_no_state_machine_policy_wildcards(state):
    results = Results()
    for machine in state.aws.sam.state_machines:
        report_wildcards(machine.policies, results)
    return results
