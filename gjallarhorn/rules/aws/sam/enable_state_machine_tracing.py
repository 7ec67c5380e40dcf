# ᛊᚨᛗ • SAM State Machine - X-Ray Tracing
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: good-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Tracing:
        Enabled: true
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: bad-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Tracing:
        Enabled: false
"""


@rule(
    avd_id="AVD-AWS-0119",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-state-machine-tracing",
    summary="SAM State machine must have X-Ray tracing enabled",
    severity=Severity.LOW,
    impact="Without full tracing enabled it is difficult to trace the flow of logs",
    resolution="Enable tracing",
    explanation="X-Ray tracing enables end-to-end debugging and analysis of all state machine activities.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-statemachine.html#sam-statemachine-tracing",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_state_machine_tracing(state):
    results = Results()
    for machine in state.aws.sam.state_machines:
        if machine.tracing.enabled.is_false():
            results.add("X-Ray tracing is not enabled.", machine.tracing.enabled)
    return results
