# ᛊᚨᛗ • SAM State Machine - Logging
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: good-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Logging:
        Level: ALL
        IncludeExecutionData: true
        Destinations:
          - CloudWatchLogsLogGroup:
              LogGroupArn: arn:aws:logs:us-east-1:123456789012:log-group:state-machine
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::StateMachine
    Properties:
      Name: bad-state-machine
      DefinitionUri: statemachine/definition.asl.json
      Logging:
        Level: "OFF"
"""


@rule(
    avd_id="AVD-AWS-0118",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-state-machine-logging",
    summary="SAM State machine must have logging enabled",
    severity=Severity.LOW,
    impact="Without logging enabled it is difficult to identify suspicious activity",
    resolution="Enable logging",
    explanation="Logging enables end-to-end debugging and analysis of all state machine activities.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-statemachine.html#sam-statemachine-logging",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_state_machine_logging(state):
    results = Results()
    for machine in state.aws.sam.state_machines:
        if machine.logging_configuration.logging_enabled.is_false():
            results.add("Logging is not enabled.", machine.logging_configuration.logging_enabled)
    return results
