# ᛊᚨᛗ • SAM Simple Table - Encryption
from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::SimpleTable
    Properties:
      TableName: GoodTable
      SSESpecification:
        SSEEnabled: true
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::SimpleTable
    Properties:
      TableName: BadTable
      SSESpecification:
        SSEEnabled: false
"""


@rule(
    avd_id="AVD-AWS-0121",
    provider=Provider.AWS,
    service="sam",
    short_code="enable-table-encryption",
    summary="SAM Simple table must have server side encryption enabled.",
    severity=Severity.HIGH,
    impact="Data stored in the table that is unencrypted may be vulnerable to compromise",
    resolution="Enable server side encryption",
    explanation="Encryption should be enabled at all available levels to ensure that data is protected if compromised.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-resource-simpletable.html#sam-simpletable-ssespecification",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_enable_table_encryption(state):
    results = Results()
    for table in state.aws.sam.simple_tables:
        if table.sse_specification.enabled.is_false():
            results.add("Table is not encrypted.", table.sse_specification.enabled)
    return results
