# ᛊᚨᛗ • SAM API - Domain TLS Policy
"""
Custom domains of SAM APIs must negotiate TLS 1.2.

An API without a Domain property is held to the API Gateway default of
TLS_1_0 and is flagged.
"""

from gjallarhorn.providers import Provider
from gjallarhorn.rules import EngineMetadata, Results, Severity, rule

SECURE_POLICY = "TLS_1_2"

GOOD = """
Resources:
  GoodExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Good SAM API example
      StageName: Prod
      Domain:
        DomainName: api.example.com
        CertificateArn: arn:aws:acm:us-east-1:123456789012:certificate/api
        SecurityPolicy: TLS_1_2
"""

BAD = """
Resources:
  BadExample:
    Type: AWS::Serverless::Api
    Properties:
      Name: Bad SAM API example
      StageName: Prod
      Domain:
        DomainName: api.example.com
        CertificateArn: arn:aws:acm:us-east-1:123456789012:certificate/api
        SecurityPolicy: TLS_1_0
"""


@rule(
    avd_id="AVD-AWS-0112",
    provider=Provider.AWS,
    service="sam",
    short_code="use-secure-tls-policy",
    summary="SAM API domain name uses outdated SSL/TLS protocols.",
    severity=Severity.HIGH,
    impact="Outdated SSL policies increase exposure to known vulnerabilities",
    resolution="Use the most modern TLS/SSL policies available",
    explanation="You should not use outdated/insecure TLS versions for encryption. You should be using TLS v1.2+.",
    links=("https://docs.aws.amazon.com/serverless-application-model/latest/developerguide/sam-property-api-domainconfiguration.html#sam-api-domainconfiguration-securitypolicy",),
    cloudformation=EngineMetadata(good_examples=(GOOD,), bad_examples=(BAD,)),
)
def check_use_secure_tls_policy(state):
    results = Results()
    for api in state.aws.sam.apis:
        policy = api.domain_configuration.security_policy
        if policy.is_resolvable and not policy.equal_to(SECURE_POLICY):
            results.add("Domain name is configured with an outdated TLS policy.", policy)
    return results
