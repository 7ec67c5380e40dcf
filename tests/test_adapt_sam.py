from __future__ import annotations

from gjallarhorn.rules.aws.sam.no_function_policy_wildcards import check_no_function_policy_wildcards
from gjallarhorn.rules.aws.sam.use_secure_tls_policy import check_use_secure_tls_policy
from gjallarhorn.types import Range

API_WITHOUT_DOMAIN = """
Resources:
  Api:
    Type: AWS::Serverless::Api
    Properties:
      Name: orders
      StageName: Prod
      TracingEnabled: true
      AccessLogSetting:
        DestinationArn: arn:aws:logs:us-east-1:123456789012:log-group:orders
        Format: $context.requestId
      MethodSettings:
        - HttpMethod: "*"
          ResourcePath: "/*"
          CacheDataEncrypted: true
          LoggingLevel: OFF
"""


def test_api_settings(template_state) -> None:
    state = template_state(API_WITHOUT_DOMAIN)
    api = state.aws.sam.apis[0]

    assert api.name.value == "orders"
    assert api.tracing_enabled.is_true()
    assert api.access_logging.cloudwatch_log_group_arn.range == Range("template.yaml", 9, 9)
    assert api.rest_method_settings.cache_data_encrypted.is_true()
    assert api.rest_method_settings.logging_enabled.is_false()
    assert api.rest_method_settings.metadata.range == Range("template.yaml", 12, 15)


def test_api_without_domain_gets_the_default_tls_policy(template_state) -> None:
    state = template_state(API_WITHOUT_DOMAIN)
    policy = state.aws.sam.apis[0].domain_configuration.security_policy

    assert policy.value == "TLS_1_0"
    assert policy.is_default
    assert policy.range == Range("template.yaml", 2, 15)

    results = check_use_secure_tls_policy.evaluate(state)
    assert [r.range for r in results] == [Range("template.yaml", 2, 15)]


def test_http_api(template_state) -> None:
    state = template_state("""
        Resources:
          HttpApi:
            Type: AWS::Serverless::HttpApi
            Properties:
              AccessLogSettings:
                DestinationArn: arn:aws:logs:us-east-1:123456789012:log-group:http
              DefaultRouteSettings:
                LoggingLevel: INFO
                DetailedMetricsEnabled: true
    """)
    api = state.aws.sam.http_apis[0]

    assert api.access_logging.cloudwatch_log_group_arn.is_not_empty()
    assert api.default_route_settings.logging_enabled.is_true()
    assert api.default_route_settings.detailed_metrics_enabled.is_true()
    assert api.default_route_settings.data_trace_enabled.is_default
    assert state.aws.sam.apis == ()


def test_function_policies_are_split(template_state) -> None:
    state = template_state("""
        Resources:
          Worker:
            Type: AWS::Serverless::Function
            Properties:
              Handler: app.handler
              Runtime: python3.12
              Policies:
                - AWSLambdaBasicExecutionRole
                - S3ReadPolicy:
                    BucketName: reports
                - Statement:
                    - Effect: Allow
                      Action:
                        - s3:GetObject
                        - s3:*
                      Resource: "*"
                    - Effect: Deny
                      Action: "*"
                      Resource: "*"
    """)
    function = state.aws.sam.functions[0]

    assert function.tracing.value == "PassThrough"
    assert function.tracing.is_default
    assert [p.value for p in function.managed_policies] == ["AWSLambdaBasicExecutionRole"]
    assert len(function.policies) == 1

    policy = function.policies[0]
    assert len(policy.document.statements) == 2
    assert [a.value for a in policy.wildcard_actions()] == ["s3:*"]
    assert [a.range.start_line for a in policy.wildcard_actions()] == [15]
    assert [r.range.start_line for r in policy.wildcard_resources()] == [16]

    results = check_no_function_policy_wildcards.evaluate(state)
    assert [r.range.start_line for r in results] == [15, 16]


def test_single_inline_policy_document(template_state) -> None:
    state = template_state("""
        Resources:
          Worker:
            Type: AWS::Serverless::Function
            Properties:
              Tracing: Active
              Policies:
                Statement:
                  - Effect: Allow
                    Action: dynamodb:GetItem
                    Resource: arn:aws:dynamodb:us-east-1:123456789012:table/orders
    """)
    function = state.aws.sam.functions[0]

    assert function.tracing.value == "Active"
    assert function.managed_policies == ()
    assert len(function.policies) == 1
    assert function.policies[0].wildcard_actions() == ()
    assert function.policies[0].wildcard_resources() == ()


def test_state_machine_logging_and_tracing(template_state) -> None:
    state = template_state("""
        Resources:
          Quiet:
            Type: AWS::Serverless::StateMachine
            Properties:
              Logging:
                Level: OFF
          Loud:
            Type: AWS::Serverless::StateMachine
            Properties:
              Name: loud
              Logging:
                Level: ALL
              Tracing:
                Enabled: true
    """)
    quiet, loud = state.aws.sam.state_machines

    assert quiet.logging_configuration.logging_enabled.is_false()
    assert quiet.tracing.enabled.is_default
    assert loud.logging_configuration.logging_enabled.is_true()
    assert loud.tracing.enabled.is_true()
    assert loud.tracing.enabled.range == Range("template.yaml", 14, 14)


def test_simple_table_encryption(template_state) -> None:
    state = template_state("""
        Resources:
          Plain:
            Type: AWS::Serverless::SimpleTable
          Encrypted:
            Type: AWS::Serverless::SimpleTable
            Properties:
              TableName: orders
              SSESpecification:
                SSEEnabled: true
    """)
    plain, encrypted = state.aws.sam.simple_tables

    assert plain.sse_specification.enabled.is_false()
    assert plain.sse_specification.enabled.range == plain.metadata.range
    assert encrypted.table_name.value == "orders"
    assert encrypted.sse_specification.enabled.is_true()


def test_application_locations(template_state) -> None:
    state = template_state("""
        Resources:
          Local:
            Type: AWS::Serverless::Application
            Properties:
              Location: ./nested/template.yaml
          FromRepository:
            Type: AWS::Serverless::Application
            Properties:
              Location:
                ApplicationId: arn:aws:serverlessrepo:us-east-1:123456789012:applications/auth
                SemanticVersion: 1.0.0
    """)
    local, remote = state.aws.sam.applications

    assert local.location_path.value == "./nested/template.yaml"
    assert local.location.application_id.is_default
    assert remote.location.semantic_version.value == "1.0.0"
    assert remote.location.metadata.range == Range("template.yaml", 9, 11)
