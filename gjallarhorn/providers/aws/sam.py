# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                        ᛊᚨᛗ • AWS SERVERLESS (SAM)
#             APIs, functions, state machines, tables and applications
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from gjallarhorn.providers.aws.iam import Policy
from gjallarhorn.types import BoolValue, Metadata, StringValue


# ════════════════════════════════════════════════════════════════════════════
# APIs
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AccessLogging:
    metadata: Metadata
    cloudwatch_log_group_arn: StringValue


@dataclass(frozen=True)
class DomainConfiguration:
    metadata: Metadata
    name: StringValue
    certificate_arn: StringValue
    security_policy: StringValue


@dataclass(frozen=True)
class RESTMethodSettings:
    metadata: Metadata
    cache_data_encrypted: BoolValue
    logging_enabled: BoolValue
    data_trace_enabled: BoolValue
    metrics_enabled: BoolValue


@dataclass(frozen=True)
class RouteSettings:
    metadata: Metadata
    logging_enabled: BoolValue
    data_trace_enabled: BoolValue
    detailed_metrics_enabled: BoolValue


@dataclass(frozen=True)
class API:
    metadata: Metadata
    name: StringValue
    tracing_enabled: BoolValue
    domain_configuration: DomainConfiguration
    access_logging: AccessLogging
    rest_method_settings: RESTMethodSettings


@dataclass(frozen=True)
class HttpAPI:
    metadata: Metadata
    name: StringValue
    access_logging: AccessLogging
    default_route_settings: RouteSettings
    domain_configuration: DomainConfiguration


# ════════════════════════════════════════════════════════════════════════════
# COMPUTE
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Function:
    metadata: Metadata
    function_name: StringValue
    tracing: StringValue  # "Active" or "PassThrough"
    managed_policies: Tuple[StringValue, ...] = ()
    policies: Tuple[Policy, ...] = ()


@dataclass(frozen=True)
class LoggingConfiguration:
    metadata: Metadata
    logging_enabled: BoolValue


@dataclass(frozen=True)
class TracingConfiguration:
    metadata: Metadata
    enabled: BoolValue


@dataclass(frozen=True)
class StateMachine:
    metadata: Metadata
    name: StringValue
    logging_configuration: LoggingConfiguration
    tracing: TracingConfiguration
    managed_policies: Tuple[StringValue, ...] = ()
    policies: Tuple[Policy, ...] = ()


# ════════════════════════════════════════════════════════════════════════════
# DATA AND COMPOSITION
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SSESpecification:
    metadata: Metadata
    enabled: BoolValue
    kms_master_key_id: StringValue


@dataclass(frozen=True)
class SimpleTable:
    metadata: Metadata
    table_name: StringValue
    sse_specification: SSESpecification


@dataclass(frozen=True)
class Location:
    metadata: Metadata
    application_id: StringValue
    semantic_version: StringValue


@dataclass(frozen=True)
class Application:
    """A nested serverless application, from a local path or the Serverless Application Repository."""
    metadata: Metadata
    location_path: StringValue
    location: Location


@dataclass(frozen=True)
class SAM:
    metadata: Metadata = field(default_factory=Metadata.unmanaged)
    apis: Tuple[API, ...] = ()
    http_apis: Tuple[HttpAPI, ...] = ()
    functions: Tuple[Function, ...] = ()
    state_machines: Tuple[StateMachine, ...] = ()
    simple_tables: Tuple[SimpleTable, ...] = ()
    applications: Tuple[Application, ...] = ()
