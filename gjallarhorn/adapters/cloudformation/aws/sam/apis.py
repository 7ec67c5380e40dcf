# ᚨᛈᛁ • SAM APIs
"""Adapts AWS::Serverless::Api and AWS::Serverless::HttpApi resources."""

from __future__ import annotations

from typing import Tuple

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Attribute, Block, Module
from gjallarhorn.providers.aws.sam import API, AccessLogging, DomainConfiguration, HttpAPI, RESTMethodSettings, RouteSettings
from gjallarhorn.types import BoolValue

API_TYPE = "AWS::Serverless::Api"
HTTP_API_TYPE = "AWS::Serverless::HttpApi"


def get_apis(template: Module) -> Tuple[API, ...]:
    return adapt_each(template.get_resources_by_type(API_TYPE), _adapt_api)


def get_http_apis(template: Module) -> Tuple[HttpAPI, ...]:
    return adapt_each(template.get_resources_by_type(HTTP_API_TYPE), _adapt_http_api)


def _adapt_api(block: Block) -> API:
    return API(
        metadata=block.metadata,
        name=block.get_attribute("Name").as_string_value_or_default("", block),
        tracing_enabled=block.get_attribute("TracingEnabled").as_bool_value_or_default(False, block),
        domain_configuration=_domain_configuration(block),
        access_logging=_access_logging(block, "AccessLogSetting"),
        rest_method_settings=_method_settings(block),
    )


def _adapt_http_api(block: Block) -> HttpAPI:
    return HttpAPI(
        metadata=block.metadata,
        name=block.get_attribute("Name").as_string_value_or_default("", block),
        access_logging=_access_logging(block, "AccessLogSettings"),
        default_route_settings=_route_settings(block),
        domain_configuration=_domain_configuration(block),
    )


def _logging_level_enabled(attribute: Attribute, block: Block) -> BoolValue:
    """LoggingLevel ERROR/INFO means logging is on, OFF (or nothing) means off."""
    if attribute.is_string():
        return BoolValue.of(not attribute.equals("OFF", ignore_case=True), attribute.metadata)
    return attribute.as_bool_value_or_default(False, block)


def _domain_configuration(block: Block) -> DomainConfiguration:
    domain = block.get_block("Domain")
    owner = domain if domain is not None else block
    return DomainConfiguration(
        metadata=owner.metadata,
        name=owner.get_attribute("DomainName").as_string_value_or_default("", owner),
        certificate_arn=owner.get_attribute("CertificateArn").as_string_value_or_default("", owner),
        security_policy=owner.get_attribute("SecurityPolicy").as_string_value_or_default("TLS_1_0", owner),
    )


def _access_logging(block: Block, property_name: str) -> AccessLogging:
    setting = block.get_block(property_name)
    owner = setting if setting is not None else block
    return AccessLogging(
        metadata=owner.metadata,
        cloudwatch_log_group_arn=owner.get_attribute("DestinationArn").as_string_value_or_default("", owner),
    )


def _method_settings(block: Block) -> RESTMethodSettings:
    # MethodSettings is a list of mappings; the first one is read
    settings = block.get_block("MethodSettings")
    owner = settings if settings is not None else block
    return RESTMethodSettings(
        metadata=owner.metadata,
        cache_data_encrypted=owner.get_attribute("CacheDataEncrypted").as_bool_value_or_default(False, owner),
        logging_enabled=_logging_level_enabled(owner.get_attribute("LoggingLevel"), owner),
        data_trace_enabled=owner.get_attribute("DataTraceEnabled").as_bool_value_or_default(False, owner),
        metrics_enabled=owner.get_attribute("MetricsEnabled").as_bool_value_or_default(False, owner),
    )


def _route_settings(block: Block) -> RouteSettings:
    settings = block.get_block("DefaultRouteSettings")
    owner = settings if settings is not None else block
    return RouteSettings(
        metadata=owner.metadata,
        logging_enabled=_logging_level_enabled(owner.get_attribute("LoggingLevel"), owner),
        data_trace_enabled=owner.get_attribute("DataTraceEnabled").as_bool_value_or_default(False, owner),
        detailed_metrics_enabled=owner.get_attribute("DetailedMetricsEnabled").as_bool_value_or_default(False, owner),
    )
