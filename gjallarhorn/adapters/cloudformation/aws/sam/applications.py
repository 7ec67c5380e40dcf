# ᚨᛈᛈ • SAM Applications
"""
Adapts AWS::Serverless::Application resources.

Location is either a path/URL string, or a mapping naming an application in
the Serverless Application Repository:

    Location: ./nested/template.yaml
    Location:
      ApplicationId: arn:aws:serverlessrepo:us-east-1:123456789012:applications/x
      SemanticVersion: 1.0.0
"""

from __future__ import annotations

from typing import Tuple

from gjallarhorn.adapters.common import adapt_each
from gjallarhorn.parsers.block import Block, Module
from gjallarhorn.providers.aws.sam import Application, Location

APPLICATION_TYPE = "AWS::Serverless::Application"


def get_applications(template: Module) -> Tuple[Application, ...]:
    return adapt_each(template.get_resources_by_type(APPLICATION_TYPE), _adapt_application)


def _adapt_application(block: Block) -> Application:
    location_block = block.get_block("Location")
    if location_block is not None:
        return Application(
            metadata=block.metadata,
            location_path=block.get_attribute("LocationPath").as_string_value_or_default("", block),
            location=Location(
                metadata=location_block.metadata,
                application_id=location_block.get_attribute("ApplicationId").as_string_value_or_default("", location_block),
                semantic_version=location_block.get_attribute("SemanticVersion").as_string_value_or_default("", location_block),
            ),
        )

    location_path = block.get_attribute("Location").as_string_value_or_default("", block)
    return Application(
        metadata=block.metadata,
        location_path=location_path,
        location=Location(
            metadata=block.metadata,
            application_id=block.get_attribute("ApplicationId").as_string_value_or_default("", block),
            semantic_version=block.get_attribute("SemanticVersion").as_string_value_or_default("", block),
        ),
    )
