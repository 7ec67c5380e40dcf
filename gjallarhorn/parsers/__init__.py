# ᛈᚨᚱᛊᛖᚱᛊ • Parsers - Source Formats into the Generic Document Tree
"""Readers for Terraform (HCL) and CloudFormation (YAML/JSON) documents."""

from gjallarhorn.parsers.block import (
    Attribute,
    Block,
    Module,
    Modules,
    Reference,
    SourceFormat,
    Unknown,
)
from gjallarhorn.parsers.cloudformation import parse_template, parse_template_source
from gjallarhorn.parsers.hcl import parse_hcl, parse_terraform_source
from gjallarhorn.parsers.loader import LoadedSources, SourceLoader, load_paths

__all__ = [
    "Attribute",
    "Block",
    "Module",
    "Modules",
    "Reference",
    "SourceFormat",
    "Unknown",
    "parse_hcl",
    "parse_terraform_source",
    "parse_template",
    "parse_template_source",
    "LoadedSources",
    "SourceLoader",
    "load_paths",
]
