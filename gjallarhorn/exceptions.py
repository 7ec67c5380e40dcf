# ᚦᚢᚱᛁᛊᚨᛉ • Thurisaz - The Rune of Thorns (Errors)
"""Exception hierarchy for gjallarhorn."""

from __future__ import annotations

from typing import Optional


class GjallarhornError(Exception):
    """Base class for all gjallarhorn errors."""


class ParseError(GjallarhornError):
    """A source document could not be parsed."""

    def __init__(self, message: str, filename: str = "", line: Optional[int] = None):
        self.filename = filename
        self.line = line
        location = filename
        if line is not None:
            location = f"{filename}:{line}"
        super().__init__(f"{location}: {message}" if location else message)


class HCLSyntaxError(ParseError):
    """Malformed HCL in a Terraform file."""


class TemplateParseError(ParseError):
    """Malformed CloudFormation template."""


class RegistryError(GjallarhornError):
    """Invalid operation on a rule registry."""


class DuplicateRuleError(RegistryError):
    """Two rules share one identifier."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' is already registered")


class RegistryFrozenError(RegistryError):
    """Registration was attempted after the registry was frozen."""


class ConfigError(GjallarhornError):
    """Invalid scan configuration."""
