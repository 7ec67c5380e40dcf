from __future__ import annotations

import textwrap

import pytest

from gjallarhorn.adapters import adapt
from gjallarhorn.parsers import Modules, parse_template_source, parse_terraform_source


def source_text(text: str) -> str:
    """Dedent an inline document so that its first line is line 1."""
    return textwrap.dedent(text).lstrip("\n")


@pytest.fixture
def terraform_module():
    def _parse(text: str, filename: str = "main.tf"):
        return parse_terraform_source(source_text(text), filename)
    return _parse


@pytest.fixture
def template_module():
    def _parse(text: str, filename: str = "template.yaml"):
        return parse_template_source(source_text(text), filename)
    return _parse


@pytest.fixture
def adapt_terraform(terraform_module):
    """(state, diagnostics) for one inline Terraform file."""
    def _adapt(text: str, filename: str = "main.tf"):
        return adapt(modules=Modules([terraform_module(text, filename)]))
    return _adapt


@pytest.fixture
def adapt_template(template_module):
    """(state, diagnostics) for one inline CloudFormation template."""
    def _adapt(text: str, filename: str = "template.yaml"):
        return adapt(templates=[template_module(text, filename)])
    return _adapt


@pytest.fixture
def terraform_state(adapt_terraform):
    def _state(text: str, filename: str = "main.tf"):
        state, _ = adapt_terraform(text, filename)
        return state
    return _state


@pytest.fixture
def template_state(adapt_template):
    def _state(text: str, filename: str = "template.yaml"):
        state, _ = adapt_template(text, filename)
        return state
    return _state
