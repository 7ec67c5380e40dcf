"""Every built-in rule flags its bad examples and passes its good ones."""

from __future__ import annotations

import pytest

from gjallarhorn.adapters import adapt
from gjallarhorn.parsers import Modules, parse_template_source, parse_terraform_source
from gjallarhorn.rules import RuleRegistry

from conftest import source_text


def _examples(kind: str):
    cases = []
    for item in RuleRegistry.builtin():
        for source_format in item.definition.formats:
            metadata = getattr(item.definition, source_format)
            examples = metadata.bad_examples if kind == "bad" else metadata.good_examples
            for index, example in enumerate(examples):
                cases.append(pytest.param(item, source_format, example, id=f"{item.definition.long_id}-{source_format}-{index}"))
    return cases


def _state_for(source_format: str, example: str):
    content = source_text(example)
    if source_format == "terraform":
        state, diagnostics = adapt(modules=Modules([parse_terraform_source(content, "main.tf")]))
    else:
        state, diagnostics = adapt(templates=[parse_template_source(content, "template.yaml")])
    assert diagnostics == []
    return state


@pytest.mark.parametrize("item, source_format, example", _examples("bad"))
def test_bad_examples_are_flagged(item, source_format: str, example: str) -> None:
    results = item.evaluate(_state_for(source_format, example))

    assert results
    assert {r.rule_id for r in results} == {item.id}
    for result in results:
        assert result.range.start_line >= 1
        assert result.range.filename in ("main.tf", "template.yaml")


@pytest.mark.parametrize("item, source_format, example", _examples("good"))
def test_good_examples_pass(item, source_format: str, example: str) -> None:
    assert item.evaluate(_state_for(source_format, example)) == []


def test_every_rule_has_examples() -> None:
    for item in RuleRegistry.builtin():
        for source_format in item.definition.formats:
            metadata = getattr(item.definition, source_format)
            assert metadata.bad_examples, f"{item.id} has no bad {source_format} example"
            assert metadata.good_examples, f"{item.id} has no good {source_format} example"
