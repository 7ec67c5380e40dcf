# ᛊᛟᚹᛁᛚᛟ • Sowilo - The Rune of the Sun (CloudFormation Reader)
"""
CloudFormation / SAM template reader.

Templates are composed (not loaded) with PyYAML so that every node keeps its
start and end marks. JSON templates go through the same path since JSON is
valid YAML flow syntax.

Intrinsic functions, in both the short tagged form (!Ref, !GetAtt, !Sub) and
the long mapping form ({"Fn::GetAtt": [...]}), are evaluated best-effort:

    Ref          parameter default if declared, otherwise a Reference
    Fn::GetAtt   Reference(logical_id, attribute)
    Fn::Join     joined string when every element is known
    Fn::Sub      substituted string when every variable is known
    anything else  Unknown, remembering the references it mentions
"""

from __future__ import annotations

import datetime
import logging
import re
from typing import Any, Dict, List, Optional

import yaml

from gjallarhorn.exceptions import TemplateParseError
from gjallarhorn.parsers.block import Attribute, Block, Module, Reference, SourceFormat, Unknown
from gjallarhorn.types import Range

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIXES = (".yaml", ".yml", ".json", ".template")

_YAML_PREFIX = "tag:yaml.org,2002:"
_SUB_VARIABLE = re.compile(r"\$\{([^}!][^}]*)\}")
_JSON_STRING_OR_TAB = re.compile(r'"(?:[^"\\]|\\.)*"|\t')


class TemplateLoader(yaml.SafeLoader):
    """SafeLoader used only for composing; intrinsic tags are read off the node graph."""


def _intrinsic_name(tag: str) -> Optional[str]:
    if not tag.startswith("!"):
        return None
    name = tag[1:]
    if name in ("Ref", "Condition"):
        return name
    return f"Fn::{name}"


def _last_line(node: yaml.Node) -> int:
    """1-based line of the last character belonging to a node."""
    start = node.start_mark.line + 1
    if isinstance(node, yaml.ScalarNode) or getattr(node, "flow_style", False):
        end_mark = node.end_mark
        end = end_mark.line + 1 if end_mark.column > 0 else end_mark.line
        return max(start, end)
    if isinstance(node, yaml.MappingNode):
        children = [value for _, value in node.value] + [key for key, _ in node.value]
    else:
        children = list(node.value)
    return max([start] + [_last_line(child) for child in children])


class TemplateReader:
    """Builds a Module from one composed template."""

    def __init__(self, loader: TemplateLoader, filename: str):
        self._loader = loader
        self.filename = filename
        self.parameters: Dict[str, Any] = {}

    # ────────────────────────────────────────────────────────────────────
    # Template structure
    # ────────────────────────────────────────────────────────────────────

    def read(self, root: yaml.MappingNode) -> Module:
        sections = {key.value: value for key, value in root.value if isinstance(key, yaml.ScalarNode)}

        parameters = sections.get("Parameters")
        if isinstance(parameters, yaml.MappingNode):
            for key, value in parameters.value:
                self.parameters[key.value] = self._parameter_default(value)

        blocks: List[Block] = []
        resources = sections.get("Resources")
        if isinstance(resources, yaml.MappingNode):
            for key, value in resources.value:
                block = self._resource(key, value)
                if block is not None:
                    blocks.append(block)

        return Module(self.filename, blocks, SourceFormat.CLOUDFORMATION, parameters=self.parameters)

    def _parameter_default(self, node: yaml.Node) -> Any:
        if not isinstance(node, yaml.MappingNode):
            return None
        for key, value in node.value:
            if key.value == "Default":
                return self._value(value)
        return None

    def _resource(self, key: yaml.ScalarNode, node: yaml.Node) -> Optional[Block]:
        logical_id = key.value
        if not isinstance(node, yaml.MappingNode):
            logger.debug(f"{self.filename}: resource '{logical_id}' is not a mapping, skipping")
            return None
        fields = {k.value: v for k, v in node.value}
        type_node = fields.get("Type")
        resource_type = type_node.value if isinstance(type_node, yaml.ScalarNode) else ""

        block = Block(
            "resource",
            (resource_type, logical_id),
            self._range(key, node),
            SourceFormat.CLOUDFORMATION,
        )
        properties = fields.get("Properties")
        if isinstance(properties, yaml.MappingNode):
            for prop_key, prop_value in properties.value:
                self._add_child(block, prop_key, prop_value)
        return block

    def _range(self, first: yaml.Node, last: yaml.Node) -> Range:
        start = first.start_mark.line + 1
        return Range(self.filename, start, max(start, _last_line(last)))

    def _add_child(self, parent: Block, key: yaml.Node, node: yaml.Node) -> None:
        name = str(key.value)
        node_range = self._range(key, node)

        if isinstance(node, yaml.MappingNode) and not self._is_intrinsic(node):
            parent._append(self._mapping_block(name, node, node_range, parent))
            return

        if isinstance(node, yaml.SequenceNode) and not _intrinsic_name(node.tag):
            items = []
            for item in node.value:
                item_range = self._range(item, item)
                if isinstance(item, yaml.MappingNode) and not self._is_intrinsic(item):
                    nested = self._mapping_block(name, item, item_range, parent)
                    items.append(nested)
                    parent._append(nested)
                else:
                    items.append(Attribute(name, self._value(item), item_range, parent=parent))
            parent._append(Attribute(name, None, node_range, parent=parent, items=items))
            return

        parent._append(Attribute(name, self._value(node), node_range, parent=parent))

    def _mapping_block(self, name: str, node: yaml.MappingNode, node_range: Range, parent: Block) -> Block:
        block = Block(name, (), node_range, SourceFormat.CLOUDFORMATION, parent=parent)
        for key, value in node.value:
            self._add_child(block, key, value)
        return block

    # ────────────────────────────────────────────────────────────────────
    # Values and intrinsic functions
    # ────────────────────────────────────────────────────────────────────

    def _is_intrinsic(self, node: yaml.Node) -> bool:
        if _intrinsic_name(node.tag):
            return True
        if isinstance(node, yaml.MappingNode) and len(node.value) == 1:
            key = node.value[0][0].value
            return key == "Ref" or key == "Condition" or str(key).startswith("Fn::")
        return False

    def _value(self, node: yaml.Node) -> Any:
        tagged = _intrinsic_name(node.tag)
        if tagged:
            if isinstance(node, yaml.ScalarNode):
                argument: Any = node.value
            else:
                argument = self._plain(node)
            return self._intrinsic(tagged, argument)
        if isinstance(node, yaml.MappingNode) and self._is_intrinsic(node):
            key, value = node.value[0]
            return self._intrinsic(key.value, self._value(value))
        return self._plain(node)

    def _plain(self, node: yaml.Node) -> Any:
        if isinstance(node, yaml.ScalarNode):
            if node.tag.startswith(_YAML_PREFIX):
                try:
                    value = self._loader.construct_object(node, deep=True)
                except (ValueError, TypeError) as e:
                    # e.g. 2020-13-45 resolves as a timestamp that is not a date
                    raise TemplateParseError(
                        f"Invalid value '{node.value}': {e}", self.filename, node.start_mark.line + 1
                    ) from e
            else:
                value = node.value
            if isinstance(value, (datetime.date, datetime.datetime)):
                return value.isoformat()
            return value
        if isinstance(node, yaml.SequenceNode):
            return [self._value(item) for item in node.value]
        return {str(key.value): self._value(value) for key, value in node.value}

    def _intrinsic(self, name: str, argument: Any) -> Any:
        if name == "Ref":
            return self._ref(argument)
        if name == "Fn::GetAtt":
            if isinstance(argument, str):
                logical_id, _, attribute = argument.partition(".")
                return Reference((logical_id, attribute) if attribute else (logical_id,))
            if isinstance(argument, list) and argument and all(isinstance(a, str) for a in argument):
                return Reference(tuple(argument))
        if name == "Fn::Join":
            return self._join(argument)
        if name == "Fn::Sub":
            return self._sub(argument)
        return Unknown(f"{name}", tuple(_references_in(argument)))

    def _ref(self, target: Any) -> Any:
        if not isinstance(target, str):
            return Unknown("Ref", tuple(_references_in(target)))
        if target in self.parameters:
            default = self.parameters[target]
            if default is None:
                return Unknown(f"Ref {target}")
            return default
        if target.startswith("AWS::"):
            return Unknown(f"Ref {target}")
        return Reference((target,))

    def _join(self, argument: Any) -> Any:
        if (
            isinstance(argument, list) and len(argument) == 2
            and isinstance(argument[0], str) and isinstance(argument[1], list)
        ):
            delimiter, elements = argument
            if all(_is_scalar(e) for e in elements):
                return delimiter.join(_render(e) for e in elements)
        return Unknown("Fn::Join", tuple(_references_in(argument)))

    def _sub(self, argument: Any) -> Any:
        variables: Dict[str, Any] = {}
        if isinstance(argument, list) and argument and isinstance(argument[0], str):
            text = argument[0]
            if len(argument) > 1 and isinstance(argument[1], dict):
                variables = argument[1]
        elif isinstance(argument, str):
            text = argument
        else:
            return Unknown("Fn::Sub", tuple(_references_in(argument)))

        references: List[Reference] = []
        known = True

        def substitute(match: "re.Match[str]") -> str:
            nonlocal known
            name = match.group(1).strip()
            if name in variables:
                value = variables[name]
            elif name in self.parameters and self.parameters[name] is not None:
                value = self.parameters[name]
            elif "." in name:
                value = Reference(tuple(name.split(".", 1)))
            elif name.startswith("AWS::"):
                value = Unknown(name)
            else:
                value = Reference((name,))
            if _is_scalar(value):
                return _render(value)
            known = False
            references.extend(_references_in(value))
            return match.group(0)

        rendered = _SUB_VARIABLE.sub(substitute, text).replace("${!", "${")
        if known:
            return rendered
        return Unknown(text, tuple(references))


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _references_in(value: Any) -> List[Reference]:
    if isinstance(value, Reference):
        return [value]
    if isinstance(value, Unknown):
        return list(value.references)
    if isinstance(value, dict):
        return [ref for nested in value.values() for ref in _references_in(nested)]
    if isinstance(value, list):
        return [ref for nested in value for ref in _references_in(nested)]
    return []


def looks_like_template(content: str) -> bool:
    return "Resources" in content or "AWSTemplateFormatVersion" in content


def parse_template(content: str, filename: str = "template.yaml") -> Optional[Module]:
    """
    Parse a CloudFormation/SAM template.

    Returns None for well-formed YAML/JSON documents that are not templates.
    Raises TemplateParseError for malformed documents that look like templates.
    """
    if filename.lower().endswith(".json"):
        # JSON permits tabs between tokens, YAML does not; tabs inside strings stay
        content = _JSON_STRING_OR_TAB.sub(lambda m: "  " if m.group(0) == "\t" else m.group(0), content)

    loader = TemplateLoader(content)
    try:
        root = loader.get_single_node()
        if not isinstance(root, yaml.MappingNode):
            return None
        keys = {key.value for key, _ in root.value if isinstance(key, yaml.ScalarNode)}
        if "Resources" not in keys:
            return None
        return TemplateReader(loader, filename).read(root)
    except yaml.YAMLError as e:
        if not looks_like_template(content):
            logger.debug(f"Skipping unparseable non-template document {filename}: {e}")
            return None
        line: Optional[int] = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 1
        problem = getattr(e, "problem", None) or str(e)
        raise TemplateParseError(problem, filename, line) from e
    except (ValueError, TypeError, RecursionError) as e:
        raise TemplateParseError(f"Could not read template: {e}", filename) from e
    finally:
        loader.dispose()


def parse_template_source(content: str, filename: str = "template.yaml") -> Module:
    """Like parse_template, but a non-template document is an error."""
    module = parse_template(content, filename)
    if module is None:
        raise TemplateParseError("Document has no Resources section", filename)
    return module
