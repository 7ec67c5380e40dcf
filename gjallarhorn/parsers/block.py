# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                      ᛁᚷᚷᛞᚱᚨᛊᛁᛚ • YGGDRASIL
#              The Generic Document Tree and its Query Interface
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Every source format (HCL, CloudFormation YAML/JSON) is parsed into the
#   same two node kinds: blocks that hold ordered children, and attributes
#   that hold one value or a list of values. Adapters only ever talk to
#   this interface, never to a parser's internals.
#
#   Querying something that is not there never raises: get_attribute()
#   hands back an absent attribute whose conversions produce default values
#   stamped with the enclosing block's range.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from gjallarhorn.types import BoolValue, IntValue, Metadata, Range, StringValue

logger = logging.getLogger(__name__)


class SourceFormat(str, Enum):
    """Document formats the parsers understand."""
    TERRAFORM = "terraform"
    CLOUDFORMATION = "cloudformation"


# ════════════════════════════════════════════════════════════════════════════
# EXPRESSION VALUES - what an attribute can hold besides plain scalars
# ════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Reference:
    """
    A pointer to another node of the same document.

    Terraform: ("aws_s3_bucket", "logs", "id"), ("var", "region"),
               ("data", "aws_iam_policy_document", "x", "json")
    CloudFormation: ("LogBucket",) for Ref, ("LogBucket", "Arn") for Fn::GetAtt
    """
    parts: Tuple[str, ...]

    def matches(self, block: "Block") -> bool:
        """Check whether this reference points at the given block."""
        parts = self.parts
        if block.source_format == SourceFormat.CLOUDFORMATION:
            return bool(parts) and block.type == "resource" and parts[0] == block.name_label
        if block.type == "resource":
            return len(parts) >= 2 and parts[0] == block.type_label and parts[1] == block.name_label
        if block.type == "data":
            return (
                len(parts) >= 3 and parts[0] == "data"
                and parts[1] == block.type_label and parts[2] == block.name_label
            )
        if block.type == "module":
            return len(parts) >= 2 and parts[0] == "module" and parts[1] == block.type_label
        return False

    def __str__(self) -> str:
        return ".".join(self.parts)


@dataclass(frozen=True)
class Unknown:
    """An expression the analyzer could not evaluate (function call, conditional, ...)."""
    expression: str = ""
    references: Tuple[Reference, ...] = ()


Child = Union["Attribute", "Block"]


# ════════════════════════════════════════════════════════════════════════════
# ATTRIBUTE
# ════════════════════════════════════════════════════════════════════════════

class Attribute:
    """
    A named value attached to a block.

    The value is a Python scalar (str, int, float, bool, None), a dict,
    a Reference, an Unknown, or - for list values - a tuple of items where
    each item is itself an Attribute (or a Block, for CloudFormation lists of
    mappings) with its own source range.
    """

    __slots__ = ("name", "range", "parent", "exists", "_value", "_items")

    def __init__(
        self,
        name: str,
        value: Any,
        range: Range,
        parent: Optional["Block"] = None,
        items: Optional[Sequence[Child]] = None,
        exists: bool = True,
    ):
        self.name = name
        self.range = range
        self.parent = parent
        self.exists = exists
        self._value = value
        self._items: Optional[Tuple[Child, ...]] = tuple(items) if items is not None else None

    @classmethod
    def absent(cls, name: str, parent: "Block") -> "Attribute":
        """The not-present sentinel returned for missing attributes."""
        return cls(name, None, parent.range, parent=parent, exists=False)

    def __bool__(self) -> bool:
        return self.exists

    def __repr__(self) -> str:
        if not self.exists:
            return f"Attribute({self.name!r}, absent)"
        return f"Attribute({self.name!r}, {self.value!r}, {self.range})"

    # ────────────────────────────────────────────────────────────────────
    # Identity and provenance
    # ────────────────────────────────────────────────────────────────────

    @property
    def address(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name}.{self.name}"

    @property
    def metadata(self) -> Metadata:
        return Metadata(range=self.range, reference=self.address)

    @property
    def value(self) -> Any:
        if self._items is not None:
            return [item.value if isinstance(item, Attribute) else item for item in self._items]
        return self._value

    def items(self) -> Tuple[Child, ...]:
        """Per-element children of a list value (empty for scalars)."""
        return self._items or ()

    # ────────────────────────────────────────────────────────────────────
    # Type predicates
    # ────────────────────────────────────────────────────────────────────

    def is_list(self) -> bool:
        return self.exists and self._items is not None

    def is_string(self) -> bool:
        return self.exists and self._items is None and isinstance(self._value, str)

    def is_bool(self) -> bool:
        return self.exists and isinstance(self._value, bool)

    def is_number(self) -> bool:
        return (
            self.exists
            and isinstance(self._value, (int, float))
            and not isinstance(self._value, bool)
        )

    def is_null(self) -> bool:
        return self.exists and self._items is None and self._value is None

    def is_reference(self) -> bool:
        return self.exists and isinstance(self._value, Reference)

    def is_resolvable(self) -> bool:
        """True when the value is fully known statically."""
        if not self.exists:
            return False
        if self._items is not None:
            return all(
                item.is_resolvable() for item in self._items if isinstance(item, Attribute)
            )
        return not isinstance(self._value, (Reference, Unknown))

    def references(self) -> List[Reference]:
        """All references this attribute's expression mentions, in source order."""
        found: List[Reference] = []
        _collect_references(self._value, found)
        for item in self.items():
            found.extend(item.references())
        return found

    # ────────────────────────────────────────────────────────────────────
    # Raw comparisons used by adapters
    # ────────────────────────────────────────────────────────────────────

    def equals(self, other: Any, ignore_case: bool = False) -> bool:
        if not self.exists or self._items is not None:
            return False
        value = self._value
        if ignore_case and isinstance(value, str) and isinstance(other, str):
            return value.lower() == other.lower()
        return value == other

    def is_any(self, *options: Any, ignore_case: bool = False) -> bool:
        return any(self.equals(option, ignore_case=ignore_case) for option in options)

    def is_true(self) -> bool:
        value = self._coerce_bool()
        return value is True

    def is_false(self) -> bool:
        value = self._coerce_bool()
        return value is False

    def as_string(self) -> Optional[str]:
        """The raw string payload, or None when the value is not a known scalar."""
        if not self.exists or self._items is not None:
            return None
        value = self._value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return None

    # ────────────────────────────────────────────────────────────────────
    # Conversions to provenance-tracked values
    # ────────────────────────────────────────────────────────────────────

    def _default_metadata(self, block: "Block") -> Metadata:
        return Metadata(
            range=block.range,
            reference=f"{block.full_name}.{self.name}",
        )

    def as_string_value_or_default(self, default: str, block: "Block") -> StringValue:
        if not self.exists or self.is_null():
            return StringValue.default(default, self._default_metadata(block))
        text = self.as_string()
        if text is None:
            return StringValue.unresolvable(self.metadata)
        return StringValue.of(text, self.metadata)

    def as_bool_value_or_default(self, default: bool, block: "Block") -> BoolValue:
        if not self.exists or self.is_null():
            return BoolValue.default(default, self._default_metadata(block))
        value = self._coerce_bool()
        if value is None:
            return BoolValue.unresolvable(self.metadata)
        return BoolValue.of(value, self.metadata)

    def as_int_value_or_default(self, default: int, block: "Block") -> IntValue:
        if not self.exists or self.is_null():
            return IntValue.default(default, self._default_metadata(block))
        value = self._coerce_int()
        if value is None:
            return IntValue.unresolvable(self.metadata)
        return IntValue.of(value, self.metadata)

    def as_string_values(self) -> Tuple[StringValue, ...]:
        """
        Each element of a list value as a StringValue with its own range.

        A single scalar is treated as a one-element list, which matches how
        both HCL and CloudFormation accept "x" where ["x"] is expected.
        """
        if not self.exists or self.is_null():
            return ()
        if self._items is None:
            text = self.as_string()
            if text is None:
                return (StringValue.unresolvable(self.metadata),)
            return (StringValue.of(text, self.metadata),)
        values = []
        for item in self._items:
            if isinstance(item, Attribute):
                values.extend(item.as_string_values())
        return tuple(values)

    def _coerce_bool(self) -> Optional[bool]:
        if not self.exists or self._items is not None:
            return None
        value = self._value
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
        return None

    def _coerce_int(self) -> Optional[int]:
        if not self.exists or self._items is not None:
            return None
        value = self._value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return None


def _collect_references(value: Any, found: List[Reference]) -> None:
    if isinstance(value, Reference):
        found.append(value)
    elif isinstance(value, Unknown):
        found.extend(value.references)
    elif isinstance(value, dict):
        for nested in value.values():
            _collect_references(nested, found)
    elif isinstance(value, (list, tuple)):
        for nested in value:
            _collect_references(nested, found)


# ════════════════════════════════════════════════════════════════════════════
# BLOCK
# ════════════════════════════════════════════════════════════════════════════

class Block:
    """
    A named node with ordered children.

    Terraform:      resource "aws_s3_bucket" "logs" { ... }
                    type="resource", labels=("aws_s3_bucket", "logs")
    CloudFormation: LogBucket: { Type: AWS::S3::Bucket, Properties: {...} }
                    type="resource", labels=("AWS::S3::Bucket", "LogBucket"),
                    children are the contents of Properties
    Nested blocks (logging { ... }, or a CloudFormation mapping property)
    use the block or property name as type and carry no labels.
    """

    __slots__ = ("type", "labels", "range", "source_format", "parent", "module", "_children")

    def __init__(
        self,
        type: str,
        labels: Iterable[str] = (),
        range: Optional[Range] = None,
        source_format: SourceFormat = SourceFormat.TERRAFORM,
        parent: Optional["Block"] = None,
        module: Optional["Module"] = None,
    ):
        self.type = type
        self.labels: Tuple[str, ...] = tuple(labels)
        self.range = range
        self.source_format = source_format
        self.parent = parent
        self.module = module
        self._children: List[Child] = []

    def _append(self, child: Child) -> None:
        # Parsers only: blocks are read-only once the parse completes.
        self._children.append(child)

    def __repr__(self) -> str:
        return f"Block({self.full_name!r}, {self.range})"

    # ────────────────────────────────────────────────────────────────────
    # Identity and provenance
    # ────────────────────────────────────────────────────────────────────

    @property
    def children(self) -> Tuple[Child, ...]:
        return tuple(self._children)

    @property
    def type_label(self) -> str:
        return self.labels[0] if self.labels else ""

    @property
    def name_label(self) -> str:
        return self.labels[1] if len(self.labels) > 1 else ""

    @property
    def local_name(self) -> str:
        """The block's own address, without its parents."""
        if self.source_format == SourceFormat.CLOUDFORMATION and self.type == "resource":
            return self.name_label
        if self.type == "resource":
            return f"{self.type_label}.{self.name_label}"
        if self.type == "data":
            return f"data.{self.type_label}.{self.name_label}"
        if self.type == "variable":
            return f"var.{self.type_label}"
        if self.type == "module":
            return f"module.{self.type_label}"
        return ".".join((self.type,) + self.labels)

    @property
    def full_name(self) -> str:
        if self.parent is None:
            return self.local_name
        return f"{self.parent.full_name}.{self.local_name}"

    @property
    def metadata(self) -> Metadata:
        return Metadata(range=self.range, reference=self.full_name)

    def is_resource_type(self, resource_type: str) -> bool:
        return self.type == "resource" and self.type_label == resource_type

    # ────────────────────────────────────────────────────────────────────
    # Query interface
    # ────────────────────────────────────────────────────────────────────

    def has_child(self, name: str) -> bool:
        """True iff a direct attribute or nested block with this exact name exists."""
        for child in self._children:
            if isinstance(child, Attribute):
                if child.name == name:
                    return True
            elif child.type == name:
                return True
        return False

    def missing_child(self, name: str) -> bool:
        return not self.has_child(name)

    def get_attribute(self, name: str) -> Attribute:
        for child in self._children:
            if isinstance(child, Attribute) and child.name == name:
                return child
        return Attribute.absent(name, self)

    def get_attributes(self) -> List[Attribute]:
        return [child for child in self._children if isinstance(child, Attribute)]

    def get_block(self, block_type: str) -> Optional["Block"]:
        for child in self._children:
            if isinstance(child, Block) and child.type == block_type:
                return child
        return None

    def get_blocks(self, block_type: Optional[str] = None) -> List["Block"]:
        return [
            child for child in self._children
            if isinstance(child, Block) and (block_type is None or child.type == block_type)
        ]

    def get_nested_attribute(self, path: str) -> Attribute:
        """
        Walk nested blocks and return the final attribute.

        get_nested_attribute("logging.target_bucket") on an aws_s3_bucket
        returns target_bucket inside the first logging block, or an absent
        attribute anchored on the deepest block that does exist.
        """
        *block_names, attribute_name = path.split(".")
        current = self
        for name in block_names:
            nested = current.get_block(name)
            if nested is None:
                return Attribute.absent(attribute_name, current)
            current = nested
        return current.get_attribute(attribute_name)

    def references(self) -> List[Reference]:
        found: List[Reference] = []
        for child in self._children:
            found.extend(child.references())
        return found

    def walk(self) -> Iterator["Block"]:
        """This block and all nested blocks, depth first, in source order."""
        yield self
        for child in self._children:
            if isinstance(child, Block):
                yield from child.walk()


# ════════════════════════════════════════════════════════════════════════════
# MODULE - one Terraform directory or one CloudFormation template
# ════════════════════════════════════════════════════════════════════════════

class Module:
    """The top-level blocks of one parsed document set."""

    def __init__(
        self,
        path: str,
        blocks: Sequence[Block],
        source_format: SourceFormat,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        self.path = path
        self.source_format = source_format
        self.parameters: Dict[str, Any] = dict(parameters or {})
        self._blocks: Tuple[Block, ...] = tuple(blocks)
        for block in self._blocks:
            for nested in block.walk():
                nested.module = self

    def __repr__(self) -> str:
        return f"Module({self.path!r}, {self.source_format.value}, blocks={len(self._blocks)})"

    def get_blocks(self, block_type: Optional[str] = None) -> List[Block]:
        return [b for b in self._blocks if block_type is None or b.type == block_type]

    def get_resources_by_type(self, *resource_types: str) -> List[Block]:
        return [
            block for block in self._blocks
            if block.type == "resource" and block.type_label in resource_types
        ]

    def get_block_by_reference(self, reference: Reference) -> Optional[Block]:
        for block in self._blocks:
            if reference.matches(block):
                return block
        return None

    def get_referenced_block(
        self,
        attribute: Attribute,
        parent: Optional[Block] = None,
    ) -> Optional[Block]:
        """The first block the attribute's expression refers to, if any resolves."""
        for reference in attribute.references():
            block = self.get_block_by_reference(reference)
            if block is not None and block is not parent:
                return block
        return None

    def get_referencing_resources(
        self,
        target: Block,
        resource_type: str,
        attribute_name: str,
    ) -> List[Block]:
        """Resources of resource_type whose attribute_name refers to target."""
        referencing = []
        for block in self.get_resources_by_type(resource_type):
            attribute = block.get_attribute(attribute_name)
            if any(ref.matches(target) for ref in attribute.references()):
                referencing.append(block)
        return referencing


class Modules(list):
    """Several modules queried as one."""

    def get_blocks(self, block_type: Optional[str] = None) -> List[Block]:
        return [block for module in self for block in module.get_blocks(block_type)]

    def get_resources_by_type(self, *resource_types: str) -> List[Block]:
        return [block for module in self for block in module.get_resources_by_type(*resource_types)]

    def get_referenced_block(self, attribute: Attribute, parent: Optional[Block] = None) -> Optional[Block]:
        if parent is not None and parent.module is not None:
            return parent.module.get_referenced_block(attribute, parent)
        for module in self:
            block = module.get_referenced_block(attribute, parent)
            if block is not None:
                return block
        return None

    def get_referencing_resources(self, target: Block, resource_type: str, attribute_name: str) -> List[Block]:
        modules = [target.module] if target.module is not None else list(self)
        referencing: List[Block] = []
        for module in modules:
            referencing.extend(module.get_referencing_resources(target, resource_type, attribute_name))
        return referencing
