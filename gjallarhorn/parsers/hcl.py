# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#                          ᛗᛁᛗᛁᛊᛒᚱᚢᚾᚾᚱ • HCL READER
#              Turns Terraform source into the generic document tree
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#   Two stages:
#     TreeReader     python-hcl2 parse tree -> raw syntax (blocks,
#                    attributes, expressions) with line numbers
#     ModuleBuilder  raw syntax of every file in a directory -> Module
#
#   python-hcl2's lark tree keeps the position of every node, so ranges
#   come straight from the parser. Expressions are evaluated only as far as
#   a static reader can go: literals, lists, objects, string templates over
#   known values, and var.* / local.* lookups with literal defaults.
#   Anything else (function calls, conditionals, operators, for-expressions)
#   becomes Unknown, which still remembers every reference it mentions.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import hcl2
from lark import Token, Tree
from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedToken

from gjallarhorn.exceptions import HCLSyntaxError
from gjallarhorn.parsers.block import Attribute, Block, Module, Reference, SourceFormat, Unknown
from gjallarhorn.types import Range

logger = logging.getLogger(__name__)

# Nesting of blocks and expressions the reader will follow
MAX_NESTING = 200


# ════════════════════════════════════════════════════════════════════════════
# TEMPLATES
# ════════════════════════════════════════════════════════════════════════════

@dataclass
class Interpolation:
    """A ${...} (or %{...} directive) segment of a heredoc template."""
    source: str
    line: int
    directive: bool = False


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text
    out: List[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            escaped = text[i + 1]
            if escaped == "u" and i + 6 <= len(text):
                try:
                    out.append(chr(int(text[i + 2:i + 6], 16)))
                    i += 6
                    continue
                except ValueError:
                    pass
            out.append(_ESCAPES.get(escaped, escaped))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def _find_interpolation_end(text: str, start: int) -> int:
    """Index of the '}' closing an interpolation whose body starts at `start`."""
    depth = 1
    i = start
    while i < len(text):
        char = text[i]
        if char == '"':
            i += 1
            while i < len(text) and text[i] != '"':
                i += 2 if text[i] == "\\" else 1
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def split_template(raw: str, line: int) -> List[Union[str, Interpolation]]:
    """
    Split heredoc content into literal text and interpolation segments.

    Quoted strings arrive from the parser already split; heredocs come as a
    single token, so their ${...} segments are found here.
    """
    parts: List[Union[str, Interpolation]] = []
    buffer: List[str] = []
    current_line = line
    i = 0
    while i < len(raw):
        if raw.startswith("$${", i) or raw.startswith("%%{", i):
            buffer.append(raw[i + 1:i + 3])
            i += 3
            continue
        if raw.startswith("${", i) or raw.startswith("%{", i):
            end = _find_interpolation_end(raw, i + 2)
            if buffer:
                parts.append("".join(buffer))
                buffer = []
            body = raw[i + 2:end]
            parts.append(Interpolation(body.strip().strip("~").strip(), current_line, raw[i] == "%"))
            current_line += body.count("\n")
            i = end + 1
            continue
        if raw[i] == "\n":
            current_line += 1
        buffer.append(raw[i])
        i += 1
    if buffer or not parts:
        parts.append("".join(buffer))
    return parts


# ════════════════════════════════════════════════════════════════════════════
# RAW SYNTAX
# ════════════════════════════════════════════════════════════════════════════

@dataclass
class Expr:
    start_line: int
    end_line: int


@dataclass
class LiteralExpr(Expr):
    value: Any = None


@dataclass
class TemplateExpr(Expr):
    parts: List[Union[str, Expr]] = field(default_factory=list)
    text: str = ""


@dataclass
class ListExpr(Expr):
    items: List[Expr] = field(default_factory=list)


@dataclass
class ObjectExpr(Expr):
    entries: List[Tuple[str, Expr]] = field(default_factory=list)


@dataclass
class TraversalExpr(Expr):
    parts: Tuple[str, ...] = ()


@dataclass
class OpaqueExpr(Expr):
    text: str = ""
    references: Tuple[Tuple[str, ...], ...] = ()


@dataclass
class RawAttribute:
    name: str
    expr: Expr
    start_line: int
    end_line: int


@dataclass
class RawBlock:
    type: str
    labels: List[str]
    body: List[Union["RawBlock", RawAttribute]]
    start_line: int
    end_line: int


RawItem = Union[RawBlock, RawAttribute]


# ════════════════════════════════════════════════════════════════════════════
# TREE READER - python-hcl2 parse tree -> raw syntax
# ════════════════════════════════════════════════════════════════════════════

_TRAVERSALS = {"get_attr_expr_term", "index_expr_term", "attr_splat_expr_term", "full_splat_expr_term"}
_LITERALS = {"true": True, "false": False, "null": None}


def _is_layout(node: Union[Tree, Token]) -> bool:
    if isinstance(node, Token):
        return node.type == "NL_OR_COMMENT"
    return node.data == "new_line_or_comment"


def _significant(children: Sequence[Union[Tree, Token]]) -> List[Union[Tree, Token]]:
    return [child for child in children if not _is_layout(child)]


def _edge_token(node: Union[Tree, Token], last: bool) -> Optional[Token]:
    while isinstance(node, Tree):
        children = _significant(node.children)
        if not children:
            return None
        node = children[-1] if last else children[0]
    return node


def _name(node: Union[Tree, Token]) -> str:
    """Text of an identifier, keyword or literal_value node."""
    if isinstance(node, Token):
        return str(node)
    return str(node.children[0])


class TreeReader:
    """Walks one python-hcl2 parse tree, keeping the line of every node."""

    def __init__(self, content: str, filename: str = "", line_offset: int = 0):
        self.content = content
        self.filename = filename
        self.line_offset = line_offset

    def read(self, tree: Tree) -> List[RawItem]:
        body = next(c for c in tree.children if isinstance(c, Tree) and c.data == "body")
        return self._read_body(body, 0)

    # ────────────────────────────────────────────────────────────────────
    # Positions
    # ────────────────────────────────────────────────────────────────────

    def _first_line(self, node: Union[Tree, Token]) -> int:
        token = _edge_token(node, last=False)
        return (token.line if token is not None else 1) + self.line_offset

    def _last_line(self, node: Union[Tree, Token]) -> int:
        token = _edge_token(node, last=True)
        if token is None:
            return self._first_line(node)
        end = token.end_line or token.line
        # heredoc tokens swallow the newline after their closing marker
        if str(token).endswith("\n"):
            end -= 1
        return max(end, token.line) + self.line_offset

    def _text(self, node: Tree) -> str:
        if node.meta.empty:
            return ""
        return self.content[node.meta.start_pos:node.meta.end_pos]

    def _too_deep(self, node: Union[Tree, Token]) -> HCLSyntaxError:
        return HCLSyntaxError(
            f"Nesting deeper than {MAX_NESTING} levels", self.filename, self._first_line(node)
        )

    # ────────────────────────────────────────────────────────────────────
    # Structure
    # ────────────────────────────────────────────────────────────────────

    def _read_body(self, body: Tree, depth: int) -> List[RawItem]:
        items: List[RawItem] = []
        for child in body.children:
            if not isinstance(child, Tree):
                continue
            if child.data == "attribute":
                items.append(self._read_attribute(child, depth))
            elif child.data == "block":
                items.append(self._read_block(child, depth + 1))
        return items

    def _read_attribute(self, node: Tree, depth: int) -> RawAttribute:
        children = _significant(node.children)
        expr = self._expr(children[-1], depth + 1)
        start = self._first_line(node)
        return RawAttribute(_name(children[0]), expr, start, max(start, expr.end_line))

    def _read_block(self, node: Tree, depth: int) -> RawBlock:
        if depth > MAX_NESTING:
            raise self._too_deep(node)
        children = _significant(node.children)
        labels: List[str] = []
        for child in children[1:]:
            if isinstance(child, Token):
                break
            if child.data == "string":
                labels.append("".join(
                    str(part.children[0]) for part in child.children
                    if isinstance(part, Tree) and part.data == "string_part"
                ))
            else:
                labels.append(_name(child))
        body = next(c for c in children if isinstance(c, Tree) and c.data == "body")
        return RawBlock(
            _name(children[0]),
            labels,
            self._read_body(body, depth),
            self._first_line(node),
            self._last_line(node),
        )

    # ────────────────────────────────────────────────────────────────────
    # Expressions
    # ────────────────────────────────────────────────────────────────────

    def _expr(self, node: Union[Tree, Token], depth: int) -> Expr:
        if depth > MAX_NESTING:
            raise self._too_deep(node)
        if isinstance(node, Token):
            line = node.line + self.line_offset
            return OpaqueExpr(line, line, text=str(node))

        kind = node.data
        start, end = self._first_line(node), self._last_line(node)

        if kind == "expr_term":
            children = _significant(node.children)
            if isinstance(children[0], Token):
                # ( expression )
                inner = next(c for c in children if isinstance(c, Tree))
                return self._expr(inner, depth + 1)
            return self._expr(children[0], depth + 1)
        if kind == "int_lit":
            return LiteralExpr(start, end, value=int(str(node.children[0])))
        if kind == "float_lit":
            return LiteralExpr(start, end, value=float(str(node.children[0])))
        if kind == "literal_value":
            return LiteralExpr(start, end, value=_LITERALS.get(_name(node)))
        if kind == "string":
            return self._string(node, start, end, depth)
        if kind in ("heredoc_template", "heredoc_template_trim"):
            return self._heredoc(node.children[0], kind == "heredoc_template_trim", start, end)
        if kind == "tuple":
            items = [
                self._expr(child, depth + 1) for child in node.children
                if isinstance(child, Tree) and not _is_layout(child)
            ]
            return ListExpr(start, end, items=items)
        if kind == "object":
            entries = [
                (self._key(element.children[0], depth), self._expr(element.children[-1], depth + 1))
                for element in node.children
                if isinstance(element, Tree) and element.data == "object_elem"
            ]
            return ObjectExpr(start, end, entries=entries)
        if kind == "identifier" or kind in _TRAVERSALS:
            parts = self._traversal_parts(node, depth)
            if parts is not None:
                return TraversalExpr(start, end, parts=parts)
        if kind == "unary_op":
            operator, operand = _significant(node.children)
            if str(operator).strip() == "-":
                value = self._expr(operand, depth + 1)
                if isinstance(value, LiteralExpr) and isinstance(value.value, (int, float)) \
                        and not isinstance(value.value, bool):
                    return LiteralExpr(start, end, value=-value.value)
        return self._opaque(node, start, end)

    def _opaque(self, node: Tree, start: int, end: int) -> OpaqueExpr:
        return OpaqueExpr(start, end, text=self._text(node), references=self._references_in(node))

    def _string(self, node: Tree, start: int, end: int, depth: int) -> Expr:
        parts: List[Union[str, Expr]] = []
        buffer: List[str] = []
        for part in node.children:
            if not (isinstance(part, Tree) and part.data == "string_part"):
                continue
            piece = part.children[0]
            if isinstance(piece, Token):
                if piece.type == "STRING_CHARS":
                    buffer.append(_unescape(str(piece)))
                else:
                    # $${ and %%{ stand for a literal ${ and %{
                    buffer.append(str(piece)[1:])
                continue
            if buffer:
                parts.append("".join(buffer))
                buffer = []
            if piece.data == "interpolation":
                inner = next(c for c in piece.children if isinstance(c, Tree))
                parts.append(self._expr(inner, depth + 1))
            else:
                parts.append(self._opaque(piece, self._first_line(piece), self._last_line(piece)))
        if buffer:
            parts.append("".join(buffer))
        if all(isinstance(p, str) for p in parts):
            return LiteralExpr(start, end, value="".join(parts))
        return TemplateExpr(start, end, parts=parts, text=self._text(node)[1:-1])

    def _heredoc(self, token: Token, trim: bool, start: int, end: int) -> Expr:
        raw = str(token).replace("\r\n", "\n")
        _, _, rest = raw.partition("\n")
        # drop the closing marker line and the empty tail after it
        lines = rest.split("\n")[:-2]
        body = "\n".join(lines) + "\n" if lines else ""
        if trim:
            body = textwrap.dedent(body)

        pieces = split_template(body, start + 1)
        if all(isinstance(p, str) for p in pieces):
            return LiteralExpr(start, end, value="".join(pieces))
        parts: List[Union[str, Expr]] = []
        for piece in pieces:
            if isinstance(piece, str):
                parts.append(piece)
            elif piece.directive:
                parts.append(OpaqueExpr(piece.line, piece.line, text=f"%{{{piece.source}}}"))
            else:
                parts.append(self._fragment(piece.source, piece.line))
        return TemplateExpr(start, end, parts=parts, text=body)

    def _fragment(self, source: str, line: int) -> Expr:
        """Parse a heredoc interpolation as a standalone expression."""
        content = f"x = {source}"
        try:
            items = TreeReader(content, self.filename, line - 1).read(hcl2.parses_to_tree(content))
        except (LarkError, HCLSyntaxError):
            logger.debug(f"{self.filename}:{line}: could not read interpolation '{source}'")
            return OpaqueExpr(line, line, text=source)
        if len(items) == 1 and isinstance(items[0], RawAttribute):
            return items[0].expr
        return OpaqueExpr(line, line, text=source)

    def _key(self, node: Tree, depth: int) -> str:
        child = node.children[0]
        if isinstance(child, Tree) and child.data == "keyword":
            return _name(child)
        expr = self._expr(child, depth + 1)
        if isinstance(expr, LiteralExpr):
            return str(expr.value)
        if isinstance(expr, TraversalExpr) and len(expr.parts) == 1:
            return expr.parts[0]
        return self._text(node)

    def _traversal_parts(self, node: Tree, depth: int) -> Optional[Tuple[str, ...]]:
        """(root, attr, ...) for a.b[0].c style chains, None for anything else."""
        suffixes: List[str] = []
        while node.data == "expr_term" or node.data in _TRAVERSALS:
            children = _significant(node.children)
            if node.data == "expr_term":
                if len(children) != 1 or not isinstance(children[0], Tree):
                    return None
                node = children[0]
                continue
            base, accessor = children[0], children[1]
            suffixes = self._accessor_parts(accessor, depth) + suffixes
            node = base
        if node.data != "identifier":
            return None
        return (_name(node),) + tuple(suffixes)

    def _accessor_parts(self, accessor: Tree, depth: int) -> List[str]:
        if accessor.data == "get_attr":
            return [_name(_significant(accessor.children)[-1])]
        if accessor.data == "short_index":
            return [str(accessor.children[-1])]
        if accessor.data == "braces_index":
            inner = next(c for c in accessor.children if isinstance(c, Tree) and not _is_layout(c))
            index = self._expr(inner, depth + 1)
            if isinstance(index, LiteralExpr) and index.value is not None:
                return [str(index.value)]
            return ["*"]
        if accessor.data in ("attr_splat", "full_splat"):
            parts = ["*"]
            for child in accessor.children:
                if isinstance(child, Tree):
                    parts.extend(self._accessor_parts(child, depth))
            return parts
        return ["*"]

    def _references_in(self, node: Tree) -> Tuple[Tuple[str, ...], ...]:
        """Dotted chains (a.b.c) mentioned anywhere inside an expression."""
        found: List[Tuple[str, ...]] = []
        stack: List[Union[Tree, Token]] = [node]
        while stack:
            current = stack.pop()
            if not isinstance(current, Tree):
                continue
            if current.data in _TRAVERSALS:
                parts = self._traversal_parts(current, 0)
                if parts is not None and len(parts) >= 2:
                    found.append(parts)
                    continue
            stack.extend(reversed(current.children))
        return tuple(found)


def _final_line(content: str) -> int:
    return len(content.rstrip().splitlines()) or 1


def _syntax_error(error: LarkError, content: str, filename: str) -> HCLSyntaxError:
    if isinstance(error, UnexpectedToken) and error.token.type != "$END":
        return HCLSyntaxError(f"Unexpected {str(error.token).strip()!r}", filename, error.line)
    if isinstance(error, UnexpectedCharacters):
        return HCLSyntaxError(f"Unexpected character {error.char!r}", filename, error.line)
    if isinstance(error, UnexpectedToken):
        return HCLSyntaxError("Unexpected end of file", filename, _final_line(content))
    message = str(error).strip().splitlines()
    return HCLSyntaxError(message[0] if message else "Syntax error", filename, _final_line(content))


def parse_hcl(content: str, filename: str = "") -> List[RawItem]:
    """Parse HCL text into raw blocks and attributes. Raises HCLSyntaxError."""
    try:
        tree = hcl2.parses_to_tree(content)
        return TreeReader(content, filename).read(tree)
    except LarkError as e:
        raise _syntax_error(e, content, filename) from e
    except RecursionError as e:
        raise HCLSyntaxError("Nesting too deep to read", filename, _final_line(content)) from e


# ════════════════════════════════════════════════════════════════════════════
# MODULE BUILDER - raw syntax -> generic document tree
# ════════════════════════════════════════════════════════════════════════════

_MAX_LOOKUP_DEPTH = 16


class ModuleBuilder:
    """
    Builds one Module from the parsed files of a Terraform directory.

    Variables and locals are collected from every file first so that a
    reference in main.tf can see a default declared in variables.tf.
    """

    def __init__(self, path: str):
        self.path = path
        self._files: Dict[str, List[RawItem]] = {}
        self._variables: Dict[str, Expr] = {}
        self._locals: Dict[str, Expr] = {}
        self._filename = ""

    def add_file(self, filename: str, items: List[RawItem]) -> None:
        self._files[filename] = items
        for item in items:
            if not isinstance(item, RawBlock):
                continue
            if item.type == "variable" and item.labels:
                for entry in item.body:
                    if isinstance(entry, RawAttribute) and entry.name == "default":
                        self._variables[item.labels[0]] = entry.expr
            elif item.type == "locals":
                for entry in item.body:
                    if isinstance(entry, RawAttribute):
                        self._locals[entry.name] = entry.expr

    def build(self) -> Module:
        blocks: List[Block] = []
        for filename in sorted(self._files):
            self._filename = filename
            for item in self._files[filename]:
                if isinstance(item, RawBlock):
                    blocks.append(self._build_block(item, None))
                else:
                    logger.debug(f"{filename}:{item.start_line}: ignoring top-level attribute '{item.name}'")
        return Module(self.path, blocks, SourceFormat.TERRAFORM)

    # ────────────────────────────────────────────────────────────────────
    # Tree construction
    # ────────────────────────────────────────────────────────────────────

    def _range(self, start_line: int, end_line: int) -> Range:
        return Range(self._filename, start_line, max(start_line, end_line))

    def _build_block(self, raw: RawBlock, parent: Optional[Block]) -> Block:
        block = Block(
            raw.type,
            raw.labels,
            self._range(raw.start_line, raw.end_line),
            SourceFormat.TERRAFORM,
            parent=parent,
        )
        for entry in raw.body:
            if isinstance(entry, RawBlock):
                block._append(self._build_block(entry, block))
            else:
                block._append(self._build_attribute(entry.name, entry.expr, entry.start_line, entry.end_line, block))
        return block

    def _build_attribute(self, name: str, expr: Expr, start_line: int, end_line: int, parent: Block) -> Attribute:
        target = self._follow(expr)
        attribute_range = self._range(start_line, end_line)
        if isinstance(target, ListExpr):
            borrowed = target is not expr
            items = [
                self._build_attribute(
                    name,
                    item,
                    start_line if borrowed else item.start_line,
                    end_line if borrowed else item.end_line,
                    parent,
                )
                for item in target.items
            ]
            return Attribute(name, None, attribute_range, parent=parent, items=items)
        return Attribute(name, self.evaluate(expr), attribute_range, parent=parent)

    def _follow(self, expr: Expr, depth: int = 0) -> Expr:
        """Resolve var.x / local.x chains to the expression they stand for."""
        if depth > _MAX_LOOKUP_DEPTH or not isinstance(expr, TraversalExpr) or len(expr.parts) < 2:
            return expr
        root, name = expr.parts[0], expr.parts[1]
        if root == "var" and name in self._variables and len(expr.parts) == 2:
            return self._follow(self._variables[name], depth + 1)
        if root == "local" and name in self._locals and len(expr.parts) == 2:
            return self._follow(self._locals[name], depth + 1)
        return expr

    # ────────────────────────────────────────────────────────────────────
    # Evaluation
    # ────────────────────────────────────────────────────────────────────

    def evaluate(self, expr: Expr, depth: int = 0) -> Any:
        if depth > _MAX_LOOKUP_DEPTH:
            return Unknown("<recursion limit>")

        if isinstance(expr, LiteralExpr):
            return expr.value
        if isinstance(expr, TemplateExpr):
            return self._render_template(expr, depth)
        if isinstance(expr, ListExpr):
            return [self.evaluate(item, depth + 1) for item in expr.items]
        if isinstance(expr, ObjectExpr):
            return {key: self.evaluate(value, depth + 1) for key, value in expr.entries}
        if isinstance(expr, TraversalExpr):
            followed = self._follow(expr)
            if followed is not expr:
                return self.evaluate(followed, depth + 1)
            reference = Reference(expr.parts)
            if expr.parts[0] in ("var", "local"):
                return Unknown(str(reference), references=(reference,))
            return reference
        if isinstance(expr, OpaqueExpr):
            return Unknown(expr.text, tuple(Reference(parts) for parts in expr.references))
        return Unknown()

    def _render_template(self, expr: TemplateExpr, depth: int) -> Any:
        parts = expr.parts
        if len(parts) == 1 and isinstance(parts[0], Expr):
            return self.evaluate(parts[0], depth + 1)

        rendered: List[str] = []
        references: List[Reference] = []
        known = True
        for part in parts:
            if isinstance(part, str):
                rendered.append(part)
                continue
            value = self.evaluate(part, depth + 1)
            if isinstance(value, bool):
                rendered.append("true" if value else "false")
            elif isinstance(value, (str, int, float)):
                rendered.append(str(value))
            else:
                known = False
                if isinstance(value, Reference):
                    references.append(value)
                elif isinstance(value, Unknown):
                    references.extend(value.references)
        if known:
            return "".join(rendered)
        return Unknown(expr.text, tuple(references))


def build_module(path: str, files: Dict[str, List[RawItem]]) -> Module:
    builder = ModuleBuilder(path)
    for filename, items in files.items():
        builder.add_file(filename, items)
    return builder.build()


def parse_terraform_source(content: str, filename: str = "main.tf", path: str = ".") -> Module:
    """Parse a single Terraform file into a Module. Raises HCLSyntaxError."""
    return build_module(path, {filename: parse_hcl(content, filename)})
