"""
Rust source reader backed by tree-sitter.

Turns Rust source text into the structural view defined in `nodes`. Only
item-level shape is extracted; function bodies and expressions are skipped.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import tree_sitter_rust as tsrust
from tree_sitter import Language, Node, Parser

from ..core.errors import RustSyntaxError, SourceReadError
from .nodes import (
    Attribute,
    FieldDecl,
    FnParam,
    FunctionItem,
    GenericArg,
    GenericArgKind,
    Item,
    ModuleItem,
    OtherItem,
    PathSegment,
    SourceFile,
    StructItem,
    TypeKind,
    TypeNode,
)
from .render import canonicalize_tokens

logger = logging.getLogger(__name__)

RUST_LANGUAGE = Language(tsrust.language())

COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

# Nodes rendered as a single token even though tree-sitter gives them children
ATOMIC_TOKEN_TYPES = frozenset({
    "lifetime",
    "string_literal",
    "raw_string_literal",
    "char_literal",
})

PATH_TYPE_NODES = frozenset({"type_identifier", "primitive_type", "scoped_type_identifier", "generic_type"})


class RustSourceReader:
    """
    Reads Rust source into a `SourceFile`.

    Each reader owns its own tree-sitter parser; readers are cheap and not
    shared between threads.
    """

    def __init__(self):
        self.parser = Parser(RUST_LANGUAGE)

    def parse_file(self, path: Union[str, Path]) -> SourceFile:
        """Read and parse a Rust file from disk."""
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Cannot read {path}: {e}") from e

        source_file = self.parse_str(source)
        source_file.path = str(path)
        return source_file

    def parse_str(self, source: str) -> SourceFile:
        """Parse Rust source text."""
        data = source.encode("utf-8")
        tree = self.parser.parse(data)
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root)
            row, col = bad.start_point if bad is not None else root.start_point
            raise RustSyntaxError(f"Invalid Rust syntax at line {row + 1}, column {col + 1}")

        items = self._read_items(root)
        logger.debug("Read %d top-level items", len(items))
        return SourceFile(items=items)

    # -- items --------------------------------------------------------------

    def _read_items(self, container: Node) -> List[Item]:
        """Read the items of a source_file or declaration_list."""
        items: List[Item] = []
        pending: List[Attribute] = []

        for child in container.named_children:
            if child.type in COMMENT_TYPES or child.type == "inner_attribute_item":
                continue
            if child.type == "attribute_item":
                attr = _read_attribute(child)
                if attr is not None:
                    pending.append(attr)
                continue

            items.append(self._read_item(child, pending))
            pending = []

        return items

    def _read_item(self, node: Node, attributes: List[Attribute]) -> Item:
        if node.type == "mod_item":
            body = node.child_by_field_name("body")
            return ModuleItem(
                name=_text(node.child_by_field_name("name")),
                visibility=_visibility(node),
                items=self._read_items(body) if body is not None else None,
                attributes=attributes,
            )

        if node.type == "function_item":
            return _read_function(node, attributes)

        if node.type == "struct_item":
            return _read_struct(node, attributes)

        name_node = node.child_by_field_name("name")
        return OtherItem(
            kind=node.type,
            name=_text(name_node) if name_node is not None else None,
            attributes=attributes,
        )


# -- functions --------------------------------------------------------------

def _read_function(node: Node, attributes: List[Attribute]) -> FunctionItem:
    params: List[FnParam] = []
    params_node = node.child_by_field_name("parameters")
    if params_node is not None:
        for child in params_node.named_children:
            if child.type == "self_parameter":
                params.append(FnParam(name="self", is_receiver=True))
            elif child.type == "parameter":
                params.append(_read_parameter(child))

    ret = node.child_by_field_name("return_type")
    return FunctionItem(
        name=_text(node.child_by_field_name("name")),
        visibility=_visibility(node),
        params=params,
        return_type=read_type(ret) if ret is not None else None,
        attributes=attributes,
    )


def _read_parameter(node: Node) -> FnParam:
    pattern = node.child_by_field_name("pattern")
    type_node = node.child_by_field_name("type")

    if pattern is not None and pattern.type == "self":
        return FnParam(name="self", type=read_type(type_node), is_receiver=True)

    return FnParam(
        name=_pattern_name(pattern),
        type=read_type(type_node) if type_node is not None else None,
    )


def _pattern_name(pattern: Optional[Node]) -> Optional[str]:
    """Identifier bound by a simple pattern (`x`, `mut x`, `ref x`), else None."""
    if pattern is None:
        return None
    if pattern.type == "identifier":
        return _text(pattern)
    if pattern.type in ("mut_pattern", "ref_pattern"):
        inner = [c for c in pattern.named_children if c.type != "mutable_specifier"]
        if len(inner) == 1 and inner[0].type == "identifier":
            return _text(inner[0])
    return None


# -- structs ----------------------------------------------------------------

def _read_struct(node: Node, attributes: List[Attribute]) -> StructItem:
    body = node.child_by_field_name("body")
    fields: List[FieldDecl] = []
    is_named = body is not None and body.type == "field_declaration_list"

    if body is not None:
        pending: List[Attribute] = []
        for child in body.named_children:
            if child.type in COMMENT_TYPES:
                continue
            if child.type == "attribute_item":
                attr = _read_attribute(child)
                if attr is not None:
                    pending.append(attr)
            elif child.type == "field_declaration":
                fields.append(FieldDecl(
                    name=_text(child.child_by_field_name("name")),
                    type=read_type(child.child_by_field_name("type")),
                    visibility=_visibility(child),
                    attributes=pending,
                ))
                pending = []
            elif child.type == "visibility_modifier":
                continue
            elif not is_named:
                # ordered_field_declaration_list lists bare types
                fields.append(FieldDecl(name=None, type=read_type(child), attributes=pending))
                pending = []

    return StructItem(
        name=_text(node.child_by_field_name("name")),
        visibility=_visibility(node),
        fields=fields,
        is_named=is_named,
        attributes=attributes,
    )


# -- attributes -------------------------------------------------------------

def _read_attribute(node: Node) -> Optional[Attribute]:
    attr = next((c for c in node.named_children if c.type == "attribute"), None)
    if attr is None or not attr.named_children:
        return None

    path = "".join(_tokens(attr.named_children[0]))
    arguments = None
    args_node = attr.child_by_field_name("arguments")
    if args_node is not None:
        raw = _text(args_node)
        if len(raw) >= 2 and raw[0] in "([{" and raw[-1] in ")]}":
            raw = raw[1:-1]
        arguments = raw

    value_node = attr.child_by_field_name("value")
    value = _text(value_node) if value_node is not None else None

    return Attribute(path=path, arguments=arguments, value=value)


# -- types ------------------------------------------------------------------

def read_type(node: Node) -> TypeNode:
    """Build a `TypeNode` from a tree-sitter type node."""
    tokens = _tokens(node)

    if node.type == "reference_type":
        inner = node.child_by_field_name("type")
        return TypeNode(
            kind=TypeKind.REFERENCE,
            tokens=tokens,
            elem=read_type(inner) if inner is not None else None,
            is_mut=any(c.type == "mutable_specifier" for c in node.named_children),
        )

    if node.type in PATH_TYPE_NODES:
        return TypeNode(kind=TypeKind.PATH, tokens=tokens, segments=_path_segments(node))

    return TypeNode(kind=TypeKind.OTHER, tokens=tokens)


def _path_segments(node: Node) -> List[PathSegment]:
    if node.type == "generic_type":
        base = node.child_by_field_name("type")
        segments = _path_segments(base) if base is not None else []
        args_node = node.child_by_field_name("type_arguments")
        if segments and args_node is not None:
            segments[-1].has_angle_brackets = True
            segments[-1].generic_args = _generic_args(args_node)
        return segments

    if node.type in ("scoped_type_identifier", "scoped_identifier"):
        prefix = node.child_by_field_name("path")
        name = node.child_by_field_name("name")
        segments = _path_segments(prefix) if prefix is not None else []
        if name is not None:
            segments.append(PathSegment(ident=_text(name)))
        return segments

    return [PathSegment(ident=_text(node))]


def _generic_args(node: Node) -> List[GenericArg]:
    args: List[GenericArg] = []
    for child in node.named_children:
        if child.type in COMMENT_TYPES:
            continue
        if child.type == "lifetime":
            args.append(GenericArg(kind=GenericArgKind.LIFETIME))
        elif child.type in ("type_binding", "block", "trait_bounds") or child.type.endswith("_literal"):
            args.append(GenericArg(kind=GenericArgKind.OTHER))
        else:
            args.append(GenericArg(kind=GenericArgKind.TYPE, type=read_type(child)))
    return args


# -- helpers ----------------------------------------------------------------

def _visibility(node: Node) -> str:
    vis = next((c for c in node.named_children if c.type == "visibility_modifier"), None)
    if vis is None:
        return ""
    # "pub", "pub(crate)", "pub(in crate::a)"
    return canonicalize_tokens(_tokens(vis))


def _tokens(node: Node) -> List[str]:
    """Leaf tokens of a node in source order, comments dropped."""
    if node.type in COMMENT_TYPES:
        return []
    if node.type in ATOMIC_TOKEN_TYPES or node.child_count == 0:
        text = _text(node)
        return [text] if text else []
    tokens: List[str] = []
    for child in node.children:
        tokens.extend(_tokens(child))
    return tokens


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None
