"""
Syntax layer: a structural view of Rust source and the tree-sitter reader
that produces it.
"""

from .nodes import (
    SourceFile,
    ModuleItem,
    FunctionItem,
    StructItem,
    OtherItem,
    Attribute,
    FnParam,
    FieldDecl,
    TypeNode,
    TypeKind,
    PathSegment,
    GenericArg,
    GenericArgKind,
)
from .render import canonicalize, render_type
from .rust_reader import RustSourceReader

__all__ = [
    "SourceFile",
    "ModuleItem",
    "FunctionItem",
    "StructItem",
    "OtherItem",
    "Attribute",
    "FnParam",
    "FieldDecl",
    "TypeNode",
    "TypeKind",
    "PathSegment",
    "GenericArg",
    "GenericArgKind",
    "canonicalize",
    "render_type",
    "RustSourceReader",
]
