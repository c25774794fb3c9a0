"""
Structural view of a Rust source file.

Only the shape needed to recognise Anchor constructs is kept: items with
their outer attributes, visibility, parameters, fields, and types. Bodies,
expressions, and generics on items are not modelled.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
from enum import Enum


class TypeKind(Enum):
    """Shape of a type node."""
    PATH = "path"            # Foo, a::b::Foo<T>
    REFERENCE = "reference"  # &T, &'a mut T
    OTHER = "other"          # tuples, arrays, slices, fn pointers, ...


class GenericArgKind(Enum):
    """Kind of an angle-bracketed generic argument."""
    TYPE = "type"
    LIFETIME = "lifetime"
    OTHER = "other"  # const generics, associated type bindings


@dataclass
class GenericArg:
    kind: GenericArgKind
    type: Optional["TypeNode"] = None  # set when kind is TYPE


@dataclass
class PathSegment:
    """One `::`-separated segment of a type path."""
    ident: str
    generic_args: List[GenericArg] = field(default_factory=list)
    has_angle_brackets: bool = False

    def type_args(self) -> List["TypeNode"]:
        return [a.type for a in self.generic_args if a.kind == GenericArgKind.TYPE and a.type is not None]


@dataclass
class TypeNode:
    """A type as written in source."""
    kind: TypeKind
    tokens: List[str] = field(default_factory=list)  # original token sequence
    segments: List[PathSegment] = field(default_factory=list)  # PATH only
    elem: Optional["TypeNode"] = None  # REFERENCE only
    is_mut: bool = False  # REFERENCE only

    def last_segment(self) -> Optional[PathSegment]:
        if self.kind != TypeKind.PATH or not self.segments:
            return None
        return self.segments[-1]


@dataclass
class Attribute:
    """An outer attribute such as `#[derive(Accounts)]`."""
    path: str  # "derive", "account", "anchor_lang::program"
    arguments: Optional[str] = None  # raw text inside the delimiters, if any
    value: Optional[str] = None  # `#[path = value]` form

    def is_ident(self, name: str) -> bool:
        """True when the attribute path is the single identifier `name`."""
        return self.path == name

    def argument_paths(self) -> List[str]:
        """Arguments read as a flat comma-separated list of paths."""
        if not self.arguments:
            return []
        return [part.strip() for part in self.arguments.split(",") if part.strip()]


@dataclass
class FnParam:
    """A function parameter."""
    name: Optional[str] = None  # None when the pattern is not a plain identifier
    type: Optional[TypeNode] = None
    is_receiver: bool = False  # self, &self, &mut self


@dataclass
class FieldDecl:
    """A struct field; tuple fields have no name."""
    name: Optional[str]
    type: TypeNode
    visibility: str = ""
    attributes: List[Attribute] = field(default_factory=list)


@dataclass
class FunctionItem:
    name: str
    visibility: str = ""
    params: List[FnParam] = field(default_factory=list)
    return_type: Optional[TypeNode] = None
    attributes: List[Attribute] = field(default_factory=list)


@dataclass
class StructItem:
    name: str
    visibility: str = ""
    fields: List[FieldDecl] = field(default_factory=list)
    is_named: bool = True  # False for tuple and unit structs
    attributes: List[Attribute] = field(default_factory=list)


@dataclass
class ModuleItem:
    name: str
    visibility: str = ""
    items: Optional[List["Item"]] = None  # None for `mod foo;`
    attributes: List[Attribute] = field(default_factory=list)


@dataclass
class OtherItem:
    """Any item the frontend does not inspect (use, const, enum, impl, macro, ...)."""
    kind: str
    name: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)


Item = Union[ModuleItem, FunctionItem, StructItem, OtherItem]


@dataclass
class SourceFile:
    items: List[Item] = field(default_factory=list)
    path: Optional[str] = None
