"""Resolution of `Context<T>` parameters to their account struct."""

from dataclasses import dataclass
from typing import Optional

from ..syntax.nodes import GenericArgKind, TypeKind, TypeNode
from ..syntax.render import render_type
from .predicates import CONTEXT_TYPE, strip_references


@dataclass
class ContextInfo:
    is_context: bool = False
    struct_name: Optional[str] = None  # None when Context has no single type argument


def resolve_context(ty: Optional[TypeNode]) -> ContextInfo:
    """
    Inspect a parameter type.

    `Context<Initialize>`, `&Context<Initialize>` and
    `Context<'_, '_, '_, 'info, Initialize<'info>>` all resolve to
    `Initialize`; lifetimes are not counted as arguments and a lifetime-only
    argument list on the struct is dropped. A bare `Context` is still a
    context parameter but names no struct.
    """
    if ty is None:
        return ContextInfo()

    segment = strip_references(ty).last_segment()
    if segment is None or segment.ident != CONTEXT_TYPE:
        return ContextInfo()

    type_args = segment.type_args()
    if segment.has_angle_brackets and len(type_args) == 1:
        return ContextInfo(is_context=True, struct_name=struct_name(type_args[0]))

    return ContextInfo(is_context=True)


def struct_name(ty: TypeNode) -> str:
    """Canonical text of a context argument, without lifetime-only generics."""
    if ty.kind != TypeKind.PATH or not ty.segments:
        return render_type(ty)

    args = [a for segment in ty.segments for a in segment.generic_args]
    if any(a.kind != GenericArgKind.LIFETIME for a in args):
        return render_type(ty)

    # Deposit<'info> -> Deposit
    return "::".join(segment.ident for segment in ty.segments)
