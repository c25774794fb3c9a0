"""
Predicates that recognise Anchor constructs.

Each check looks only at attributes and signatures; nothing is resolved or
expanded.
"""

from ..syntax.nodes import FunctionItem, ModuleItem, StructItem, TypeKind, TypeNode

CONTEXT_TYPE = "Context"


def is_program_module(module: ModuleItem) -> bool:
    """A module carrying `#[program]`."""
    return any(attr.is_ident("program") for attr in module.attributes)


def is_instruction(func: FunctionItem) -> bool:
    """A function taking a `Context<...>` parameter (possibly behind references)."""
    return any(
        not param.is_receiver and param.type is not None and is_context_type(param.type)
        for param in func.params
    )


def is_account_struct(structure: StructItem) -> bool:
    """A struct whose derive list contains `Accounts`."""
    return any(
        attr.is_ident("derive") and "Accounts" in attr.argument_paths()
        for attr in structure.attributes
    )


def is_raw_account(structure: StructItem) -> bool:
    """A struct carrying `#[account]`, with or without arguments."""
    return any(attr.is_ident("account") for attr in structure.attributes)


def strip_references(ty: TypeNode) -> TypeNode:
    """Remove any number of leading `&` / `&mut`."""
    while ty.kind == TypeKind.REFERENCE and ty.elem is not None:
        ty = ty.elem
    return ty


def is_context_type(ty: TypeNode) -> bool:
    segment = strip_references(ty).last_segment()
    return segment is not None and segment.ident == CONTEXT_TYPE
