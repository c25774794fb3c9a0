"""Anchor program parsing: classification and conversion into the base model."""

from .models import (
    Program,
    ProgramModule,
    Instruction,
    Parameter,
    AccountStruct,
    AccountField,
    Constraint,
    RawAccount,
    RawAccountField,
)
from .predicates import is_program_module, is_instruction, is_account_struct, is_raw_account
from .constraints import parse_constraints
from .context import ContextInfo, resolve_context
from .convert import AnchorParser, convert_file, parse_str, parse_file

__all__ = [
    "Program",
    "ProgramModule",
    "Instruction",
    "Parameter",
    "AccountStruct",
    "AccountField",
    "Constraint",
    "RawAccount",
    "RawAccountField",
    "is_program_module",
    "is_instruction",
    "is_account_struct",
    "is_raw_account",
    "parse_constraints",
    "ContextInfo",
    "resolve_context",
    "AnchorParser",
    "convert_file",
    "parse_str",
    "parse_file",
]
