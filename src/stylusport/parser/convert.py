"""
Anchor program parser.

Walks the structural view of a Rust file and builds the `Program` model:
`#[program]` modules and their instruction handlers, `#[derive(Accounts)]`
structs with their field constraints, and `#[account]` data structs.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..core.errors import AttributeParseError
from ..syntax.nodes import FieldDecl, FunctionItem, ModuleItem, SourceFile, StructItem
from ..syntax.render import render_type
from ..syntax.rust_reader import RustSourceReader
from .constraints import parse_constraints
from .context import resolve_context
from .models import (
    AccountField,
    AccountStruct,
    Constraint,
    Instruction,
    Parameter,
    Program,
    ProgramModule,
    RawAccount,
    RawAccountField,
)
from . import predicates

logger = logging.getLogger(__name__)

UNNAMED_PARAMETER = "unnamed"


class AnchorParser:
    """
    Parser for Anchor program source.

    Recognises the three Anchor constructs the translator cares about and
    silently skips everything else (uses, consts, enums, impls, traits,
    macros, events).
    """

    def __init__(self, reader: Optional[RustSourceReader] = None):
        self.reader = reader or RustSourceReader()

    def parse_file(self, path: Union[str, Path]) -> Program:
        """Parse an Anchor program from disk."""
        source_file = self.reader.parse_file(path)
        program = self.convert(source_file)
        program.source_path = str(path)
        return program

    def parse_str(self, source: str) -> Program:
        """Parse Anchor program source text."""
        return self.convert(self.reader.parse_str(source))

    def convert(self, source_file: SourceFile) -> Program:
        """Build a `Program` from an already-read source file."""
        program = Program(source_path=source_file.path)

        for item in source_file.items:
            if isinstance(item, ModuleItem):
                if predicates.is_program_module(item):
                    program.modules.append(self._convert_module(item))
            elif isinstance(item, StructItem):
                # derive(Accounts) wins over #[account] when both are present
                if predicates.is_account_struct(item):
                    program.account_structs.append(self._convert_account_struct(item))
                elif predicates.is_raw_account(item):
                    program.raw_accounts.append(self._convert_raw_account(item))

        logger.debug(
            "Converted %d modules, %d account structs, %d raw accounts",
            len(program.modules), len(program.account_structs), len(program.raw_accounts),
        )
        return program

    def _convert_module(self, module: ModuleItem) -> ProgramModule:
        program_module = ProgramModule(name=module.name, visibility=module.visibility)

        # Only direct function items; nested modules are not scanned
        for item in module.items or []:
            if isinstance(item, FunctionItem) and predicates.is_instruction(item):
                program_module.instructions.append(self._convert_instruction(item))

        return program_module

    def _convert_instruction(self, func: FunctionItem) -> Instruction:
        instruction = Instruction(
            name=func.name,
            visibility=func.visibility,
            return_type=render_type(func.return_type) if func.return_type is not None else None,
        )

        for param in func.params:
            if param.is_receiver:
                continue

            ctx = resolve_context(param.type)
            if ctx.is_context and ctx.struct_name is not None:
                instruction.set_context_type(ctx.struct_name)

            instruction.parameters.append(Parameter(
                name=param.name or UNNAMED_PARAMETER,
                ty=render_type(param.type),
                is_context=ctx.is_context,
            ))

        return instruction

    def _convert_account_struct(self, structure: StructItem) -> AccountStruct:
        account = AccountStruct(name=structure.name, visibility=structure.visibility)

        for decl in _named_fields(structure):
            account.fields.append(AccountField(
                name=decl.name,
                ty=render_type(decl.type),
                constraints=_field_constraints(decl),
            ))

        return account

    def _convert_raw_account(self, structure: StructItem) -> RawAccount:
        raw = RawAccount(name=structure.name, visibility=structure.visibility)

        for decl in _named_fields(structure):
            raw.fields.append(RawAccountField(
                name=decl.name,
                ty=render_type(decl.type),
                visibility=decl.visibility,
            ))

        return raw


def _named_fields(structure: StructItem) -> List[FieldDecl]:
    if not structure.is_named:
        return []
    return [f for f in structure.fields if f.name is not None]


def _field_constraints(decl: FieldDecl) -> List[Constraint]:
    """Constraints from every `#[account(...)]` on the field, in source order."""
    constraints: List[Constraint] = []
    for attr in decl.attributes:
        if not attr.is_ident("account"):
            continue
        if attr.value is not None:
            raise AttributeParseError(
                f"Failed to parse account attribute on field {decl.name}: expected #[account(...)]"
            )
        if attr.arguments is not None:
            constraints.extend(parse_constraints(attr.arguments))
    return constraints


def convert_file(source_file: SourceFile) -> Program:
    return AnchorParser().convert(source_file)


def parse_str(source: str) -> Program:
    return AnchorParser().parse_str(source)


def parse_file(path: Union[str, Path]) -> Program:
    return AnchorParser().parse_file(path)
