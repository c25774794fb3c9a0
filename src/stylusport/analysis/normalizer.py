"""
Normalizer for parsed Anchor programs.

Copies the parsed `Program` into a `NormalizedProgram`, links instructions
to their account structs, runs inference, and records validation issues.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..core.errors import MissingInfoError
from ..parser.models import (
    AccountField,
    AccountStruct,
    Instruction,
    Program,
    ProgramModule,
    RawAccount,
)
from .inference import infer_missing_semantics
from .models import (
    NormalizedAccountField,
    NormalizedAccountStruct,
    NormalizedConstraint,
    NormalizedInstruction,
    NormalizedModule,
    NormalizedParameter,
    NormalizedProgram,
    NormalizedRawAccount,
    NormalizedRawField,
    SourceInfo,
    UnknownBody,
)
from .validation import validate_program

logger = logging.getLogger(__name__)


class ProgramNormalizer:
    """
    Turns a parsed program into its normalized model.

    The input program is never modified. The result is built and mutated
    only inside `normalize` and is handed back once every pass has run.
    """

    def normalize(self, program: Program) -> NormalizedProgram:
        name = extract_program_name(program)
        normalized = NormalizedProgram(id=generate_program_id(program), name=name)

        if program.source_path:
            normalized.source_info = SourceInfo(file_path=program.source_path)

        for module in program.modules:
            normalized.modules.append(self._normalize_module(module))
        for account in program.account_structs:
            normalized.account_structs.append(self._normalize_account_struct(account))
        for raw in program.raw_accounts:
            normalized.raw_accounts.append(self._normalize_raw_account(raw))

        link_instructions_to_accounts(normalized)
        infer_missing_semantics(normalized)
        validate_program(normalized)

        logger.debug(
            "Normalized %s: %d modules, %d account structs, %d raw accounts, %d issues",
            normalized.name,
            len(normalized.modules),
            len(normalized.account_structs),
            len(normalized.raw_accounts),
            len(normalized.validation_issues),
        )
        return normalized

    def _normalize_module(self, module: ProgramModule) -> NormalizedModule:
        return NormalizedModule(
            name=module.name,
            visibility=module.visibility,
            instructions=[self._normalize_instruction(ix) for ix in module.instructions],
        )

    def _normalize_instruction(self, instruction: Instruction) -> NormalizedInstruction:
        return NormalizedInstruction(
            name=instruction.name,
            visibility=instruction.visibility,
            parameters=[
                NormalizedParameter(name=p.name, ty=p.ty, is_context=p.is_context)
                for p in instruction.parameters
            ],
            return_type=instruction.return_type,
            account_struct_name=instruction.context_type,
            body=UnknownBody(),
        )

    def _normalize_account_struct(self, account: AccountStruct) -> NormalizedAccountStruct:
        return NormalizedAccountStruct(
            name=account.name,
            visibility=account.visibility,
            fields=[self._normalize_account_field(f) for f in account.fields],
        )

    def _normalize_account_field(self, field: AccountField) -> NormalizedAccountField:
        normalized = NormalizedAccountField(name=field.name, ty=field.ty)
        for constraint in field.constraints:
            normalized.add_constraint(NormalizedConstraint(
                constraint_type=constraint.constraint_type,
                value=constraint.value,
                is_inferred=False,
            ))
        return normalized

    def _normalize_raw_account(self, account: RawAccount) -> NormalizedRawAccount:
        return NormalizedRawAccount(
            name=account.name,
            visibility=account.visibility,
            fields=[
                NormalizedRawField(name=f.name, ty=f.ty, visibility=f.visibility)
                for f in account.fields
            ],
        )


def extract_program_name(program: Program) -> str:
    """
    Name of the program.

    The first `#[program]` module when there is one, otherwise the stem of
    the source file name.
    """
    if program.modules:
        return program.modules[0].name

    if program.source_path:
        stem = Path(program.source_path).stem
        if stem:
            return stem

    raise MissingInfoError("Could not determine program name")


def generate_program_id(program: Program) -> str:
    if program.source_path:
        return f"program:{program.source_path}"
    if program.modules:
        return f"program:{program.modules[0].name}"
    return f"program:{int(datetime.now(timezone.utc).timestamp())}"


def link_instructions_to_accounts(program: NormalizedProgram):
    """Fill in missing account struct names from Context parameters."""
    for module in program.modules:
        for instruction in module.instructions:
            if instruction.account_struct_name is not None:
                continue
            for param in instruction.parameters:
                if not param.is_context:
                    continue
                struct_name = extract_context_type(param.ty)
                if struct_name is not None:
                    instruction.account_struct_name = struct_name
                    logger.debug("Linked %s to %s", instruction.name, struct_name)
                break


def extract_context_type(ty: str) -> Optional[str]:
    """
    Struct name from canonical `Context<Name>` text (references allowed).

    Returns None for a bare `Context` or when the brackets hold more than
    one type argument. Lifetime-only arguments on the struct are dropped.
    """
    start = ty.find("<")
    end = ty.rfind(">")
    if start < 0 or end <= start + 1:
        return None

    args = [a for a in _split_generic_args(ty[start + 1:end]) if not a.startswith("'")]
    if len(args) != 1:
        return None
    return _drop_lifetime_args(args[0])


def _drop_lifetime_args(name: str) -> str:
    """`Deposit<'info>` -> `Deposit`; other generic arguments are kept."""
    start = name.find("<")
    if start < 0 or not name.endswith(">"):
        return name
    inner = _split_generic_args(name[start + 1:-1])
    if inner and all(a.startswith("'") for a in inner):
        return name[:start]
    return name


def _split_generic_args(text: str):
    parts, depth, current = [], 0, []
    for ch in text:
        if ch in "<([":
            depth += 1
        elif ch in ">)]":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def normalize(program: Program) -> NormalizedProgram:
    """Normalize a parsed Anchor program."""
    return ProgramNormalizer().normalize(program)
