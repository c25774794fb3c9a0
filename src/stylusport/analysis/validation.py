"""
Validation of normalized programs.

Four independent checks. None of them modifies the program model; their
issues are appended to `validation_issues` in check order and never abort
normalization.
"""

from typing import List, Set

from .models import NormalizedProgram, ValidationIssue


def validate_program(program: NormalizedProgram):
    issues: List[ValidationIssue] = []

    validate_unique_account_names(program, issues)
    validate_instruction_references(program, issues)
    validate_field_types(program, issues)
    validate_visibility(program, issues)

    for issue in issues:
        program.add_validation_issue(issue)


def validate_unique_account_names(program: NormalizedProgram, issues: List[ValidationIssue]):
    """Account structs and raw accounts share one namespace."""
    seen: Set[str] = set()

    for account in program.account_structs:
        if account.name in seen:
            issues.append(ValidationIssue.error(
                f"Duplicate account struct name: {account.name}",
                account.name,
            ))
        seen.add(account.name)

    for raw in program.raw_accounts:
        if raw.name in seen:
            issues.append(ValidationIssue.error(
                f"Duplicate account name: {raw.name}",
                raw.name,
            ))
        seen.add(raw.name)


def validate_instruction_references(program: NormalizedProgram, issues: List[ValidationIssue]):
    declared = {account.name for account in program.account_structs}

    for instruction in program.all_instructions():
        ref = instruction.account_struct_name
        if ref is not None:
            if ref not in declared:
                issues.append(ValidationIssue.warning(
                    f"Instruction {instruction.name} references undefined account struct {ref}",
                    instruction.name,
                ))
        elif instruction.has_context_parameter():
            issues.append(ValidationIssue.warning(
                f"Instruction {instruction.name} has Context parameter but no associated account struct",
                instruction.name,
            ))


def validate_field_types(program: NormalizedProgram, issues: List[ValidationIssue]):
    for account in program.account_structs:
        for f in account.fields:
            if not f.ty:
                issues.append(ValidationIssue.warning(
                    f"Field {f.name} in account {account.name} has no type information",
                    f"{account.name}.{f.name}",
                ))

    for raw in program.raw_accounts:
        for f in raw.fields:
            if not f.ty:
                issues.append(ValidationIssue.warning(
                    f"Field {f.name} in raw account {raw.name} has no type information",
                    f"{raw.name}.{f.name}",
                ))


def validate_visibility(program: NormalizedProgram, issues: List[ValidationIssue]):
    """Instructions are normally `pub`; anything else is reported as info."""
    for instruction in program.all_instructions():
        if instruction.visibility != "pub":
            issues.append(ValidationIssue.info(
                f"Instruction {instruction.name} has non-public visibility: {instruction.visibility}",
                instruction.name,
            ))
