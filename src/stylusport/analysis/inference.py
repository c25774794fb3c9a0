"""
Inference: adds semantics implied by Anchor conventions.

Three passes run in order, each seeing the result of the previous one:

1. operations: what an instruction does, from its account struct and name
2. field constraints: `signer` on authority-like fields, `mut` on init fields
3. relationships: `has_one` / `belongs_to` links between fields

Every pass collects its edits first and applies them afterwards, and every
pass is safe to run again on its own output.
"""

import logging
from typing import List, Optional, Tuple

from .models import (
    BasicBody,
    BasicOperation,
    CloseOperation,
    InitializeOperation,
    NormalizedAccountStruct,
    NormalizedConstraint,
    NormalizedInstruction,
    NormalizedProgram,
    TransferOperation,
)

logger = logging.getLogger(__name__)


class InferenceEngine:
    """Applies the inference passes to a normalized program."""

    # Instruction names whose account structs are expected to create accounts
    CREATE_NAMES = ("initialize", "init", "create")

    TRANSFER_NAMES = ("transfer", "send")

    CLOSE_NAMES = ("close",)

    # Field names that conventionally hold the signing authority
    AUTHORITY_FIELDS = ("authority", "owner", "admin")

    RELATION_CONSTRAINTS = ("has_one", "belongs_to")

    DEFAULT_PAYER = "payer"
    DEFAULT_REFUND = "authority"

    def infer(self, program: NormalizedProgram):
        self.infer_instruction_operations(program)
        self.infer_field_constraints(program)
        self.infer_account_relationships(program)

    # -- pass 1 -------------------------------------------------------------

    def infer_instruction_operations(self, program: NormalizedProgram):
        """Model instruction bodies as basic operations where possible."""
        edits: List[Tuple[int, int, List[BasicOperation]]] = []

        for m, module in enumerate(program.modules):
            for i, instruction in enumerate(module.instructions):
                if isinstance(instruction.body, BasicBody):
                    continue
                if instruction.account_struct_name is None:
                    continue
                account = program.find_account_struct(instruction.account_struct_name)
                if account is None:
                    continue

                operations = self.operations_for(instruction, account)
                if operations:
                    edits.append((m, i, operations))

        for m, i, operations in edits:
            instruction = program.modules[m].instructions[i]
            instruction.body = BasicBody(operations=tuple(operations))
            logger.debug("Inferred %d operations for %s", len(operations), instruction.name)

    def operations_for(
        self,
        instruction: NormalizedInstruction,
        account: NormalizedAccountStruct,
    ) -> List[BasicOperation]:
        operations: List[BasicOperation] = []

        for f in account.fields:
            if f.has_constraint("init"):
                payer = f.find_constraint("payer")
                operations.append(InitializeOperation(
                    target=f.name,
                    payer=_value_or(payer, self.DEFAULT_PAYER),
                ))

        name = instruction.name
        if name in self.CREATE_NAMES:
            pass  # covered by the init constraints above
        elif name in self.TRANSFER_NAMES:
            source = account.find_field("from")
            dest = account.find_field("to")
            if source is not None and dest is not None:
                operations.append(TransferOperation(from_account=source.name, to_account=dest.name))
        elif name in self.CLOSE_NAMES:
            for f in account.fields:
                close = f.find_constraint("close")
                if close is not None:
                    operations.append(CloseOperation(
                        target=f.name,
                        refund_to=_value_or(close, self.DEFAULT_REFUND),
                    ))
                    break

        return operations

    # -- pass 2 -------------------------------------------------------------

    def infer_field_constraints(self, program: NormalizedProgram):
        """Add constraints that Anchor conventions imply but source omits."""
        edits: List[Tuple[int, int, NormalizedConstraint]] = []

        for a, account in enumerate(program.account_structs):
            for f, account_field in enumerate(account.fields):
                if (
                    account_field.name in self.AUTHORITY_FIELDS
                    and "Signer" in account_field.ty
                    and not account_field.has_constraint("signer")
                ):
                    edits.append((a, f, NormalizedConstraint("signer", is_inferred=True)))

                if account_field.has_constraint("init") and not account_field.has_constraint("mut"):
                    edits.append((a, f, NormalizedConstraint("mut", is_inferred=True)))

        for a, f, constraint in edits:
            target = program.account_structs[a].fields[f]
            target.add_constraint(constraint)
            logger.debug(
                "Inferred %s on %s.%s",
                constraint.constraint_type, program.account_structs[a].name, target.name,
            )

    # -- pass 3 -------------------------------------------------------------

    def infer_account_relationships(self, program: NormalizedProgram):
        """
        Record which field a `has_one` / `belongs_to` constraint points at.

        When several such constraints on one field name other fields, the
        last one found wins.
        """
        edits: List[Tuple[int, int, str]] = []

        for a, account in enumerate(program.account_structs):
            for i, referenced in enumerate(account.fields):
                for j, referrer in enumerate(account.fields):
                    if i == j:
                        continue
                    for constraint in referrer.constraints:
                        if (
                            constraint.constraint_type in self.RELATION_CONSTRAINTS
                            and constraint.value == referenced.name
                        ):
                            edits.append((a, j, referenced.name))

        for a, j, related in edits:
            program.account_structs[a].fields[j].inferred_info.related_account = related


def _value_or(constraint: Optional[NormalizedConstraint], default: str) -> str:
    if constraint is None or constraint.value is None:
        return default
    return constraint.value


def infer_missing_semantics(program: NormalizedProgram):
    """Run all inference passes in order."""
    InferenceEngine().infer(program)
