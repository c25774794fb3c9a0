"""
Data models for normalized programs.

A normalized program is the parsed model enriched with what can be inferred
from Anchor conventions: implicit constraints, field relationships, and the
basic operations an instruction performs. It is the input to code
generation.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Tuple, Union
from enum import Enum

SCHEMA_VERSION = "1.0"


class IssueSeverity(Enum):
    """Severity of a validation issue."""
    INFO = "info"
    WARNING = "warning"  # does not prevent code generation
    ERROR = "error"  # may prevent correct code generation


@dataclass
class ValidationIssue:
    """A non-fatal problem found while normalizing."""
    severity: IssueSeverity
    message: str
    element: str  # entity name, or "Struct.field"

    @classmethod
    def info(cls, message: str, element: str) -> "ValidationIssue":
        return cls(IssueSeverity.INFO, message, element)

    @classmethod
    def warning(cls, message: str, element: str) -> "ValidationIssue":
        return cls(IssueSeverity.WARNING, message, element)

    @classmethod
    def error(cls, message: str, element: str) -> "ValidationIssue":
        return cls(IssueSeverity.ERROR, message, element)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "element": self.element,
        }


# -- instruction bodies -----------------------------------------------------

@dataclass(frozen=True)
class LogOperation:
    message: str
    kind: str = field(default="log", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class InitializeOperation:
    """Creates `target`, funded by `payer`."""
    target: str
    payer: str
    kind: str = field(default="initialize", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "target": self.target, "payer": self.payer}


@dataclass(frozen=True)
class TransferOperation:
    from_account: str
    to_account: str
    kind: str = field(default="transfer", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "from": self.from_account, "to": self.to_account}


@dataclass(frozen=True)
class CloseOperation:
    """Closes `target`, refunding its lamports to `refund_to`."""
    target: str
    refund_to: str
    kind: str = field(default="close", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "target": self.target, "refund_to": self.refund_to}


BasicOperation = Union[LogOperation, InitializeOperation, TransferOperation, CloseOperation]


@dataclass(frozen=True)
class UnknownBody:
    """Nothing is known about what the instruction does."""
    kind: str = field(default="unknown", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class BasicBody:
    """Operations inferred from the instruction's accounts and name."""
    operations: Tuple[BasicOperation, ...] = ()
    kind: str = field(default="basic", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "operations": [op.to_dict() for op in self.operations]}


InstructionBody = Union[UnknownBody, BasicBody]


# -- instructions -----------------------------------------------------------

@dataclass
class NormalizedParameter:
    name: str
    ty: str
    is_context: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ty": self.ty, "is_context": self.is_context}


@dataclass
class NormalizedInstruction:
    """An instruction with its account struct linked and its body modeled."""
    name: str
    visibility: str = ""
    parameters: List[NormalizedParameter] = field(default_factory=list)
    return_type: Optional[str] = None
    account_struct_name: Optional[str] = None
    body: InstructionBody = field(default_factory=UnknownBody)
    documentation: Optional[str] = None

    def has_context_parameter(self) -> bool:
        return any(p.is_context for p in self.parameters)

    def get_context_parameter(self) -> Optional[NormalizedParameter]:
        for p in self.parameters:
            if p.is_context:
                return p
        return None

    def operations(self) -> List[BasicOperation]:
        if isinstance(self.body, BasicBody):
            return list(self.body.operations)
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
            "account_struct_name": self.account_struct_name,
            "body": self.body.to_dict(),
            "documentation": self.documentation,
        }


@dataclass
class NormalizedModule:
    name: str
    visibility: str = ""
    instructions: List[NormalizedInstruction] = field(default_factory=list)
    documentation: Optional[str] = None

    def find_instruction(self, name: str) -> Optional[NormalizedInstruction]:
        for ix in self.instructions:
            if ix.name == name:
                return ix
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "instructions": [ix.to_dict() for ix in self.instructions],
            "documentation": self.documentation,
        }


# -- accounts ---------------------------------------------------------------

@dataclass
class NormalizedConstraint:
    constraint_type: str
    value: Optional[str] = None
    is_inferred: bool = False  # True when synthesized, not present in source

    def to_dict(self) -> Dict[str, Any]:
        return {
            "constraint_type": self.constraint_type,
            "value": self.value,
            "is_inferred": self.is_inferred,
        }


@dataclass
class InferredFieldInfo:
    """Flags derived from a field's constraints."""
    requires_mut: bool = False
    requires_signer: bool = False
    is_initialized: bool = False
    related_account: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requires_mut": self.requires_mut,
            "requires_signer": self.requires_signer,
            "is_initialized": self.is_initialized,
            "related_account": self.related_account,
        }


@dataclass
class NormalizedAccountField:
    name: str
    ty: str
    constraints: List[NormalizedConstraint] = field(default_factory=list)
    documentation: Optional[str] = None
    inferred_info: InferredFieldInfo = field(default_factory=InferredFieldInfo)

    def add_constraint(self, constraint: NormalizedConstraint):
        """Append a constraint and update the derived flags."""
        if constraint.constraint_type == "mut":
            self.inferred_info.requires_mut = True
        elif constraint.constraint_type == "signer":
            self.inferred_info.requires_signer = True
        elif constraint.constraint_type == "init":
            self.inferred_info.is_initialized = True
        elif constraint.constraint_type == "payer" and constraint.value is not None:
            self.inferred_info.related_account = constraint.value

        self.constraints.append(constraint)

    def find_constraint(self, constraint_type: str) -> Optional[NormalizedConstraint]:
        for c in self.constraints:
            if c.constraint_type == constraint_type:
                return c
        return None

    def has_constraint(self, constraint_type: str) -> bool:
        return self.find_constraint(constraint_type) is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ty": self.ty,
            "constraints": [c.to_dict() for c in self.constraints],
            "documentation": self.documentation,
            "inferred_info": self.inferred_info.to_dict(),
        }


@dataclass
class NormalizedAccountStruct:
    name: str
    visibility: str = ""
    fields: List[NormalizedAccountField] = field(default_factory=list)
    documentation: Optional[str] = None

    def find_field(self, name: str) -> Optional[NormalizedAccountField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "fields": [f.to_dict() for f in self.fields],
            "documentation": self.documentation,
        }


@dataclass
class NormalizedRawField:
    name: str
    ty: str
    visibility: str = ""
    documentation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ty": self.ty,
            "visibility": self.visibility,
            "documentation": self.documentation,
        }


@dataclass
class NormalizedRawAccount:
    name: str
    visibility: str = ""
    fields: List[NormalizedRawField] = field(default_factory=list)
    documentation: Optional[str] = None

    def find_field(self, name: str) -> Optional[NormalizedRawField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "fields": [f.to_dict() for f in self.fields],
            "documentation": self.documentation,
        }


# -- program ----------------------------------------------------------------

@dataclass
class SourceInfo:
    file_path: str
    line_range: Optional[Tuple[int, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "line_range": list(self.line_range) if self.line_range else None,
        }


@dataclass
class NormalizedProgram:
    """Complete normalized model of an Anchor program."""
    id: str
    name: str
    schema_version: str = SCHEMA_VERSION
    modules: List[NormalizedModule] = field(default_factory=list)
    account_structs: List[NormalizedAccountStruct] = field(default_factory=list)
    raw_accounts: List[NormalizedRawAccount] = field(default_factory=list)
    validation_issues: List[ValidationIssue] = field(default_factory=list)
    source_info: Optional[SourceInfo] = None
    documentation: Optional[str] = None

    def find_account_struct(self, name: str) -> Optional[NormalizedAccountStruct]:
        for a in self.account_structs:
            if a.name == name:
                return a
        return None

    def find_raw_account(self, name: str) -> Optional[NormalizedRawAccount]:
        for a in self.raw_accounts:
            if a.name == name:
                return a
        return None

    def find_instruction(self, name: str) -> Optional[NormalizedInstruction]:
        """Find an instruction by name across all modules."""
        for module in self.modules:
            ix = module.find_instruction(name)
            if ix is not None:
                return ix
        return None

    def all_instructions(self) -> List[NormalizedInstruction]:
        return [ix for module in self.modules for ix in module.instructions]

    def add_validation_issue(self, issue: ValidationIssue):
        self.validation_issues.append(issue)

    def issues_by_severity(self, severity: IssueSeverity) -> List[ValidationIssue]:
        return [i for i in self.validation_issues if i.severity == severity]

    def has_errors(self) -> bool:
        return any(i.severity == IssueSeverity.ERROR for i in self.validation_issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "schema_version": self.schema_version,
            "modules": [m.to_dict() for m in self.modules],
            "account_structs": [a.to_dict() for a in self.account_structs],
            "raw_accounts": [a.to_dict() for a in self.raw_accounts],
            "validation_issues": [i.to_dict() for i in self.validation_issues],
            "source_info": self.source_info.to_dict() if self.source_info else None,
            "documentation": self.documentation,
        }

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            f"Program: {self.name}",
            f"Modules: {len(self.modules)}",
            f"Account structs: {len(self.account_structs)}",
            f"Raw accounts: {len(self.raw_accounts)}",
            f"Issues: {len(self.validation_issues)}",
        ]
        for ix in self.all_instructions():
            ops = ", ".join(op.kind for op in ix.operations())
            lines.append(f"  • {ix.name}" + (f" [{ops}]" if ops else ""))
        return "\n".join(lines)
