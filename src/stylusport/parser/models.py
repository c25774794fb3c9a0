"""
Data models for parsed Anchor programs.

These models hold what is declared in source: program modules and their
instructions, account-validation structs with their constraints, and raw
account layouts. Nothing here is inferred.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any


@dataclass
class Constraint:
    """A constraint from an `#[account(...)]` attribute, e.g. `payer = authority`."""
    constraint_type: str
    value: Optional[str] = None  # kept verbatim, never evaluated

    def to_dict(self) -> Dict[str, Any]:
        return {"constraint_type": self.constraint_type, "value": self.value}


@dataclass
class Parameter:
    """An instruction parameter."""
    name: str
    ty: str  # canonical type text
    is_context: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ty": self.ty, "is_context": self.is_context}


@dataclass
class Instruction:
    """An instruction handler inside a `#[program]` module."""
    name: str
    visibility: str = ""
    parameters: List[Parameter] = field(default_factory=list)
    return_type: Optional[str] = None
    context_type: Optional[str] = None  # name of the account struct, resolved by lookup

    def set_context_type(self, name: str):
        """Set the context struct unless one is already recorded."""
        if self.context_type is None:
            self.context_type = name

    def has_context_parameter(self) -> bool:
        return any(p.is_context for p in self.parameters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
            "context_type": self.context_type,
        }


@dataclass
class ProgramModule:
    """A module marked `#[program]`."""
    name: str
    visibility: str = ""
    instructions: List[Instruction] = field(default_factory=list)

    def find_instruction(self, name: str) -> Optional[Instruction]:
        for ix in self.instructions:
            if ix.name == name:
                return ix
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "instructions": [ix.to_dict() for ix in self.instructions],
        }


@dataclass
class AccountField:
    """A field of an account-validation struct."""
    name: str
    ty: str
    constraints: List[Constraint] = field(default_factory=list)

    def find_constraint(self, constraint_type: str) -> Optional[Constraint]:
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
        }


@dataclass
class AccountStruct:
    """A struct deriving `Accounts`."""
    name: str
    visibility: str = ""
    fields: List[AccountField] = field(default_factory=list)

    def find_field(self, name: str) -> Optional[AccountField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class RawAccountField:
    """A plain data field of a `#[account]` struct."""
    name: str
    ty: str
    visibility: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ty": self.ty, "visibility": self.visibility}


@dataclass
class RawAccount:
    """A struct marked `#[account]` describing on-chain data."""
    name: str
    visibility: str = ""
    fields: List[RawAccountField] = field(default_factory=list)

    def find_field(self, name: str) -> Optional[RawAccountField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class Program:
    """Everything the frontend found in one source file."""
    modules: List[ProgramModule] = field(default_factory=list)
    account_structs: List[AccountStruct] = field(default_factory=list)
    raw_accounts: List[RawAccount] = field(default_factory=list)
    source_path: Optional[str] = None

    def find_module(self, name: str) -> Optional[ProgramModule]:
        for m in self.modules:
            if m.name == name:
                return m
        return None

    def find_account_struct(self, name: str) -> Optional[AccountStruct]:
        for a in self.account_structs:
            if a.name == name:
                return a
        return None

    def find_raw_account(self, name: str) -> Optional[RawAccount]:
        for a in self.raw_accounts:
            if a.name == name:
                return a
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modules": [m.to_dict() for m in self.modules],
            "account_structs": [a.to_dict() for a in self.account_structs],
            "raw_accounts": [a.to_dict() for a in self.raw_accounts],
            "source_path": self.source_path,
        }

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            f"Modules: {len(self.modules)}",
            f"Account structs: {len(self.account_structs)}",
            f"Raw accounts: {len(self.raw_accounts)}",
        ]
        for module in self.modules:
            lines.append(f"  • {module.name} ({len(module.instructions)} instructions)")
            for ix in module.instructions:
                ctx = f" -> {ix.context_type}" if ix.context_type else ""
                lines.append(f"      {ix.name}{ctx}")
        return "\n".join(lines)
