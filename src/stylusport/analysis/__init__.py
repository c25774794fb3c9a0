"""
Analysis module for normalizing parsed Anchor programs.
"""

from .models import (
    NormalizedProgram,
    NormalizedModule,
    NormalizedInstruction,
    NormalizedParameter,
    NormalizedAccountStruct,
    NormalizedAccountField,
    NormalizedConstraint,
    NormalizedRawAccount,
    NormalizedRawField,
    InferredFieldInfo,
    SourceInfo,
    InstructionBody,
    UnknownBody,
    BasicBody,
    BasicOperation,
    LogOperation,
    InitializeOperation,
    TransferOperation,
    CloseOperation,
    ValidationIssue,
    IssueSeverity,
    SCHEMA_VERSION,
)
from .normalizer import ProgramNormalizer, normalize
from .inference import InferenceEngine, infer_missing_semantics
from .validation import validate_program

__all__ = [
    "NormalizedProgram",
    "NormalizedModule",
    "NormalizedInstruction",
    "NormalizedParameter",
    "NormalizedAccountStruct",
    "NormalizedAccountField",
    "NormalizedConstraint",
    "NormalizedRawAccount",
    "NormalizedRawField",
    "InferredFieldInfo",
    "SourceInfo",
    "InstructionBody",
    "UnknownBody",
    "BasicBody",
    "BasicOperation",
    "LogOperation",
    "InitializeOperation",
    "TransferOperation",
    "CloseOperation",
    "ValidationIssue",
    "IssueSeverity",
    "SCHEMA_VERSION",
    "ProgramNormalizer",
    "normalize",
    "InferenceEngine",
    "infer_missing_semantics",
    "validate_program",
]
