"""
Exception types.

Only structural failures are raised. Irregularities in a program that can
still be normalized are reported as `ValidationIssue`s instead.
"""

from enum import Enum


class StylusportError(Exception):
    """Base class for all errors raised by stylusport."""


# -- parsing ----------------------------------------------------------------

class ParseError(StylusportError):
    """Source could not be turned into a program model."""


class SourceReadError(ParseError):
    """Source file missing or unreadable."""


class RustSyntaxError(ParseError):
    """Source is not valid Rust."""


class AttributeParseError(ParseError):
    """An attribute's arguments could not be read."""


# -- normalization ----------------------------------------------------------

class ErrorKind(Enum):
    """Categories of normalization failure."""
    AST_EXTRACTION = "ast_extraction"
    VALIDATION = "validation"
    INFERENCE = "inference"
    MISSING_INFO = "missing_info"
    OTHER = "other"


_KIND_LABELS = {
    ErrorKind.AST_EXTRACTION: "AST extraction error",
    ErrorKind.VALIDATION: "Validation error",
    ErrorKind.INFERENCE: "Inference error",
    ErrorKind.MISSING_INFO: "Missing information",
    ErrorKind.OTHER: "Normalization error",
}


class NormalizationError(StylusportError):
    """Normalization aborted; no partial result is produced."""

    kind = ErrorKind.OTHER

    def __init__(self, message: str):
        super().__init__(f"{_KIND_LABELS[self.kind]}: {message}")
        self.message = message


class AstExtractionError(NormalizationError):
    kind = ErrorKind.AST_EXTRACTION


class ValidationError(NormalizationError):
    kind = ErrorKind.VALIDATION


class InferenceError(NormalizationError):
    kind = ErrorKind.INFERENCE


class MissingInfoError(NormalizationError):
    """Required information (such as the program name) cannot be derived."""
    kind = ErrorKind.MISSING_INFO


# -- command layer ----------------------------------------------------------

class ConfigError(StylusportError):
    """Invalid command configuration."""


class OutputError(StylusportError):
    """Output could not be written."""
