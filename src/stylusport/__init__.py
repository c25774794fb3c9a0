"""
stylusport - structural models of Anchor (Solana) programs.

Reads Anchor program source, extracts its modules, instructions and account
declarations, and normalizes them into a validated program model.
"""

__version__ = "0.1.0"

from stylusport.parser import Program, parse_file, parse_str
from stylusport.analysis import NormalizedProgram, normalize
from stylusport.core.errors import StylusportError

__all__ = [
    "Program",
    "NormalizedProgram",
    "StylusportError",
    "parse_file",
    "parse_str",
    "normalize",
]
