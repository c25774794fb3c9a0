"""Canonical text rendering for types."""

import re
from typing import List, Optional

from .nodes import TypeNode

# Whitespace on either side of these marks is dropped
_PUNCT_SPACING = re.compile(r"\s*([<>()\[\],:])\s*")
_WHITESPACE_RUN = re.compile(r"\s+")


def canonicalize(text: str) -> str:
    """
    Normalize the spacing of a rendered type.

    `HashMap < Pubkey , Vec < u8 > >` and `HashMap<Pubkey, Vec<u8>>` both
    become `HashMap<Pubkey,Vec<u8>>`.
    """
    text = _PUNCT_SPACING.sub(r"\1", text)
    return _WHITESPACE_RUN.sub(" ", text).strip()


def canonicalize_tokens(tokens: List[str]) -> str:
    return canonicalize(" ".join(tokens))


def render_type(node: Optional[TypeNode]) -> str:
    """Canonical text of a type; empty when there is no type."""
    if node is None:
        return ""
    return canonicalize_tokens(node.tokens)
