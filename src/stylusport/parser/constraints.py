"""
Constraint parsing for `#[account(...)]` attributes.

The argument text is split on top-level commas; each piece becomes a
constraint name with an optional value:

    init, payer = authority, space = 8 + 32
    -> init / payer="authority" / space="8 + 32"

Values are kept as written. Segments are split on the first `=` only, so a
bare expression such as `a == b` yields the name `a` and the value `= b`.
"""

from typing import List

from .models import Constraint

OPENERS = "([{"
CLOSERS = ")]}"


def split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested inside (), [] or {}."""
    parts: List[str] = []
    current: List[str] = []
    depth = 0

    for ch in text:
        if ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    parts.append("".join(current).strip())
    return [p for p in parts if p]


def parse_constraint(segment: str) -> Constraint:
    name, sep, value = segment.partition("=")
    if not sep:
        return Constraint(constraint_type=segment.strip())
    return Constraint(constraint_type=name.strip(), value=value.strip())


def parse_constraints(text: str) -> List[Constraint]:
    """Parse the text between an `#[account(` and its closing `)`."""
    return [parse_constraint(segment) for segment in split_top_level(text)]
