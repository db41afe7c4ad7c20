"""Locale-independent conversion between configuration literals and typed values."""

from __future__ import annotations

import math
import re

from platstate.domain.mapping import UINT32_MASK
from platstate.domain.types import RogueType

_UINT_RE = re.compile(r"^(?:0[xX][0-9a-fA-F]+|\d+)$")

RogueValue = int | str | float


def parse_value(value_type: RogueType, literal: str) -> RogueValue:
    """Convert *literal* to the Python value of *value_type*.

    Raises:
        ValueError: If *literal* is not a valid value of *value_type*.
    """
    if value_type is RogueType.STRING:
        return literal

    text = literal.strip()
    if value_type is RogueType.UINT:
        if not _UINT_RE.match(text):
            msg = f"Invalid unsigned integer {literal!r}"
            raise ValueError(msg)
        value = int(text, 0) if text[:2].lower() == "0x" else int(text, 10)
        if value > UINT32_MASK:
            msg = f"Unsigned integer {literal!r} exceeds 32 bits"
            raise ValueError(msg)
        return value

    number = float(text)
    if not math.isfinite(number):
        msg = f"Invalid double {literal!r}"
        raise ValueError(msg)
    return number


def format_value(value_type: RogueType, value: RogueValue) -> str:
    """Render a typed value back to its configuration literal."""
    if value_type is RogueType.DOUBLE:
        return repr(float(value))
    return str(value)
