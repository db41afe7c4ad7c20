"""Parsers for the comma/colon value lists of the criterion configuration.

Two list flavours share one token syntax:

- Criterion type values: ``literal`` or ``literal:code`` entries.
- Mapping tables: ``configValue:domainValue`` entries.

Entries are separated by commas; empty entries are skipped. Every syntax
error carries the ``(start, end)`` span of the offending entry.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from platstate.domain.types import ConfigurationError

UINT32_MASK = 0xFFFFFFFF

_ENTRY_RE = re.compile(r"[^,]+")
_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_DEC_RE = re.compile(r"^[+-]?\d+$")


class MappingSyntaxError(ConfigurationError):
    """Malformed entry in a value list."""

    def __init__(self, message: str, text: str, span: tuple[int, int]) -> None:
        super().__init__(f"{message} at {span[0]}..{span[1]} in {text!r}")
        self.text = text
        self.span = span


@dataclass(frozen=True)
class TypeValue:
    """One declared value of a criterion type."""

    literal: str
    code: int
    explicit: bool


def _entries(text: str) -> list[tuple[str, tuple[int, int]]]:
    result: list[tuple[str, tuple[int, int]]] = []
    for match in _ENTRY_RE.finditer(text):
        entry = match.group(0).strip()
        if entry:
            result.append((entry, match.span()))
    return result


def _split_pair(entry: str, text: str, span: tuple[int, int]) -> tuple[str, str]:
    parts = entry.split(":")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise MappingSyntaxError("invalid value pair", text, span)
    return parts[0].strip(), parts[1].strip()


def parse_code(token: str) -> int:
    """Convert an explicit numeric code to an unsigned 32-bit value.

    ``0x`` tokens are hexadecimal unsigned values; anything else is a signed
    32-bit decimal reinterpreted as unsigned (``-1`` becomes ``0xFFFFFFFF``).

    Raises:
        ValueError: If *token* is not a number or does not fit in 32 bits.
    """
    token = token.strip()
    if _HEX_RE.match(token):
        value = int(token, 16)
        if value > UINT32_MASK:
            msg = f"Hexadecimal code {token!r} exceeds 32 bits"
            raise ValueError(msg)
        return value
    if _DEC_RE.match(token):
        value = int(token, 10)
        if not -(2**31) <= value < 2**31:
            msg = f"Decimal code {token!r} is not a signed 32-bit value"
            raise ValueError(msg)
        return value & UINT32_MASK
    msg = f"Invalid numeric code {token!r}"
    raise ValueError(msg)


def parse_type_values(text: str, *, inclusive: bool) -> list[TypeValue]:
    """Parse the value list of a criterion type declaration.

    Implicit entries get ``1 << index`` (inclusive) or ``index`` (exclusive),
    where *index* counts implicit entries only. Explicit codes never advance
    the counter, so ``"x:0x10,y"`` yields ``x=16`` and ``y=0``.

    Examples:
        >>> [(v.literal, v.code) for v in parse_type_values("a,b,c", inclusive=True)]
        [('a', 1), ('b', 2), ('c', 4)]
        >>> [(v.literal, v.code) for v in parse_type_values("x:0x10,y", inclusive=False)]
        [('x', 16), ('y', 0)]
    """
    values: list[TypeValue] = []
    index = 0
    for entry, span in _entries(text):
        if ":" in entry:
            literal, token = _split_pair(entry, text, span)
            try:
                code = parse_code(token)
            except ValueError as exc:
                raise MappingSyntaxError(str(exc), text, span) from exc
            values.append(TypeValue(literal=literal, code=code, explicit=True))
        else:
            code = 1 << index if inclusive else index
            values.append(TypeValue(literal=entry, code=code, explicit=False))
            index += 1
    return values


def parse_mapping_table(text: str) -> list[tuple[str, str]]:
    """Parse ``configValue:domainValue`` translation pairs, in order.

    Examples:
        >>> parse_mapping_table("0:normal, 2:in_call")
        [('0', 'normal'), ('2', 'in_call')]
    """
    return [_split_pair(entry, text, span) for entry, span in _entries(text)]
