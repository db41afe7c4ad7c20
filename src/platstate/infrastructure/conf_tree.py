"""Parser for the hierarchical HAL configuration format.

The format is a tree of ``name value`` leaves and ``name { ... }`` groups::

    # comment
    route {
        exclusive-criterion-type {
            BandType narrow,wide
        }
    }

Values are bare words or double-quoted strings. Unbalanced braces are
schema errors and raise :class:`ConfSyntaxError` with the line number.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from platstate.domain.types import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
  | (?P<space>[ \t\r\f\v]+)
  | (?P<comment>\#[^\n]*)
  | (?P<open>\{)
  | (?P<close>\})
  | (?P<quoted>"[^"\n]*")
  | (?P<word>[^\s{}#"]+)
    """,
    re.VERBOSE,
)


class ConfSyntaxError(ConfigurationError):
    """Malformed configuration tree."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


@dataclass
class ConfNode:
    """One node of the configuration tree."""

    name: str
    value: str = ""
    children: list[ConfNode] = field(default_factory=list)

    def find(self, name: str) -> ConfNode | None:
        """Return the first direct child named *name*."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def __iter__(self) -> Iterator[ConfNode]:
        return iter(self.children)


def _tokenize(text: str) -> Iterator[tuple[str, str, int]]:
    line = 1
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            msg = f"unexpected character {text[pos]!r}"
            raise ConfSyntaxError(msg, line)
        kind = match.lastgroup or ""
        pos = match.end()
        if kind == "newline":
            line += 1
        elif kind == "quoted":
            yield "word", match.group(0)[1:-1], line
        elif kind in ("open", "close", "word"):
            yield kind, match.group(0), line


def parse_conf(text: str) -> ConfNode:
    """Parse *text* into a tree rooted at an unnamed node."""
    root = ConfNode(name="")
    stack = [root]
    # Node whose value has not been read yet; "" is a valid value.
    pending: ConfNode | None = None

    for kind, token, line in _tokenize(text):
        if kind == "open":
            if pending is None:
                raise ConfSyntaxError("'{' without a group name", line)
            stack.append(pending)
            pending = None
        elif kind == "close":
            if len(stack) == 1:
                raise ConfSyntaxError("unbalanced '}'", line)
            stack.pop()
            pending = None
        elif pending is not None:
            pending.value = token
            pending = None
        else:
            pending = ConfNode(name=token)
            stack[-1].children.append(pending)

    if len(stack) != 1:
        msg = f"unclosed group {stack[-1].name!r}"
        raise ConfSyntaxError(msg, text.count("\n") + 1)
    return root


def load_conf_file(path: Path) -> ConfNode | None:
    """Read and parse *path*. Returns None when the file cannot be read or decoded."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Configuration file %s not readable", path, exc_info=True)
        return None
    except UnicodeDecodeError as exc:
        logger.warning("Configuration file %s is not valid UTF-8: %s", path, exc)
        return None
    return parse_conf(text)
