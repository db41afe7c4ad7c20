"""Render a ServiceResult for humans or, with ``--json``, for machines.

Human output is a status line followed by the result data as indented
``key: value`` lines. Nested mappings (``check`` summaries) indent one level
further; lists print inline as compact JSON.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from platstate.services.result import ServiceResult

INDENT = "  "


def _data_lines(data: dict[str, Any], depth: int = 1) -> list[str]:
    lines: list[str] = []
    prefix = INDENT * depth
    for key, value in data.items():
        if isinstance(value, dict) and value:
            lines.append(f"{prefix}{key}:")
            lines.extend(_data_lines(value, depth + 1))
        elif isinstance(value, (dict, list)):
            lines.append(f"{prefix}{key}: {json.dumps(value, separators=(',', ':'))}")
        else:
            lines.append(f"{prefix}{key}: {value}")
    return lines


def format_result(result: ServiceResult, *, json_output: bool = False) -> str:
    """Format *result* for display; ``json_output`` selects the JSON dump."""
    if json_output:
        return result.model_dump_json(indent=2)
    if result.ok:
        head = f"OK: {result.op}"
    else:
        message = result.error.message if result.error else "Unknown error"
        head = f"ERROR: {result.op}: {message}"
    return "\n".join([head, *_data_lines(result.data)])
