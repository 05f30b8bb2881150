"""
Lightweight JSON serialization/deserialization utilities.

Provides `json_loads`, `json_dumps_pretty` for formatted persisted specs, and
re-exports `json_dumps_canonical` from `visgram.core.hashing` to ensure a single
canonical JSON policy across the codebase. This module is zero-IO.

Notes:
    - Use `json_dumps_canonical` for deterministic JSON strings prior to hashing
      or comparing specs.
    - Use `json_dumps_pretty` for human-readable output (show_spec/save_spec).
"""

from __future__ import annotations

import json
from typing import Any

# Re-export canonical dumps to keep a single canonicalization policy.
from .hashing import json_dumps_canonical  # noqa: F401

__all__ = [
    "json_loads",
    "json_dumps_canonical",
    "json_dumps_pretty",
]


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string to Python objects using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).

    Raises:
        json.JSONDecodeError: If the input is not valid JSON.
    """
    return json.loads(s)


def json_dumps_pretty(obj: Any, indent: int = 2) -> str:
    """Serialize to indented JSON, preserving key insertion order."""
    return json.dumps(obj, indent=indent, ensure_ascii=False)
