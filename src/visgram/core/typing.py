"""
Lightweight typing aliases used across the builder, resolver and schemas.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from visgram.core.typing import DatasetId, JsonDict
    >>> def describe(ds: DatasetId) -> str:
    ...     return f"data:{ds}"
    >>> describe(DatasetId("mtcars0"))
    'data:mtcars0'
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "DatasetId",
    "ReactiveId",
    "JsonDict",
    "Rows",
]

# Dataset ids are unique per builder: parent id + "/" + transform name + counter.
DatasetId = NewType("DatasetId", str)
# Reactive ids are "reactive_" + content fingerprint.
ReactiveId = NewType("ReactiveId", str)

JsonDict = dict[str, Any]
Rows = list[dict[str, Any]]
