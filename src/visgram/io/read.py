"""
Spec loading.

Overview
- load_spec(): reads a persisted spec and validates it against VisSpec.
- view_spec(): loads a spec and hands it to a display collaborator.

Notes
- Malformed input never surfaces as a raw json/pydantic error: both are wrapped in
  ParseError with the original exception chained.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from visgram.core.schema import VisSpec
from visgram.core.serde import json_dumps_pretty, json_loads

from .errors import ParseError

__all__ = ["load_spec", "view_spec"]

log = logging.getLogger(__name__)


def load_spec(path: str | os.PathLike[str]) -> VisSpec:
    """
    Load and validate a persisted spec.

    Raises:
        FileNotFoundError: path does not exist.
        ParseError: The file is not JSON, or is JSON that does not match the schema.
    """
    src = os.fspath(path)
    with open(src, encoding="utf-8") as fh:
        text = fh.read()
    try:
        raw = json_loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"{src}: not valid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(raw, dict):
        raise ParseError(f"{src}: expected a JSON object at top level, got {type(raw).__name__}")
    try:
        spec = VisSpec.model_validate(raw)
    except ValidationError as exc:
        raise ParseError(f"{src}: invalid spec ({exc.error_count()} errors)\n{exc}") from exc
    log.debug("loaded spec from %s: %d marks", src, len(spec.marks))
    return spec


def _print_spec(spec: VisSpec) -> None:
    print(json_dumps_pretty(spec.to_dict()))


def view_spec(
    path: str | os.PathLike[str],
    display: Callable[[VisSpec], Any] | None = None,
) -> Any:
    """
    Load a spec and pass it to display (by default, print it as JSON).

    Returns:
        Whatever display returns.
    """
    spec = load_spec(path)
    return (display or _print_spec)(spec)
