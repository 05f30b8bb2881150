"""
Spec persistence: save and show.

Overview
- save_spec(): resolves a Visualisation (or takes an already resolved VisSpec) and
  writes it as formatted JSON through the atomic tmp -> fsync -> rename path.
- show_spec(): prints the formatted spec, or selected top-level pieces of it.

Notes
- Output is deterministic: the same builder resolves to the same bytes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from visgram.core.errors import InvalidArgumentError
from visgram.core.schema import VisSpec
from visgram.core.serde import json_dumps_pretty
from visgram.core.typing import JsonDict
from visgram.resolve import resolve
from visgram.vis import Visualisation

from .config import VisSettings
from .fs import write_text_atomic

__all__ = ["save_spec", "show_spec", "spec_json"]

log = logging.getLogger(__name__)


def _as_spec(obj: Visualisation | VisSpec) -> VisSpec:
    if isinstance(obj, VisSpec):
        return obj
    if isinstance(obj, Visualisation):
        return resolve(obj)
    raise InvalidArgumentError(
        f"expected a Visualisation or VisSpec, got {type(obj).__name__}"
    )


def _select(spec: JsonDict, pieces: str | Iterable[str] | None) -> JsonDict:
    if pieces is None:
        return spec
    if isinstance(pieces, str):
        pieces = [pieces]
    keys = list(pieces)
    unknown = [k for k in keys if k not in spec]
    if unknown:
        raise InvalidArgumentError(f"unknown spec pieces {unknown}; choose from {list(spec)}")
    return {k: spec[k] for k in keys}


def spec_json(
    obj: Visualisation | VisSpec,
    pieces: str | Iterable[str] | None = None,
    indent: int | None = None,
) -> str:
    """Formatted JSON text of a resolved spec (optionally only some top-level keys)."""
    indent = VisSettings.load().json_indent if indent is None else indent
    return json_dumps_pretty(_select(_as_spec(obj).to_dict(), pieces), indent=indent)


def save_spec(
    obj: Visualisation | VisSpec,
    path: str | os.PathLike[str],
    settings: VisSettings | None = None,
) -> str:
    """
    Resolve and save a spec as formatted JSON.

    Args:
        obj (Visualisation | VisSpec): Builder to resolve, or a resolved spec.
        path (str | os.PathLike[str]): Destination file; parent directories are created.
        settings (VisSettings | None): json_indent source; VisSettings.load() when None.

    Returns:
        str: The path written.

    Raises:
        InvalidArgumentError: obj is not a Visualisation/VisSpec or path is not a path.
        IoWriteError: The file could not be written.
    """
    if not isinstance(path, (str, os.PathLike)):
        raise InvalidArgumentError(f"path must be a string or path-like, got {type(path).__name__}")
    settings = settings or VisSettings.load()
    text = spec_json(obj, indent=settings.json_indent)
    dst = os.fspath(path)
    write_text_atomic(dst, text + "\n")
    log.debug("saved spec to %s (%d bytes)", dst, len(text) + 1)
    return dst


def show_spec(obj: Visualisation | VisSpec, pieces: str | Iterable[str] | None = None) -> None:
    """
    Print the resolved spec.

    Args:
        pieces: Top-level keys to print, e.g. "scales" or ["marks", "axes"]; all when None.
    """
    print(spec_json(obj, pieces))
