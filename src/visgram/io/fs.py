"""
Filesystem helpers for visgram.io.

Responsibilities
- Provide the atomic write path used by save_spec: tmp write, fsync, atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same
  filesystem, so the temporary file is created next to its destination.
"""

from __future__ import annotations

import os
import uuid

from .errors import IoWriteError

__all__ = ["makedirs", "rename_atomic", "write_text_atomic"]


def makedirs(path: str, exist_ok: bool = True) -> None:
    """Create directories recursively; a no-op for the empty path (current directory)."""
    if path:
        os.makedirs(path, exist_ok=exist_ok)


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem.

    Notes:
        Uses os.replace, which is atomic only if src and dst reside on the same filesystem.
    """
    os.replace(src, dst)


def write_text_atomic(path: str, text: str) -> None:
    """
    Write text to path so readers never observe a partial file.

    Raises:
        IoWriteError: If any step fails; the temporary file is removed.
    """
    makedirs(os.path.dirname(path))
    tmp = f"{path}.{uuid.uuid4().hex[:8]}.tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        rename_atomic(tmp, path)
    except OSError as exc:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise IoWriteError(f"failed to write {path}: {exc}") from exc
