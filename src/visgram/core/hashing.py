"""
Canonical JSON serialization and fingerprint helpers.

Provides a single canonical JSON policy plus the short fingerprints used to give
reactive cells stable identities. This module is zero-IO and uses only the Python
standard library.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
    - Fingerprints are computed over the UTF-8 encoded canonical JSON string, so two
      structurally identical descriptions always collapse to the same identity.
    - CRC32 keeps reactive ids short; SHA-256 is used where a spec digest is wanted.
"""

from __future__ import annotations

import hashlib
import json
import zlib
from collections.abc import Mapping
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "fingerprint",
    "hash_spec",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.

    Notes:
        This function assumes the input is JSON-serializable and does not perform
        coercion of unsupported types.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _sha256_hexdigest(s: str) -> str:
    """Compute SHA-256 hex digest of a UTF-8 string."""
    h = hashlib.sha256()
    h.update(s.encode("utf-8"))
    return h.hexdigest()


def fingerprint(desc: Mapping[str, Any]) -> str:
    """
    Compute a short content fingerprint for a description mapping.

    Args:
        desc (Mapping[str, Any]): JSON-serializable description of the object.

    Returns:
        str: Eight hex characters (CRC32 over the canonical JSON serialization).

    Examples:
        >>> from visgram.core.hashing import fingerprint
        >>> fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
        True
        >>> len(fingerprint({"a": 1}))
        8
    """
    data = json_dumps_canonical(dict(desc)).encode("utf-8")
    return f"{zlib.crc32(data) & 0xFFFFFFFF:08x}"


def hash_spec(spec: Mapping[str, Any]) -> str:
    """
    Hash a resolved spec mapping using canonical JSON and SHA-256 policy.

    Args:
        spec (Mapping[str, Any]): Resolved spec (as produced by VisSpec.to_dict()).

    Returns:
        str: SHA-256 hex digest over the canonical JSON serialization.
    """
    return _sha256_hexdigest(json_dumps_canonical(dict(spec)))
