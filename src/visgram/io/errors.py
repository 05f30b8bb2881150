"""
Custom exceptions for the visgram.io module.

Purpose
- Provide persistence-layer error types, distinct from the builder/resolver errors in
  visgram.core.errors.

Boundaries
- visgram.core.errors covers invalid builder input and resolution conflicts.
- visgram.io raises Io* errors for file and format concerns:
  - ParseError: a persisted spec is not valid JSON or does not match the VisSpec schema.
  - IoWriteError: the atomic write path (tmp write, fsync, rename) failed.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

__all__ = ["IoError", "ParseError", "IoWriteError"]


class IoError(Exception):
    """
    Base class for IO-related errors in visgram.io.

    Notes:
        Use this as a catch-all for persistence failures, distinct from visgram.core errors.
    """


class ParseError(IoError):
    """
    Raised when a persisted spec cannot be loaded.

    Notes:
        The underlying json.JSONDecodeError or pydantic.ValidationError is chained as
        __cause__.
    """


class IoWriteError(IoError):
    """Raised when a spec file could not be written and renamed into place."""
