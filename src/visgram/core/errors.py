"""
Core exception types raised while composing and resolving visualisations.

Provides typed exceptions for core-domain failures:
- InvalidArgumentError for the wrong kind of expression where a field reference was required.
- InvalidScaleRangeError for malformed scale domain/range overrides.
- InconsistentScaleTypeError when contributions to one scale disagree in inferred type.
- MissingDependencyError when a property references a reactive the builder never registered.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - All errors but InconsistentScaleTypeError are raised by the builder call that
      introduced the bad input. Scale type conflicts are only detectable once every
      mark has contributed, so visgram.resolve raises them.
    - Persistence errors (ParseError) live in visgram.io.errors.

Examples:
    Catch a malformed range override.

    >>> from visgram.core.errors import InvalidScaleRangeError
    >>> from visgram.scales import range_prop
    >>> try:
    ...     range_prop([1, 2, 3], "domain")
    ... except InvalidScaleRangeError as e:
    ...     msg = str(e)
    >>> "at most 2" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "VisgramError",
    "InvalidArgumentError",
    "InvalidScaleRangeError",
    "InconsistentScaleTypeError",
    "MissingDependencyError",
]


class VisgramError(Exception):
    """Base class for builder and resolver failures."""


class InvalidArgumentError(VisgramError, ValueError):
    """Wrong expression kind where a field reference or property value was required."""


class InvalidScaleRangeError(VisgramError, ValueError):
    """Scale domain/range override is not a numeric pair or a character vector."""


class InconsistentScaleTypeError(VisgramError, ValueError):
    """Two contributions to the same scale disagree in data type."""


class MissingDependencyError(VisgramError, LookupError):
    """A reactive referenced by a property was never registered with the builder."""
