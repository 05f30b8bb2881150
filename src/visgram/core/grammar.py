"""
Canonical visgram grammar and helpers.

Defines the fixed vocabularies of the builder (property states, scale names, scale
data types, mark types) and the zero-IO helpers that translate between the builder's
vocabulary and the rendering backend's vocabulary.

Responsibilities
- Define enums for states, scales, scale data types and marks.
- Normalize property keys ("fill.hover") into (name, state) pairs.
- Map property names to their shared scale names (x2 -> x, fillOpacity -> opacity, ...).
- Map internal scale data types to backend scale kinds (numeric -> quantitative, ...).

Design principles
-----------------
1) Two vocabularies:
   - Builder side: property names (x, x2, fillOpacity, ...), data types
     (numeric, ordinal, nominal, logical, datetime) and mark types (point, path, ...).
   - Backend side: scale names, scale kinds (quantitative, ordinal, time) and
     mark types (symbol, line, rect, ...).

2) Unknown names pass through:
   - prop_to_scale leaves unrecognized property names unchanged, so custom
     properties get a scale of their own name.

Examples
--------
>>> from visgram.core.grammar import prop_to_scale, scaletype_to_vega_scaletype, split_prop_key
>>> prop_to_scale(["x", "x2", "y2", "fillOpacity", "foo"])
['x', 'x', 'y', 'opacity', 'foo']
>>> scaletype_to_vega_scaletype("nominal")
'ordinal'
>>> split_prop_key("fill.hover")
('fill', <PropState.HOVER: 'hover'>)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Final

from .errors import InvalidArgumentError

__all__ = [
    "PropState",
    "ScaleName",
    "ScaleType",
    "MarkType",
    "VALID_SCALES",
    "VALID_SCALE_TYPES",
    "PROP_SCALE_ALIASES",
    "prop_state_from_value",
    "scale_type_from_value",
    "mark_type_from_value",
    "split_prop_key",
    "prop_key",
    "trim_propset",
    "prop_to_scale",
    "scaletype_to_vega_scaletype",
    "mark_to_vega_mark",
]


class PropState(Enum):
    """
    Interaction state a property mapping applies to.

    Notes:
        BASE mappings are emitted under the backend's "update" state; explicit
        states keep their own name.
    """

    BASE = "base"
    ENTER = "enter"
    EXIT = "exit"
    UPDATE = "update"
    HOVER = "hover"


class ScaleName(Enum):
    """Fixed scale vocabulary shared by all marks of a visualisation."""

    X = "x"
    Y = "y"
    STROKE = "stroke"
    FILL = "fill"
    SHAPE = "shape"
    SIZE = "size"
    FONT_SIZE = "fontSize"
    OPACITY = "opacity"
    ANGLE = "angle"
    RADIUS = "radius"


class ScaleType(Enum):
    """
    Data type of the values flowing into a scale.

    Notes:
        ordinal, nominal and logical all map to the backend "ordinal" kind;
        see scaletype_to_vega_scaletype.
    """

    NUMERIC = "numeric"
    ORDINAL = "ordinal"
    NOMINAL = "nominal"
    LOGICAL = "logical"
    DATETIME = "datetime"


class MarkType(Enum):
    """Visual primitive types a layer may add."""

    POINT = "point"
    LINE = "line"
    PATH = "path"
    RECT = "rect"
    ARC = "arc"
    TEXT = "text"
    IMAGE = "image"
    RIBBON = "ribbon"


VALID_SCALES: Final[tuple[str, ...]] = tuple(s.value for s in ScaleName)
VALID_SCALE_TYPES: Final[tuple[str, ...]] = tuple(t.value for t in ScaleType)

PROP_SCALE_ALIASES: Final[dict[str, str]] = {
    "x2": "x",
    "y2": "y",
    "fillOpacity": "opacity",
    "strokeOpacity": "opacity",
    "innerRadius": "radius",
    "outerRadius": "radius",
    "startAngle": "angle",
    "endAngle": "angle",
}

_VEGA_SCALE_TYPES: Final[dict[ScaleType, str]] = {
    ScaleType.NUMERIC: "quantitative",
    ScaleType.ORDINAL: "ordinal",
    ScaleType.NOMINAL: "ordinal",
    ScaleType.LOGICAL: "ordinal",
    ScaleType.DATETIME: "time",
}

_VEGA_MARK_TYPES: Final[dict[MarkType, str]] = {
    MarkType.POINT: "symbol",
    MarkType.LINE: "line",
    MarkType.PATH: "line",
    MarkType.RECT: "rect",
    MarkType.ARC: "arc",
    MarkType.TEXT: "text",
    MarkType.IMAGE: "image",
    MarkType.RIBBON: "area",
}


def _from_value(enum_cls: type[Enum], value: object, what: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = [m.value for m in enum_cls]
        raise InvalidArgumentError(f"{what} must be one of {allowed} (got {value!r})") from exc


def prop_state_from_value(s: str | PropState) -> PropState:
    """
    Parse a state string into a PropState.

    Raises:
        InvalidArgumentError: If s is not a known state.
    """
    return _from_value(PropState, s, "property state")  # type: ignore[return-value]


def scale_type_from_value(s: str | ScaleType) -> ScaleType:
    """
    Parse a data-type string into a ScaleType.

    Raises:
        InvalidArgumentError: If s is not one of numeric/ordinal/nominal/logical/datetime.
    """
    return _from_value(ScaleType, s, "scale type")  # type: ignore[return-value]


def mark_type_from_value(s: str | MarkType) -> MarkType:
    """
    Parse a mark-type string into a MarkType.

    Raises:
        InvalidArgumentError: If s is not a known mark type.
    """
    return _from_value(MarkType, s, "mark type")  # type: ignore[return-value]


def split_prop_key(key: str) -> tuple[str, PropState]:
    """
    Split a property key into its base name and state.

    Args:
        key (str): Property key such as "x", "fill.hover" or "size.enter".

    Returns:
        tuple[str, PropState]: Base name and state (BASE when no suffix is present).

    Raises:
        InvalidArgumentError: If the key is empty or the suffix is not a known state.
    """
    if not key:
        raise InvalidArgumentError("property name must be a non-empty string")
    name, sep, state = key.partition(".")
    if not sep:
        return key, PropState.BASE
    if not name:
        raise InvalidArgumentError(f"property name missing in key {key!r}")
    return name, prop_state_from_value(state)


def prop_key(name: str, state: PropState) -> str:
    """Inverse of split_prop_key: BASE renders without a suffix."""
    if state is PropState.BASE:
        return name
    return f"{name}.{state.value}"


def trim_propset(keys: Iterable[str]) -> list[str]:
    """Strip state suffixes (".update", ".enter", ...) from property keys."""
    return [split_prop_key(k)[0] for k in keys]


def prop_to_scale(props: Iterable[str]) -> list[str]:
    """
    Convert property names to the names of their default scales.

    Similar properties share a scale by default, e.g. x and x2 both use the x scale.
    Unrecognized names are left unchanged.

    Args:
        props (Iterable[str]): Property names.

    Returns:
        list[str]: Default scale names, in the same order.
    """
    return [PROP_SCALE_ALIASES.get(p, p) for p in props]


def scaletype_to_vega_scaletype(type_: str | ScaleType) -> str:
    """
    Get the backend scale kind for a data type.

    Args:
        type_ (str | ScaleType): numeric, ordinal, nominal, logical or datetime.

    Returns:
        str: quantitative, ordinal or time.
    """
    return _VEGA_SCALE_TYPES[scale_type_from_value(type_)]


def mark_to_vega_mark(type_: str | MarkType) -> str:
    """Get the backend mark type for a builder mark type."""
    return _VEGA_MARK_TYPES[mark_type_from_value(type_)]
