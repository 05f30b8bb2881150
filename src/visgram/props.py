"""
Property mappings and property sets.

A property maps a visual property (x, fill, size, ...) in one interaction state to a
value expression:

- a polars expression (``pl.col("mpg")``, ``pl.col("cyl") - 0.5``) is a field
  reference and is scaled;
- ``unscaled(...)`` marks a raw value: a literal or an expression used directly as a
  visual value, never passed through a scale;
- any other scalar is a literal and is unscaled;
- a Reactive is a reactive reference, scaled when its current value is an expression.

A PropertySet holds at most one property per (name, state) key, in insertion order.

Examples:
    >>> import polars as pl
    >>> from visgram.props import props, merge_props
    >>> a = props(pl.col("wt"), pl.col("mpg"), fill="red")
    >>> [p.key_str for p in a]
    ['x', 'y', 'fill']
    >>> b = merge_props(a, props(y=pl.col("disp"), size=10))
    >>> [p.key_str for p in b]
    ['x', 'y', 'fill', 'size']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

import polars as pl

from visgram.core.errors import InvalidArgumentError
from visgram.core.grammar import PropState, prop_key, split_prop_key
from visgram.reactive import Reactive, is_reactive, isolate, read

__all__ = [
    "ValueKind",
    "Unscaled",
    "unscaled",
    "Prop",
    "PropertySet",
    "props",
    "merge_props",
    "prop_value",
    "extract_reactives",
    "expr_label",
]


class ValueKind(Enum):
    """Tag of a property's value expression."""

    LITERAL = "literal"
    FIELD = "field"
    REACTIVE = "reactive"


@dataclass(frozen=True)
class Unscaled:
    """Marks a value to be used directly as a visual value."""

    value: Any


def unscaled(value: Any) -> Unscaled:
    """Wrap a value so it bypasses scale inference (``fill := "red"`` style)."""
    return Unscaled(value)


def _same_value(a: Any, b: Any) -> bool:
    if isinstance(a, pl.Expr) or isinstance(b, pl.Expr):
        return isinstance(a, pl.Expr) and isinstance(b, pl.Expr) and a.meta.eq(b)
    if is_reactive(a) or is_reactive(b):
        return is_reactive(a) and is_reactive(b) and a.id == b.id
    return bool(a == b)


def expr_label(expr: pl.Expr) -> str:
    """Column name for a bare column reference, else the expression's string form."""
    if expr.meta.is_column():
        return expr.meta.output_name()
    return str(expr)


class Prop:
    """
    One visual-property binding.

    Attributes:
        name (str): Property name, e.g. "x", "fillOpacity".
        state (PropState): Interaction state the binding applies to.
        value (Any): Literal, polars expression, or Reactive.
        kind (ValueKind): Tag of value.
        scaled (bool): Whether the property participates in scale inference.
    """

    __slots__ = ("name", "state", "value", "kind", "scaled")

    def __init__(
        self, name: str, state: PropState, value: Any, kind: ValueKind, scaled: bool
    ) -> None:
        self.name = name
        self.state = state
        self.value = value
        self.kind = kind
        self.scaled = scaled

    @classmethod
    def from_value(cls, key: str, value: Any) -> Prop:
        """Classify a raw argument into a property for the given key."""
        name, state = split_prop_key(key)
        scaled = True
        if isinstance(value, Unscaled):
            value, scaled = value.value, False

        if is_reactive(value):
            current = isolate(lambda: read(value))
            scaled = scaled and isinstance(current, pl.Expr)
            return cls(name, state, value, ValueKind.REACTIVE, scaled)
        if isinstance(value, pl.Expr):
            return cls(name, state, value, ValueKind.FIELD, scaled)
        if isinstance(value, (pl.DataFrame, pl.Series, pl.LazyFrame)) or callable(value):
            raise InvalidArgumentError(
                f"property {key!r} must be an expression, literal or reactive "
                f"(got {type(value).__name__})"
            )
        return cls(name, state, value, ValueKind.LITERAL, False)

    @property
    def key(self) -> tuple[str, PropState]:
        return self.name, self.state

    @property
    def key_str(self) -> str:
        return prop_key(self.name, self.state)

    @property
    def label(self) -> str:
        if self.kind is ValueKind.FIELD:
            return expr_label(self.value)
        if self.kind is ValueKind.REACTIVE:
            return self.value.label or self.value.id
        return repr(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Prop):
            return NotImplemented
        return (
            self.key == other.key
            and self.kind is other.kind
            and self.scaled == other.scaled
            and _same_value(self.value, other.value)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        flag = "" if self.scaled else ", unscaled"
        return f"<Prop {self.key_str}: {self.kind.value} {self.label}{flag}>"


class PropertySet:
    """
    Immutable ordered mapping from (name, state) to Prop.

    Attributes:
        inherit (bool): Whether merging onto an existing set keeps keys this set
            does not mention.
    """

    __slots__ = ("_props", "inherit")

    def __init__(self, items: Iterable[Prop] = (), *, inherit: bool = True) -> None:
        ordered: dict[tuple[str, PropState], Prop] = {}
        for p in items:
            ordered[p.key] = p
        self._props = ordered
        self.inherit = inherit

    def __iter__(self) -> Iterator[Prop]:
        return iter(self._props.values())

    def __len__(self) -> int:
        return len(self._props)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            key = split_prop_key(key)
        return key in self._props

    def __getitem__(self, key: str | tuple[str, PropState]) -> Prop:
        if isinstance(key, str):
            key = split_prop_key(key)
        return self._props[key]

    def get(self, key: str | tuple[str, PropState], default: Prop | None = None) -> Prop | None:
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> list[tuple[str, PropState]]:
        return list(self._props)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertySet):
            return NotImplemented
        return self.inherit == other.inherit and list(self) == list(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(repr(p) for p in self)
        return f"PropertySet([{inner}], inherit={self.inherit})"


def props(*args: Any, inherit: bool = True, **kwargs: Any) -> PropertySet:
    """
    Build a PropertySet from positional and named arguments.

    Args:
        *args: Up to two unnamed values, taken to be x and y.
        inherit (bool): Stored on the set; see merge_props.
        **kwargs: Named properties. Use ``**{"fill.hover": ...}`` for non-base states.

    Returns:
        PropertySet: Properties in argument order.

    Raises:
        InvalidArgumentError: More than two unnamed arguments, an unknown state
            suffix, or an unsupported value type.
    """
    if len(args) > 2:
        raise InvalidArgumentError(
            f"at most two unnamed properties (x, y) are allowed, got {len(args)}"
        )
    items = [Prop.from_value(name, value) for name, value in zip(("x", "y"), args)]
    items.extend(Prop.from_value(key, value) for key, value in kwargs.items())
    return PropertySet(items, inherit=inherit)


def merge_props(
    old: PropertySet | None, new: PropertySet, inherit: bool | None = None
) -> PropertySet:
    """
    Override-merge a new property set onto an old one.

    Keys of new replace matching keys of old in place; unseen keys are appended.
    Keys only in old survive when inheriting; otherwise the result is new itself.

    Args:
        old (PropertySet | None): Current set (None when nothing is set yet).
        new (PropertySet): Incoming set.
        inherit (bool | None): Overrides new.inherit when given.
    """
    inherit = new.inherit if inherit is None else inherit
    if old is None or not inherit:
        return new
    merged = dict(old._props)
    merged.update(new._props)
    return PropertySet(merged.values(), inherit=new.inherit)


def prop_value(prop: Prop, data: pl.DataFrame) -> pl.Series:
    """
    Evaluate a property against a table.

    Field references are evaluated with the table as context; literals (and reactive
    literals) evaluate to a one-element series.
    """
    value = read(prop.value) if prop.kind is ValueKind.REACTIVE else prop.value
    if isinstance(value, pl.Expr):
        return data.select(value.alias(prop.name)).to_series()
    return pl.Series(prop.name, [value])


def extract_reactives(propset: PropertySet | None) -> list[Reactive]:
    if propset is None:
        return []
    return [p.value for p in propset if p.kind is ValueKind.REACTIVE]
