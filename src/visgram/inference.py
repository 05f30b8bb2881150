"""
Scale inference: data types and domains of scaled properties.

Whenever a mark is added, every scaled property of the mark is evaluated against the
mark's dataset. The resulting values determine the property's data type (numeric,
ordinal, nominal, logical, datetime) and a domain: ``[min, max]`` for numeric and
datetime data, the distinct levels otherwise. Each result is filed under the
property's shared scale name (x2 -> x, fillOpacity -> opacity, ...) as a ScaleInfo;
the resolver later merges all ScaleInfo entries of one scale.

Domains over reactive data are reactive cells, re-derived whenever they are read
after an upstream change. Domains over constant data are computed once.

Examples:
    >>> import polars as pl
    >>> from visgram.inference import data_range, vector_type
    >>> vector_type(pl.Series([1.5, 2.0]))
    <ScaleType.NUMERIC: 'numeric'>
    >>> data_range(pl.Series([3, 1, 2]))
    [1, 3]
    >>> data_range(pl.Series(["b", "a", "b"]))
    ['b', 'a']
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import polars as pl

from visgram.core.errors import InvalidScaleRangeError
from visgram.core.grammar import ScaleType, prop_to_scale
from visgram.props import PropertySet, ValueKind, prop_value
from visgram.reactive import Reactive, isolate, reactive, read

if TYPE_CHECKING:
    from visgram.data import Dataset

__all__ = [
    "ScaleInfo",
    "vector_type",
    "data_range",
    "range_prop",
    "infer_scale_info",
    "to_epoch_ms",
    "is_missing",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ScaleInfo:
    """
    Domain knowledge contributed to one scale by one property (or scale override).

    Attributes:
        label (str | None): Label of the contributing expression; used for axis titles.
        type (ScaleType): Data type of the contributed values.
        domain (list | Reactive): ``[min, max]`` or distinct levels, or a reactive
            producing one of those.
        override (bool): True for explicit domains set on a scale; overrides replace
            inferred entries at resolution time.
    """

    label: str | None
    type: ScaleType
    domain: list[Any] | Reactive
    override: bool = False

    def domain_value(self) -> list[Any]:
        return list(read(self.domain))


def vector_type(values: pl.Series) -> ScaleType:
    """Infer the scale data type of a series from its dtype."""
    dtype = values.dtype
    if dtype == pl.Boolean:
        return ScaleType.LOGICAL
    if dtype.is_numeric():
        return ScaleType.NUMERIC
    if dtype == pl.Date or dtype == pl.Datetime:
        return ScaleType.DATETIME
    if dtype == pl.Categorical or isinstance(dtype, pl.Enum):
        return ScaleType.ORDINAL
    return ScaleType.NOMINAL


def data_range(values: pl.Series) -> list[Any]:
    """
    Compute the domain of a series.

    Returns:
        list: ``[min, max]`` for numeric data, ``[min, max]`` in epoch milliseconds for
        datetime data, otherwise the distinct non-null values in order of first
        appearance (Enum columns use their category order). Empty when there are no
        usable values.
    """
    type_ = vector_type(values)
    s = values.drop_nulls()
    if type_ is ScaleType.NUMERIC:
        if s.dtype.is_float():
            s = s.filter(s.is_not_nan())
        if s.is_empty():
            return []
        return [s.min(), s.max()]
    if type_ is ScaleType.DATETIME:
        if s.is_empty():
            return []
        ms = s.dt.epoch("ms")
        return [ms.min(), ms.max()]
    if isinstance(s.dtype, pl.Enum):
        return s.dtype.categories.to_list()
    return s.unique(maintain_order=True).to_list()


def is_missing(v: Any) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def to_epoch_ms(v: Any) -> Any:
    """Convert date/datetime values to epoch milliseconds; other values pass through."""
    if isinstance(v, datetime):
        return pl.Series([v]).dt.epoch("ms")[0]
    if isinstance(v, date):
        return pl.Series([v], dtype=pl.Date).dt.epoch("ms")[0]
    return v


def range_prop(x: Any, name: str) -> dict[str, Any]:
    """
    Translate a domain/range override into scale properties.

    Args:
        x: None, a string, a sequence of strings, or a numeric sequence of length <= 2
            where None/NaN marks an open end.
        name (str): Base property name, e.g. "domain" or "range".

    Returns:
        dict[str, Any]: ``{name: x}`` for character input and complete numeric pairs;
        ``{name + "Min": lo}`` or ``{name + "Max": hi}`` when one end is missing;
        empty when x is None or both ends are missing.

    Raises:
        InvalidScaleRangeError: Numeric input with more than 2 elements, or input that
            is neither numeric nor character.

    Examples:
        >>> range_prop([None, 5], "domain")
        {'domainMax': 5}
        >>> range_prop([1, None], "domain")
        {'domainMin': 1}
        >>> range_prop([1, 5], "domain")
        {'domain': [1, 5]}
    """
    if x is None:
        return {}
    if isinstance(x, str):
        return {name: x}
    if _is_number(x) or is_missing(x):
        x = [x]
    if not isinstance(x, Sequence):
        raise InvalidScaleRangeError(
            f"{name} must be numeric or character (got {type(x).__name__})"
        )

    vals = list(x)
    if vals and all(isinstance(v, str) for v in vals):
        return {name: vals}
    if not all(_is_number(v) or is_missing(v) for v in vals):
        raise InvalidScaleRangeError(f"{name} must be numeric or character (got {vals!r})")
    if len(vals) > 2:
        raise InvalidScaleRangeError(
            f"numeric {name} must have at most 2 elements, got {len(vals)}"
        )

    missing = [is_missing(v) for v in vals]
    n_miss = sum(missing)
    if n_miss == 0:
        return {name: vals}
    if n_miss == 1 and len(vals) == 2:
        if missing[0]:
            return {f"{name}Max": vals[1]}
        return {f"{name}Min": vals[0]}
    return {}


def infer_scale_info(
    propset: PropertySet, dataset: Dataset | None
) -> list[tuple[str, ScaleInfo]]:
    """
    Infer ScaleInfo entries for every scaled property of a mark.

    Args:
        propset (PropertySet): The mark's properties.
        dataset (Dataset | None): The mark's dataset; nothing is inferred without one.

    Returns:
        list[tuple[str, ScaleInfo]]: (scale name, info) pairs in property order.
    """
    if dataset is None:
        return []

    out: list[tuple[str, ScaleInfo]] = []
    for prop in propset:
        if not prop.scaled:
            continue
        values = isolate(lambda p=prop: prop_value(p, dataset.frame()))
        if dataset.is_reactive or prop.kind is ValueKind.REACTIVE:
            domain: list[Any] | Reactive = reactive(
                lambda p=prop: data_range(prop_value(p, dataset.frame())),
                label=f"domain:{dataset.id}:{prop.key_str}",
            )
        else:
            domain = data_range(values)
        (scale,) = prop_to_scale([prop.name])
        out.append((scale, ScaleInfo(label=prop.label, type=vector_type(values), domain=domain)))
        log.debug("inferred %s scale info for %s from %s", scale, prop.key_str, dataset.id)
    return out
