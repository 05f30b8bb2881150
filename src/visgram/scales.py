"""
Explicit scales.

Scales are normally inferred: every scaled property contributes a ScaleInfo to the
scale named after it (see visgram.inference). The constructors here add an explicit
scale to a visualisation, either to override the inferred domain or to set the range
and backend options of the scale.

Domain and range overrides go through range_prop, so a numeric pair with one missing
end only fixes the other end:

    scale_numeric(vis, "y", domain=[0, None])   # emits "domainMin": 0

Examples:
    >>> from visgram.scales import range_prop
    >>> range_prop([None, None], "range")
    {}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from visgram.core.grammar import ScaleType, prop_to_scale, scale_type_from_value
from visgram.core.grammar import scaletype_to_vega_scaletype
from visgram.inference import range_prop, to_epoch_ms
from visgram.reactive import Reactive, is_reactive
from visgram.vis import Visualisation, add_scale

__all__ = [
    "Scale",
    "range_prop",
    "scale",
    "scale_numeric",
    "scale_ordinal",
    "scale_nominal",
    "scale_logical",
    "scale_datetime",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scale:
    """
    An explicit scale.

    Attributes:
        name (str): Scale name ("x", "fill", or a custom name).
        data_type (ScaleType): Data type the scale is declared for.
        domain (list | Reactive | None): Complete domain override, if any.
        options (dict[str, Any]): Other backend properties (range, rangeMin, nice, ...).
    """

    name: str
    data_type: ScaleType
    domain: list[Any] | Reactive | None = None
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return scaletype_to_vega_scaletype(self.data_type)


def _split_domain(domain: Any) -> tuple[list[Any] | Reactive | None, dict[str, Any]]:
    if domain is None or is_reactive(domain):
        return domain, {}
    props = range_prop(domain, "domain")
    full = props.pop("domain", None)
    if isinstance(full, str):
        full = [full]
    return full, props


def scale(
    vis: Visualisation,
    property: str,
    type: str | ScaleType,
    domain: Any = None,
    range: Any = None,
    *,
    name: str | None = None,
    **options: Any,
) -> Visualisation:
    """
    Add an explicit scale of the given data type.

    Args:
        vis (Visualisation): Visualisation to extend.
        property (str): Property the scale is for; names the scale unless name is given.
        type (str | ScaleType): numeric, ordinal, nominal, logical or datetime.
        domain: Domain override. A numeric pair may have one missing end; a reactive
            domain is re-read at resolution time.
        range: Range override, e.g. ``[0, 1]``, ``"category10"``, ``["red", "blue"]``.
        name (str | None): Scale name; defaults to the shared scale of property.
        **options: Backend options, e.g. nice, zero, clamp, padding, points, reverse.

    Raises:
        InvalidScaleRangeError: Malformed domain or range.
        InvalidArgumentError: Unknown data type.
    """
    data_type = scale_type_from_value(type)
    if name is None:
        (name,) = prop_to_scale([property])

    dom, dom_props = _split_domain(domain)
    extra = {k: v for k, v in options.items() if v is not None}
    scale_ = Scale(
        name=name,
        data_type=data_type,
        domain=dom,
        options={**dom_props, **range_prop(range, "range"), **extra},
    )
    log.debug("explicit %s scale %s", data_type.value, name)
    return add_scale(vis, scale_)


def scale_numeric(
    vis: Visualisation,
    property: str,
    domain: Any = None,
    range: Any = None,
    *,
    name: str | None = None,
    reverse: bool | None = None,
    round: bool | None = None,
    trans: str | None = None,
    exponent: float | None = None,
    clamp: bool | None = None,
    nice: bool | None = None,
    zero: bool | None = None,
) -> Visualisation:
    """
    Add a numeric (quantitative) scale.

    trans selects the backend scale type ("linear", "log", "pow", "sqrt") and is
    emitted as that scale's type.
    """
    return scale(
        vis, property, ScaleType.NUMERIC, domain, range, name=name,
        reverse=reverse, round=round, trans=trans, exponent=exponent,
        clamp=clamp, nice=nice, zero=zero,
    )


def _discrete(type_: ScaleType):
    def build(
        vis: Visualisation,
        property: str,
        domain: Sequence[Any] | Reactive | None = None,
        range: Any = None,
        *,
        name: str | None = None,
        reverse: bool | None = None,
        round: bool | None = None,
        points: bool | None = None,
        padding: float | None = None,
        sort: bool | None = None,
    ) -> Visualisation:
        return scale(
            vis, property, type_, domain, range, name=name,
            reverse=reverse, round=round, points=points, padding=padding, sort=sort,
        )

    build.__name__ = f"scale_{type_.value}"
    build.__doc__ = f"Add a discrete scale for {type_.value} data."
    return build


scale_ordinal = _discrete(ScaleType.ORDINAL)
scale_nominal = _discrete(ScaleType.NOMINAL)
scale_logical = _discrete(ScaleType.LOGICAL)


def scale_datetime(
    vis: Visualisation,
    property: str,
    domain: Any = None,
    range: Any = None,
    *,
    name: str | None = None,
    reverse: bool | None = None,
    round: bool | None = None,
    utc: bool | None = None,
    clamp: bool | None = None,
    nice: str | None = None,
) -> Visualisation:
    """
    Add a time scale.

    Date and datetime domain ends are converted to epoch milliseconds. utc selects
    the backend's "utc" scale type instead of "time".
    """
    if domain is not None and not is_reactive(domain):
        domain = [to_epoch_ms(v) for v in domain]
    return scale(
        vis, property, ScaleType.DATETIME, domain, range, name=name,
        reverse=reverse, round=round, utc=utc, clamp=clamp, nice=nice,
    )
