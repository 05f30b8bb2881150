"""
Resolution of a composed Visualisation into a VisSpec.

Resolution is a read-only pass over the builder:

1. Datasets are materialized (reactive producers are read now). Computed field
   expressions used by marks are added as extra columns, named by the expression's
   string form; temporal columns become epoch milliseconds.
2. Every scale's ScaleInfo entries are type-checked and merged into one domain:
   outer bounds for quantitative and time scales, the union of levels (order of
   first appearance) for ordinal scales. Explicit domains replace inferred ones.
3. Marks are encoded per interaction state; base mappings go under "update".
4. Default axes (x, y) and legends are added for scales no explicit guide covers.

Resolving the same builder twice, with no reactive input changed in between, gives
identical output.
"""

from __future__ import annotations

import logging
from typing import Any

import polars as pl

from visgram.core.constants import DEFAULT_RANGES
from visgram.core.errors import InconsistentScaleTypeError, InvalidArgumentError
from visgram.core.grammar import PropState, mark_to_vega_mark, prop_to_scale
from visgram.core.grammar import scaletype_to_vega_scaletype
from visgram.core.schema import AxisSpec, LegendSpec, MarkSpec, ScaleSpec, VisSpec
from visgram.core.typing import JsonDict, Rows
from visgram.guides import AXIS_TYPES, LEGEND_CHANNELS, Axis, Legend
from visgram.inference import ScaleInfo, is_missing, to_epoch_ms
from visgram.props import Prop, ValueKind, expr_label
from visgram.reactive import read
from visgram.vis import Mark, Visualisation, get_reactive, is_visualisation

__all__ = ["resolve", "resolve_scale_domain"]

log = logging.getLogger(__name__)

_CONTINUOUS = ("quantitative", "time")


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


def _current_expr(vis: Visualisation, prop: Prop) -> pl.Expr | None:
    if prop.kind is ValueKind.FIELD:
        return prop.value
    if prop.kind is ValueKind.REACTIVE:
        value = read(get_reactive(vis, prop.value.id))
        if isinstance(value, pl.Expr):
            return value
    return None


def _computed_columns(vis: Visualisation) -> dict[str, dict[str, pl.Expr]]:
    out: dict[str, dict[str, pl.Expr]] = {}
    for mark in vis.marks:
        if mark.data is None:
            continue
        for prop in mark.props:
            expr = _current_expr(vis, prop)
            if expr is None or expr.meta.is_column():
                continue
            out.setdefault(mark.data.id, {})[expr_label(expr)] = expr
    return out


def _to_rows(frame: pl.DataFrame) -> Rows:
    temporal = [c for c, t in frame.schema.items() if t == pl.Date or t == pl.Datetime]
    if temporal:
        frame = frame.with_columns(pl.col(c).dt.epoch("ms") for c in temporal)
    return frame.to_dicts()


def _resolve_data(vis: Visualisation) -> dict[str, Rows]:
    computed = _computed_columns(vis)
    data: dict[str, Rows] = {}
    for dataset_id, dataset in vis.data.items():
        frame = dataset.frame()
        extra = computed.get(dataset_id)
        if extra:
            frame = frame.with_columns(expr.alias(name) for name, expr in extra.items())
        data[dataset_id] = _to_rows(frame)
    return data


# ---------------------------------------------------------------------------
# Scales
# ---------------------------------------------------------------------------


def _scale_kind(vis: Visualisation, name: str) -> str:
    kinds = {scaletype_to_vega_scaletype(i.type) for i in vis.scale_info.get(name, [])}
    if name in vis.scales:
        kinds.add(vis.scales[name].kind)
    if len(kinds) > 1:
        raise InconsistentScaleTypeError(
            f"scale {name!r} mixes incompatible data types: {sorted(kinds)}"
        )
    return kinds.pop()


def resolve_scale_domain(kind: str, infos: list[ScaleInfo]) -> list[Any] | None:
    """
    Merge the domains of several ScaleInfo entries of one scale.

    Explicit (override) entries, when present, replace inferred ones.

    Returns:
        list | None: ``[min, max]`` across all entries for quantitative/time kinds, the
        union of levels in order of first appearance otherwise; None when no entry
        contributes a value.
    """
    overrides = [i for i in infos if i.override]
    domains = [i.domain_value() for i in (overrides or infos)]

    if kind in _CONTINUOUS:
        values = [v for d in domains for v in d if not is_missing(v)]
        if not values:
            return None
        if not all(isinstance(v, (int, float)) for v in values):
            # character overrides on a continuous scale are passed through verbatim
            return [v for d in domains for v in d]
        return [min(values), max(values)]

    levels: list[Any] = []
    seen: set[Any] = set()
    for d in domains:
        for v in d:
            key = (type(v), v)
            if key not in seen:
                seen.add(key)
                levels.append(v)
    return levels or None


def _default_range(name: str, kind: str) -> Any:
    return DEFAULT_RANGES.get((name, kind), DEFAULT_RANGES.get((name, "*")))


def _resolve_scale(vis: Visualisation, name: str) -> ScaleSpec:
    kind = _scale_kind(vis, name)
    spec: JsonDict = {
        "name": name,
        "type": kind,
        "domain": resolve_scale_domain(kind, vis.scale_info.get(name, [])),
        "range": _default_range(name, kind),
    }
    if kind == "quantitative":
        spec.update(nice=True, zero=False)
    elif kind == "ordinal" and name in AXIS_TYPES:
        spec.update(points=True, padding=0.5)

    explicit = vis.scales.get(name)
    if explicit is not None:
        options = dict(explicit.options)
        trans = options.pop("trans", None)
        if trans is not None and kind == "quantitative":
            spec["type"] = trans
        if options.pop("utc", None) and kind == "time":
            spec["type"] = "utc"
        spec.update(options)
    return ScaleSpec(**spec)


def _scale_names(vis: Visualisation) -> list[str]:
    return sorted(set(vis.scale_info) | set(vis.scales))


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------


def _json_value(v: Any) -> Any:
    if isinstance(v, (list, tuple)):
        return [_json_value(x) for x in v]
    return to_epoch_ms(v)


def _encode(vis: Visualisation, prop: Prop) -> JsonDict:
    (scale,) = prop_to_scale([prop.name])
    value = prop.value
    if prop.kind is ValueKind.REACTIVE:
        value = read(get_reactive(vis, value.id))

    if isinstance(value, pl.Expr):
        enc: JsonDict = {"field": f"data.{expr_label(value)}"}
        if prop.scaled:
            enc["scale"] = scale
        return enc
    if isinstance(value, (pl.DataFrame, pl.Series)):
        raise InvalidArgumentError(
            f"property {prop.key_str!r} resolved to a {type(value).__name__}, "
            "not a value or field expression"
        )
    return {"value": _json_value(value)}


def _resolve_mark(vis: Visualisation, mark: Mark) -> MarkSpec:
    properties: dict[str, dict[str, JsonDict]] = {}
    # base mappings first, so an explicit update mapping of the same name wins
    for prop in sorted(mark.props, key=lambda p: p.state is not PropState.BASE):
        state = PropState.UPDATE.value if prop.state is PropState.BASE else prop.state.value
        properties.setdefault(state, {})[prop.name] = _encode(vis, prop)

    source = {"data": mark.data.id} if mark.data is not None else {}
    return MarkSpec(type=mark_to_vega_mark(mark.type), properties=properties, from_=source)


# ---------------------------------------------------------------------------
# Guides
# ---------------------------------------------------------------------------


def _scale_title(vis: Visualisation, scale: str) -> str | None:
    for info in vis.scale_info.get(scale, []):
        if info.label is not None:
            return info.label
    return None


def _axis_spec(vis: Visualisation, axis: Axis) -> AxisSpec:
    spec: JsonDict = {
        "type": axis.type,
        "scale": axis.scale,
        "orient": axis.orient,
        "title": axis.title if axis.title is not None else _scale_title(vis, axis.scale),
        "titleOffset": axis.title_offset,
        "format": axis.format,
        "ticks": axis.ticks,
        "values": axis.values,
        "grid": axis.grid,
        "layer": axis.layer,
    }
    if axis.properties:
        spec["properties"] = axis.properties
    return AxisSpec(**{k: v for k, v in spec.items() if v is not None})


def _resolve_axes(vis: Visualisation, scales: list[str]) -> list[AxisSpec]:
    axes = list(vis.axes)
    covered = {a.type for a in axes}
    axes.extend(Axis(type=t, scale=t) for t in AXIS_TYPES if t in scales and t not in covered)
    return [_axis_spec(vis, a) for a in axes if not a.hide]


def _legend_spec(vis: Visualisation, legend: Legend) -> LegendSpec:
    title = legend.title
    if title is None:
        title = _scale_title(vis, next(iter(legend.scales.values())))
    spec: JsonDict = {
        **legend.scales,
        "title": title,
        "orient": legend.orient,
        "format": legend.format,
        "values": legend.values,
    }
    if legend.properties:
        spec["properties"] = legend.properties
    return LegendSpec(**{k: v for k, v in spec.items() if v is not None})


def _resolve_legends(vis: Visualisation, scales: list[str]) -> list[LegendSpec]:
    legends = list(vis.legends)
    covered = {channel for lg in legends for channel in lg.scales}
    legends.extend(
        Legend(scales={c: c}) for c in LEGEND_CHANNELS if c in scales and c not in covered
    )
    return [_legend_spec(vis, lg) for lg in legends if not lg.hide]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def resolve(vis: Visualisation) -> VisSpec:
    """
    Resolve a Visualisation into its output spec.

    Args:
        vis (Visualisation): Fully composed builder. It is not modified.

    Returns:
        VisSpec: Data, scales, marks, axes, legends and options.

    Raises:
        InconsistentScaleTypeError: Contributions to one scale disagree in type after
            mapping to backend kinds (e.g. numeric and nominal on x).
        MissingDependencyError: A mark references a reactive that was never registered.
        InvalidArgumentError: vis is not a Visualisation.
    """
    if not is_visualisation(vis):
        raise InvalidArgumentError(f"expected a Visualisation, got {type(vis).__name__}")

    names = _scale_names(vis)
    scales = [_resolve_scale(vis, n) for n in names]
    marks = [_resolve_mark(vis, m) for m in vis.marks]
    spec = VisSpec(
        data=_resolve_data(vis),
        scales=scales,
        marks=marks,
        axes=_resolve_axes(vis, names),
        legends=_resolve_legends(vis, names),
        options=dict(vis.options),
    )
    log.debug(
        "resolved %d datasets, %d scales, %d marks", len(spec.data), len(scales), len(marks)
    )
    return spec
