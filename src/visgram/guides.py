"""
Axis and legend descriptors.

The resolver adds an x and a y axis, and a legend for every stroke, fill, size,
shape and opacity scale, unless an explicit guide already covers that scale. Use
add_axis/add_legend to customise a guide and hide_axis/hide_legend to suppress one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from visgram.core.errors import InvalidArgumentError
from visgram.vis import Visualisation, append_axis, append_legend

__all__ = [
    "Axis",
    "Legend",
    "AXIS_TYPES",
    "LEGEND_CHANNELS",
    "add_axis",
    "add_legend",
    "hide_axis",
    "hide_legend",
]

AXIS_TYPES: tuple[str, ...] = ("x", "y")
LEGEND_CHANNELS: tuple[str, ...] = ("stroke", "fill", "size", "shape", "opacity")


@dataclass(frozen=True)
class Axis:
    type: str
    scale: str
    orient: str | None = None
    title: str | None = None
    title_offset: float | None = None
    format: str | None = None
    ticks: int | None = None
    values: list[Any] | None = None
    grid: bool | None = None
    layer: str | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    hide: bool = False


@dataclass(frozen=True)
class Legend:
    """
    Attributes:
        scales (dict[str, str]): Legend channel (fill, size, ...) to scale name. One
            legend may combine several channels.
    """

    scales: dict[str, str]
    title: str | None = None
    orient: str | None = None
    format: str | None = None
    values: list[Any] | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    hide: bool = False


def add_axis(
    vis: Visualisation,
    type: str,
    scale: str | None = None,
    orient: str | None = None,
    title: str | None = None,
    title_offset: float | None = None,
    format: str | None = None,
    ticks: int | None = None,
    values: list[Any] | None = None,
    grid: bool | None = None,
    layer: str | None = None,
    properties: dict[str, Any] | None = None,
) -> Visualisation:
    """
    Add an axis.

    Args:
        type (str): "x" or "y".
        scale (str | None): Scale the axis shows; defaults to type.
        orient (str | None): top/bottom for x, left/right for y.

    Raises:
        InvalidArgumentError: type is not x or y.
    """
    if type not in AXIS_TYPES:
        raise InvalidArgumentError(f"axis type must be one of {list(AXIS_TYPES)} (got {type!r})")
    axis = Axis(
        type=type,
        scale=scale or type,
        orient=orient,
        title=title,
        title_offset=title_offset,
        format=format,
        ticks=ticks,
        values=values,
        grid=grid,
        layer=layer,
        properties=dict(properties or {}),
    )
    return append_axis(vis, axis)


def hide_axis(vis: Visualisation, type: str) -> Visualisation:
    if type not in AXIS_TYPES:
        raise InvalidArgumentError(f"axis type must be one of {list(AXIS_TYPES)} (got {type!r})")
    return append_axis(vis, Axis(type=type, scale=type, hide=True))


def _legend_scales(scales: str | list[str] | dict[str, str]) -> dict[str, str]:
    if isinstance(scales, str):
        scales = [scales]
    if not isinstance(scales, dict):
        scales = {s: s for s in scales}
    bad = [c for c in scales if c not in LEGEND_CHANNELS]
    if bad or not scales:
        raise InvalidArgumentError(
            f"legend channels must be among {list(LEGEND_CHANNELS)} (got {list(scales)!r})"
        )
    return dict(scales)


def add_legend(
    vis: Visualisation,
    scales: str | list[str] | dict[str, str],
    title: str | None = None,
    orient: str | None = None,
    format: str | None = None,
    values: list[Any] | None = None,
    properties: dict[str, Any] | None = None,
) -> Visualisation:
    """
    Add a legend.

    Args:
        scales: A channel name, a list of channel names (each shown with the scale of
            the same name), or an explicit ``{channel: scale}`` mapping.

    Raises:
        InvalidArgumentError: Empty or unknown channels.
    """
    legend = Legend(
        scales=_legend_scales(scales),
        title=title,
        orient=orient,
        format=format,
        values=values,
        properties=dict(properties or {}),
    )
    return append_legend(vis, legend)


def hide_legend(vis: Visualisation, scales: str | list[str]) -> Visualisation:
    return append_legend(vis, Legend(scales=_legend_scales(scales), hide=True))
