"""
Layer functions: one mark per call.

Positional and keyword arguments are property mappings, exactly as for props();
they apply to the new mark only. ``data`` attaches a dataset for the new mark only.

Examples:
    >>> import polars as pl
    >>> from visgram import visualise, layer_points, layer_lines
    >>> df = pl.DataFrame({"x": [3, 1, 2], "y": [1, 2, 3]})
    >>> vis = visualise(df, pl.col("x"), pl.col("y")).pipe(layer_points, size=20)
    >>> vis = layer_lines(vis, stroke="red")
    >>> [m.type.value for m in vis.marks]
    ['point', 'line']
"""

from __future__ import annotations

from typing import Any

from visgram.core.errors import InvalidArgumentError
from visgram.core.grammar import MarkType
from visgram.props import ValueKind, merge_props, props
from visgram.transforms import arrange
from visgram.vis import Visualisation, add_data, add_mark

__all__ = [
    "layer_points",
    "layer_paths",
    "layer_lines",
    "layer_rects",
    "layer_text",
    "layer_ribbons",
    "layer_arcs",
    "layer_images",
]


def _layer(type_: MarkType):
    def layer(vis: Visualisation, *args: Any, data: Any = None, **kwargs: Any) -> Visualisation:
        return add_mark(vis, type_, props(*args, **kwargs), data)

    return layer


layer_points = _layer(MarkType.POINT)
layer_points.__name__ = "layer_points"
layer_points.__doc__ = "Add a point (symbol) mark."

layer_paths = _layer(MarkType.PATH)
layer_paths.__name__ = "layer_paths"
layer_paths.__doc__ = "Add a path: points joined in data order."

layer_rects = _layer(MarkType.RECT)
layer_rects.__name__ = "layer_rects"
layer_rects.__doc__ = "Add a rect mark; set x/x2 (or width) and y/y2 (or height)."

layer_text = _layer(MarkType.TEXT)
layer_text.__name__ = "layer_text"
layer_text.__doc__ = "Add a text mark; map the label with text=..."

layer_ribbons = _layer(MarkType.RIBBON)
layer_ribbons.__name__ = "layer_ribbons"
layer_ribbons.__doc__ = "Add a ribbon (area) mark between y and y2."

layer_arcs = _layer(MarkType.ARC)
layer_arcs.__name__ = "layer_arcs"
layer_arcs.__doc__ = "Add an arc mark (startAngle/endAngle, innerRadius/outerRadius)."

layer_images = _layer(MarkType.IMAGE)
layer_images.__name__ = "layer_images"
layer_images.__doc__ = "Add an image mark; map the image location with url=..."


def layer_lines(vis: Visualisation, *args: Any, data: Any = None, **kwargs: Any) -> Visualisation:
    """
    Add a line: like layer_paths, but the data is sorted by x first.

    The sorted dataset is registered as an "arrange" computation and used only by
    the new mark.

    Raises:
        InvalidArgumentError: x is not mapped to a field expression.
    """
    new = props(*args, **kwargs)
    x = merge_props(vis.cur_props, new).get("x")
    if x is None or x.kind is not ValueKind.FIELD:
        raise InvalidArgumentError("layer_lines needs x mapped to a field expression")

    out = vis if data is None else add_data(vis, data, "unnamed_data")
    out = arrange(out, x.value)
    out = add_mark(out, MarkType.LINE, new)
    # out is a fresh copy; point it back at the caller's current data and props.
    out.cur_data, out.cur_props = vis.cur_data, vis.cur_props
    return out
