"""
visgram: a declarative visualisation-spec builder.

## Responsibilities
- Compose a graphic from a polars DataFrame, property mappings, marks, scales,
  guides and data transforms, one function call at a time.
- Infer scale types and domains from the data flowing into each mark.
- Track reactive inputs (controls) and recompute derived data on change.
- Resolve the composition into a renderer-agnostic JSON spec.

## Public API
- visualise, add_data, add_props, add_mark, set_options: the builder.
- props, unscaled: property mappings.
- layer_points, layer_lines, layer_paths, layer_rects, layer_text, layer_ribbons,
  layer_arcs, layer_images: marks.
- compute_stack, arrange, group_by: data transforms.
- scale_numeric, scale_ordinal, scale_nominal, scale_logical, scale_datetime: scales.
- add_axis, add_legend, hide_axis, hide_legend: guides.
- input_slider, input_select, input_checkbox, reactive, source, read: reactivity.
- resolve, save_spec, show_spec, load_spec, view_spec: output.

## Examples
```python
import polars as pl
from visgram import visualise, layer_points, scale_numeric, resolve

df = pl.DataFrame({"wt": [2.6, 3.2, 3.4], "mpg": [21.0, 22.8, 18.7], "cyl": [6, 4, 8]})
vis = (
    visualise(df, pl.col("wt"), pl.col("mpg"), fill=pl.col("cyl"))
    .pipe(layer_points, size=50)
    .pipe(scale_numeric, "y", domain=[0, None])
)
spec = resolve(vis).to_dict()
[s["name"] for s in spec["scales"]]  # ['fill', 'x', 'y']
```
"""

from __future__ import annotations

from visgram.controls import input_checkbox, input_select, input_slider
from visgram.core.errors import (
    InconsistentScaleTypeError,
    InvalidArgumentError,
    InvalidScaleRangeError,
    MissingDependencyError,
    VisgramError,
)
from visgram.core.grammar import prop_to_scale, scaletype_to_vega_scaletype
from visgram.core.schema import VisSpec
from visgram.guides import add_axis, add_legend, hide_axis, hide_legend
from visgram.inference import data_range, range_prop, vector_type
from visgram.io import (
    ParseError,
    VisSettings,
    load_spec,
    save_spec,
    show_spec,
    view_spec,
)
from visgram.layers import (
    layer_arcs,
    layer_images,
    layer_lines,
    layer_paths,
    layer_points,
    layer_rects,
    layer_ribbons,
    layer_text,
)
from visgram.props import PropertySet, merge_props, props, unscaled
from visgram.reactive import Broker, is_reactive, reactive, read, source
from visgram.resolve import resolve
from visgram.scales import (
    scale_datetime,
    scale_logical,
    scale_nominal,
    scale_numeric,
    scale_ordinal,
)
from visgram.tabular import GroupedFrame, group_by, ungroup
from visgram.transforms import arrange, compute_stack
from visgram.vis import (
    Visualisation,
    add_data,
    add_mark,
    add_options,
    add_props,
    register_computation,
    register_reactive,
    register_reactives,
    set_options,
    visualise,
)

__version__ = "0.1.0"

__all__ = [
    # builder
    "Visualisation",
    "visualise",
    "add_data",
    "add_props",
    "add_mark",
    "add_options",
    "set_options",
    "register_computation",
    "register_reactive",
    "register_reactives",
    # properties
    "PropertySet",
    "props",
    "merge_props",
    "unscaled",
    # layers
    "layer_points",
    "layer_paths",
    "layer_lines",
    "layer_rects",
    "layer_text",
    "layer_ribbons",
    "layer_arcs",
    "layer_images",
    # transforms
    "compute_stack",
    "arrange",
    "GroupedFrame",
    "group_by",
    "ungroup",
    # scales
    "scale_numeric",
    "scale_ordinal",
    "scale_nominal",
    "scale_logical",
    "scale_datetime",
    "range_prop",
    "prop_to_scale",
    "scaletype_to_vega_scaletype",
    "vector_type",
    "data_range",
    # guides
    "add_axis",
    "add_legend",
    "hide_axis",
    "hide_legend",
    # reactivity
    "Broker",
    "reactive",
    "source",
    "read",
    "is_reactive",
    "input_slider",
    "input_select",
    "input_checkbox",
    # output
    "VisSpec",
    "VisSettings",
    "resolve",
    "save_spec",
    "show_spec",
    "load_spec",
    "view_spec",
    # errors
    "VisgramError",
    "InvalidArgumentError",
    "InvalidScaleRangeError",
    "InconsistentScaleTypeError",
    "MissingDependencyError",
    "ParseError",
]
