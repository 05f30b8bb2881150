"""
visgram.io: settings and spec persistence.

## Public API
- VisSettings: option defaults (env > TOML > defaults).
- save_spec / show_spec: resolve a Visualisation and write or print it as JSON.
- load_spec / view_spec: read a persisted spec back, validated against VisSpec.
- ParseError: malformed persisted spec.

## Examples
```python
import polars as pl
from visgram import visualise, layer_points
from visgram.io import save_spec, load_spec

df = pl.DataFrame({"x": [1, 2], "y": [3, 4]})
vis = visualise(df, pl.col("x"), pl.col("y")).pipe(layer_points)
save_spec(vis, "out/points.json")  # doctest: +SKIP
load_spec("out/points.json").marks[0].type  # 'symbol'  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import VisSettings
from .errors import IoError, IoWriteError, ParseError
from .read import load_spec, view_spec
from .write import save_spec, show_spec, spec_json

__all__ = [
    "VisSettings",
    "IoError",
    "IoWriteError",
    "ParseError",
    "load_spec",
    "view_spec",
    "save_spec",
    "show_spec",
    "spec_json",
]
