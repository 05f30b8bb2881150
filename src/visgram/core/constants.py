"""
visgram core defaults.

Defines option defaults consumed by visgram.io.config.VisSettings and the default
scale ranges consumed by the resolver. This module is zero-IO and uses only the
Python standard library.

Notes:
    - VisSettings reads the option defaults; env/TOML may override them.
    - DEFAULT_RANGES is keyed by (scale name, backend scale kind); "*" matches any kind.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_RENDERER",
    "DEFAULT_DURATION",
    "DEFAULT_JSON_INDENT",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_RANGES",
    "DEFAULT_DATA_NAME",
]

# Plot size in pixels.
DEFAULT_WIDTH: int = 600
DEFAULT_HEIGHT: int = 400

DEFAULT_RENDERER: str = "svg"

# Transition duration in milliseconds.
DEFAULT_DURATION: int = 250

DEFAULT_JSON_INDENT: int = 2

DEFAULT_LOG_LEVEL: str = "WARNING"

# Name used for datasets attached without an explicit name.
DEFAULT_DATA_NAME: str = "data"

DEFAULT_RANGES: dict[tuple[str, str], Any] = {
    ("x", "*"): "width",
    ("y", "*"): "height",
    ("stroke", "ordinal"): "category10",
    ("stroke", "quantitative"): ["#132B43", "#56B1F7"],
    ("stroke", "time"): ["#132B43", "#56B1F7"],
    ("fill", "ordinal"): "category10",
    ("fill", "quantitative"): ["#132B43", "#56B1F7"],
    ("fill", "time"): ["#132B43", "#56B1F7"],
    ("shape", "*"): "shapes",
    ("size", "*"): [20, 100],
    ("fontSize", "*"): [10, 20],
    ("opacity", "*"): [0, 1],
    ("angle", "*"): [0, 6.283185307179586],
    ("radius", "*"): [0, 100],
}
