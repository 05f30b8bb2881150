"""
Pydantic v2 models for the resolved output spec.

The resolver builds a VisSpec; save_spec writes ``VisSpec.to_dict()`` as JSON and
load_spec validates persisted JSON back into a VisSpec. Field names follow the
rendering backend's vocabulary (camelCase keys, "from" on marks) and are kept
byte-for-byte.

Responsibilities
- Define ScaleSpec, MarkSpec, AxisSpec, LegendSpec and the top-level VisSpec.
- Validate backend vocabularies (scale kinds, mark types, property states).
- Serialize deterministically: ``to_dict()`` drops unset optional keys.

Style
- Zero-IO (stdlib + pydantic only).
- Backend options not modelled explicitly (nice, zero, rangeMin, ...) are allowed
  as extra keys on scales, axes and legends.

Examples:
    >>> from visgram.core.schema import VisSpec
    >>> spec = VisSpec.model_validate({"data": {}, "scales": [], "marks": []})
    >>> spec.to_dict()["axes"]
    []
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .grammar import PropState
from .typing import JsonDict, Rows

__all__ = [
    "SCALE_KINDS",
    "VEGA_MARK_TYPES",
    "ScaleSpec",
    "MarkSpec",
    "AxisSpec",
    "LegendSpec",
    "VisSpec",
]

# Backend scale types: the three inferred kinds plus explicit quantitative/time variants.
SCALE_KINDS: frozenset[str] = frozenset(
    {"quantitative", "ordinal", "time", "linear", "log", "pow", "sqrt", "utc"}
)

VEGA_MARK_TYPES: frozenset[str] = frozenset(
    {"symbol", "line", "rect", "arc", "text", "image", "area"}
)

_BACKEND_STATES: frozenset[str] = frozenset(s.value for s in PropState if s is not PropState.BASE)


class ScaleSpec(BaseModel):
    """
    One resolved scale.

    Attributes:
        name (str): Scale name referenced by mark encodings and guides.
        type (str): Backend scale type (quantitative, ordinal, time, or an explicit variant).
        domain (list[Any] | None): Resolved domain; absent when only partial bounds are set.
        range (list[Any] | str | None): Explicit or default range.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    type: str
    domain: list[Any] | None = None
    range: list[Any] | str | None = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        if v not in SCALE_KINDS:
            raise ValueError(f"unknown scale type {v!r}; expected one of {sorted(SCALE_KINDS)}")
        return v


class MarkSpec(BaseModel):
    """
    One resolved mark.

    Attributes:
        type (str): Backend mark type (symbol, line, rect, ...).
        properties (dict[str, dict[str, JsonDict]]): State -> property -> encoding.
        from_ (dict[str, str]): ``{"data": dataset_id}``; serialized as "from".
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: str
    properties: dict[str, dict[str, JsonDict]] = Field(default_factory=dict)
    from_: dict[str, str] = Field(default_factory=dict, alias="from")

    @field_validator("type")
    @classmethod
    def _known_mark(cls, v: str) -> str:
        if v not in VEGA_MARK_TYPES:
            raise ValueError(f"unknown mark type {v!r}; expected one of {sorted(VEGA_MARK_TYPES)}")
        return v

    @field_validator("properties")
    @classmethod
    def _known_states(cls, v: dict[str, dict[str, JsonDict]]) -> dict[str, dict[str, JsonDict]]:
        bad = sorted(set(v) - _BACKEND_STATES)
        if bad:
            raise ValueError(f"unknown property states {bad}")
        return v


class AxisSpec(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    scale: str
    orient: str | None = None
    title: str | None = None

    @field_validator("type")
    @classmethod
    def _xy(cls, v: str) -> str:
        if v not in ("x", "y"):
            raise ValueError(f"axis type must be 'x' or 'y' (got {v!r})")
        return v


class LegendSpec(BaseModel):
    """Channel keys (fill, size, ...) map to scale names and are carried as extras."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    orient: str | None = None


class VisSpec(BaseModel):
    """
    Top-level resolved spec.

    Attributes:
        data (dict[str, Rows]): Dataset id -> materialized rows.
        scales (list[ScaleSpec]): Scales in name order.
        marks (list[MarkSpec]): Marks in drawing order.
        axes (list[AxisSpec]), legends (list[LegendSpec]): Guides.
        options (JsonDict): Rendering options (width, height, ...).
    """

    model_config = ConfigDict(extra="forbid")

    data: dict[str, Rows] = Field(default_factory=dict)
    scales: list[ScaleSpec] = Field(default_factory=list)
    marks: list[MarkSpec] = Field(default_factory=list)
    axes: list[AxisSpec] = Field(default_factory=list)
    legends: list[LegendSpec] = Field(default_factory=list)
    options: JsonDict = Field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        """JSON-ready dict with backend key names; unset optional keys are dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
