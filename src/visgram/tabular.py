"""
Tabular data variants consumed by transforms.

Polars frames carry no grouping of their own, so grouping is modelled explicitly:
a plain ``pl.DataFrame`` is ungrouped data, and ``GroupedFrame`` pairs a frame with
the names of its grouping columns. Transforms dispatch on the variant and must hand
back the same variant (and the same groups) they received.

Examples:
    >>> import polars as pl
    >>> from visgram.tabular import group_by, groups, ungroup
    >>> g = group_by(pl.DataFrame({"a": [1, 1, 2]}), "a")
    >>> groups(g)
    ('a',)
    >>> groups(ungroup(g))
    ()
"""

from __future__ import annotations

from dataclasses import dataclass

import polars as pl

from visgram.core.errors import InvalidArgumentError

__all__ = [
    "GroupedFrame",
    "TabularData",
    "group_by",
    "ungroup",
    "regroup",
    "groups",
    "as_frame",
    "preserve_constants",
]


@dataclass(frozen=True)
class GroupedFrame:
    """
    A polars frame together with its grouping columns.

    Attributes:
        frame (pl.DataFrame): The rows.
        groups (tuple[str, ...]): Grouping column names, all present in frame.
    """

    frame: pl.DataFrame
    groups: tuple[str, ...]

    def __post_init__(self) -> None:
        missing = [g for g in self.groups if g not in self.frame.columns]
        if missing:
            raise InvalidArgumentError(f"grouping columns not in frame: {missing!r}")

    @property
    def columns(self) -> list[str]:
        return self.frame.columns

    @property
    def height(self) -> int:
        return self.frame.height


TabularData = pl.DataFrame | GroupedFrame


def as_frame(data: TabularData) -> pl.DataFrame:
    """Return the underlying frame of either variant."""
    return data.frame if isinstance(data, GroupedFrame) else data


def groups(data: TabularData) -> tuple[str, ...]:
    return data.groups if isinstance(data, GroupedFrame) else ()


def group_by(data: TabularData, *cols: str) -> GroupedFrame:
    """Group data by column names, replacing any existing grouping."""
    return GroupedFrame(as_frame(data), tuple(cols))


def ungroup(data: TabularData) -> pl.DataFrame:
    return as_frame(data)


def regroup(data: TabularData, cols: tuple[str, ...]) -> TabularData:
    """Apply a saved grouping; an empty grouping yields a plain frame."""
    if not cols:
        return ungroup(data)
    return group_by(data, *cols)


def preserve_constants(data: TabularData, output: TabularData) -> TabularData:
    """
    Re-attach constant columns of data that a transform dropped from output.

    A column is constant when every row holds the same value. Its value (and dtype)
    is broadcast onto every output row.
    """
    src = as_frame(data)
    out = as_frame(output)
    if src.height == 0:
        return output

    consts = [
        pl.lit(src.get_column(c)[0], dtype=src.schema[c]).alias(c)
        for c in src.columns
        if c not in out.columns and src.get_column(c).n_unique() == 1
    ]
    if not consts:
        return output
    out = out.with_columns(consts)
    return regroup(out, groups(output))
