"""
Datasets registered with a visualisation.

A Dataset pairs a builder-unique id with a zero-argument producer of the current
table. Constant data is wrapped in a closure that always returns the same table;
reactive data is read through its cell, so every read observes the latest upstream
values.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import polars as pl

from visgram.core.errors import InvalidArgumentError
from visgram.core.typing import DatasetId
from visgram.reactive import Reactive, is_reactive, read
from visgram.tabular import GroupedFrame, TabularData, as_frame

__all__ = ["Dataset", "constant_producer"]


def constant_producer(table: TabularData) -> Callable[[], TabularData]:
    """Wrap a table in a closure returning it unchanged."""

    def produce() -> TabularData:
        return table

    return produce


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Named tabular value.

    Attributes:
        id (DatasetId): Unique within one visualisation.
        producer (Callable[[], TabularData] | Reactive): Yields the current table.
        is_reactive (bool): True when producer is a reactive cell.
    """

    id: DatasetId
    producer: Callable[[], TabularData] | Reactive = field(repr=False)
    is_reactive: bool = False

    @classmethod
    def wrap(cls, dataset_id: str, data: TabularData | Reactive) -> Dataset:
        """Create a dataset from a table or a reactive producing tables."""
        if is_reactive(data):
            return cls(DatasetId(dataset_id), data, True)
        if not isinstance(data, (pl.DataFrame, GroupedFrame)):
            raise InvalidArgumentError(
                f"data must be a polars DataFrame, GroupedFrame or reactive "
                f"(got {type(data).__name__})"
            )
        return cls(DatasetId(dataset_id), constant_producer(data), False)

    def table(self) -> TabularData:
        """Current table, grouping included."""
        if self.is_reactive:
            return read(self.producer)
        return self.producer()

    def frame(self) -> pl.DataFrame:
        """Current table as a plain polars frame."""
        return as_frame(self.table())
