"""
Data transforms.

Every transform accepts a plain polars DataFrame, a GroupedFrame, or a
Visualisation. Tables are transformed directly and come back as the same variant
with the same grouping. On a Visualisation the transform is registered as a
computation over the current dataset: the derived dataset gets its own id and is
recomputed whenever the parent data or a reactive argument changes.

Examples:
    >>> import polars as pl
    >>> from visgram.transforms import compute_stack
    >>> df = pl.DataFrame({"g": ["a", "a", "b"], "n": [1, 2, 5]})
    >>> compute_stack(df, pl.col("n"), pl.col("g"))["stack_upr_"].to_list()
    [1, 3, 5]
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any

import polars as pl

from visgram.core.errors import InvalidArgumentError
from visgram.reactive import isolate, read
from visgram.tabular import GroupedFrame, TabularData, groups, preserve_constants, regroup, ungroup
from visgram.vis import Visualisation, register_computation

__all__ = ["compute_stack", "arrange"]


def _check_expr(value: Any, arg: str, optional: bool = False) -> None:
    current = isolate(lambda: read(value))
    if optional and current is None:
        return
    if not isinstance(current, pl.Expr):
        raise InvalidArgumentError(
            f"{arg} must be a field expression such as pl.col(...), got {type(current).__name__}"
        )


@singledispatch
def compute_stack(data: Any, stack_var: Any = None, group_var: Any = None) -> Any:
    """
    Stack overlapping data.

    Within each group of group_var, in row order, ``stack_upr_`` is the running sum
    of stack_var and ``stack_lwr_`` the same sum lagged by one row (0 on each group's
    first row). Without group_var the whole table is one group.

    Args:
        data: DataFrame, GroupedFrame or Visualisation.
        stack_var (pl.Expr): Values to stack.
        group_var (pl.Expr | None): Stacking groups.

    Returns:
        The input variant with the two columns added. Existing grouping of the input
        is neither used nor changed.

    Raises:
        InvalidArgumentError: stack_var or group_var is not a field expression, or
            data is not a supported variant.
    """
    raise InvalidArgumentError(f"cannot stack {type(data).__name__}")


@compute_stack.register(pl.DataFrame)
def _stack_frame(data: pl.DataFrame, stack_var: Any = None, group_var: Any = None) -> pl.DataFrame:
    _check_expr(stack_var, "stack_var")
    _check_expr(group_var, "group_var", optional=True)
    stack_var, group_var = read(stack_var), read(group_var)

    upr = stack_var.cum_sum()
    lwr = pl.col("stack_upr_").shift(1, fill_value=0)
    if group_var is not None:
        upr = upr.over(group_var)
        lwr = lwr.over(group_var)
    return data.with_columns(upr.alias("stack_upr_")).with_columns(lwr.alias("stack_lwr_"))


@compute_stack.register(GroupedFrame)
def _stack_grouped(data: GroupedFrame, stack_var: Any = None, group_var: Any = None) -> TabularData:
    old_groups = groups(data)
    out = _stack_frame(ungroup(data), stack_var, group_var)
    return regroup(out, old_groups)


def _stack_transform(data: TabularData, args: dict[str, Any]) -> TabularData:
    return preserve_constants(data, compute_stack(data, **args))


@compute_stack.register(Visualisation)
def _stack_vis(data: Visualisation, stack_var: Any = None, group_var: Any = None) -> Visualisation:
    _check_expr(stack_var, "stack_var")
    _check_expr(group_var, "group_var", optional=True)
    args = {"stack_var": stack_var, "group_var": group_var}
    return register_computation(data, args, "stack", _stack_transform)


@singledispatch
def arrange(data: Any, *by: Any) -> Any:
    """
    Sort rows by one or more columns or expressions, keeping ties in input order.

    Grouping is kept but not used: rows are sorted across the whole table.
    """
    raise InvalidArgumentError(f"cannot arrange {type(data).__name__}")


@arrange.register(pl.DataFrame)
def _arrange_frame(data: pl.DataFrame, *by: Any) -> pl.DataFrame:
    if not by:
        return data
    return data.sort([read(b) for b in by], maintain_order=True)


@arrange.register(GroupedFrame)
def _arrange_grouped(data: GroupedFrame, *by: Any) -> GroupedFrame:
    return GroupedFrame(_arrange_frame(data.frame, *by), data.groups)


def _arrange_transform(data: TabularData, args: dict[str, Any]) -> TabularData:
    return arrange(data, *args["by"])


@arrange.register(Visualisation)
def _arrange_vis(data: Visualisation, *by: Any) -> Visualisation:
    for b in by:
        if not isinstance(b, (str, pl.Expr)):
            raise InvalidArgumentError(
                f"arrange keys must be column names or expressions, got {type(b).__name__}"
            )
    return register_computation(data, {"by": by}, "arrange", _arrange_transform)
