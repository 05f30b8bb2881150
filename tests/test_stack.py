import polars as pl
import pytest

from visgram import visualise
from visgram.core.errors import InvalidArgumentError
from visgram.reactive import source
from visgram.tabular import GroupedFrame, group_by, groups
from visgram.transforms import arrange, compute_stack


@pytest.fixture
def counted(cars: pl.DataFrame) -> pl.DataFrame:
    return cars.with_columns(count=pl.lit(1))


def test_stack_within_groups_in_row_order(counted: pl.DataFrame) -> None:
    out = compute_stack(counted, pl.col("count"), pl.col("cyl"))

    six = out.filter(pl.col("cyl") == 6)
    assert six["name"].to_list() == ["mazda", "mazda_wag", "hornet", "valiant"]
    assert six["stack_upr_"].to_list() == [1, 2, 3, 4]
    assert six["stack_lwr_"].to_list() == [0, 1, 2, 3]
    four = out.filter(pl.col("cyl") == 4)
    assert four["stack_upr_"].to_list() == [1, 2]
    assert four["stack_lwr_"].to_list() == [0, 1]


def test_stack_keeps_rows_columns_and_ungrouped_input(counted: pl.DataFrame) -> None:
    out = compute_stack(counted, pl.col("count"), pl.col("cyl"))

    assert isinstance(out, pl.DataFrame)
    assert groups(out) == ()
    assert out.columns == [*counted.columns, "stack_upr_", "stack_lwr_"]
    assert out["name"].to_list() == counted["name"].to_list()


def test_stack_restores_existing_grouping(counted: pl.DataFrame) -> None:
    grouped = group_by(counted, "am")

    out = compute_stack(grouped, pl.col("count"), pl.col("cyl"))

    assert isinstance(out, GroupedFrame)
    assert groups(out) == ("am",)
    # grouping by am is not used for stacking
    six = out.frame.filter(pl.col("cyl") == 6)
    assert six["stack_upr_"].to_list() == [1, 2, 3, 4]


def test_stack_without_group_is_one_group(counted: pl.DataFrame) -> None:
    out = compute_stack(counted, pl.col("count"))
    assert out["stack_upr_"].to_list() == list(range(1, 9))
    assert out["stack_lwr_"].to_list() == list(range(0, 8))


def test_stack_weighted_values(cars: pl.DataFrame) -> None:
    out = compute_stack(cars, pl.col("wt"), pl.col("am"))
    manual = out.filter(pl.col("am") == 1)
    assert manual["stack_upr_"].to_list() == pytest.approx([2.62, 5.495, 7.815])
    assert manual["stack_lwr_"].to_list() == pytest.approx([0.0, 2.62, 5.495])


@pytest.mark.parametrize(
    ("stack_var", "group_var"),
    [("count", pl.col("cyl")), (pl.col("count"), "cyl"), (1, None)],
)
def test_stack_requires_field_expressions(counted, stack_var, group_var) -> None:
    with pytest.raises(InvalidArgumentError):
        compute_stack(counted, stack_var, group_var)


def test_stack_rejects_unsupported_data() -> None:
    with pytest.raises(InvalidArgumentError):
        compute_stack([1, 2, 3], pl.col("a"), pl.col("b"))


def test_stack_on_visualisation_registers_computation(counted: pl.DataFrame) -> None:
    vis = visualise(counted, pl.col("cyl"), pl.col("wt"))

    stacked = compute_stack(vis, pl.col("count"), pl.col("cyl"))

    assert stacked.cur_data.id == "data0/stack1"
    assert not stacked.cur_data.is_reactive
    assert {"stack_upr_", "stack_lwr_"} <= set(stacked.cur_data.frame().columns)
    assert list(stacked.data) == ["data0", "data0/stack1"]
    # the original builder is untouched
    assert vis.cur_data.id == "data0"
    assert list(vis.data) == ["data0"]


def test_stack_on_visualisation_validates_eagerly(counted: pl.DataFrame) -> None:
    vis = visualise(counted)
    with pytest.raises(InvalidArgumentError):
        compute_stack(vis, "count", pl.col("cyl"))


def test_stack_with_reactive_argument_recomputes(counted: pl.DataFrame) -> None:
    stack_var = source(pl.col("count"), label="stack_var")
    vis = compute_stack(visualise(counted), stack_var, pl.col("cyl"))

    assert vis.cur_data.is_reactive
    assert stack_var.id in vis.reactives
    six = vis.cur_data.frame().filter(pl.col("cyl") == 6)
    assert six["stack_upr_"].to_list() == [1, 2, 3, 4]

    stack_var.set(pl.col("count") * 2)
    six = vis.cur_data.frame().filter(pl.col("cyl") == 6)
    assert six["stack_upr_"].to_list() == [2, 4, 6, 8]


def test_stack_reads_reactive_arguments_on_tables(counted: pl.DataFrame) -> None:
    stack_var = source(pl.col("count"), label="table_stack_var")
    group_var = source(pl.col("cyl"), label="table_group_var")

    out = compute_stack(counted, stack_var, group_var)
    six = out.filter(pl.col("cyl") == 6)
    assert six["stack_upr_"].to_list() == [1, 2, 3, 4]

    stack_var.set(pl.col("count") * 3)
    out = compute_stack(group_by(counted, "am"), stack_var, pl.col("cyl"))
    assert groups(out) == ("am",)
    assert out.frame.filter(pl.col("cyl") == 4)["stack_upr_"].to_list() == [3, 6]

    with pytest.raises(InvalidArgumentError):
        compute_stack(counted, source("count", label="not_an_expr"))


def test_stack_preserves_constant_columns(counted: pl.DataFrame) -> None:
    data = counted.with_columns(source_name=pl.lit("mtcars"))
    vis = compute_stack(visualise(data), pl.col("count"), pl.col("cyl"))
    assert vis.cur_data.frame()["source_name"].unique().to_list() == ["mtcars"]


def test_arrange_sorts_stably(cars: pl.DataFrame) -> None:
    out = arrange(cars, "cyl")
    assert out["cyl"].to_list() == [4, 4, 6, 6, 6, 6, 8, 8]
    assert out.filter(pl.col("cyl") == 6)["name"].to_list() == [
        "mazda",
        "mazda_wag",
        "hornet",
        "valiant",
    ]
    assert arrange(cars) is cars
    grouped = arrange(group_by(cars, "am"), pl.col("wt"))
    assert groups(grouped) == ("am",)
    assert grouped.frame["wt"].to_list() == sorted(cars["wt"].to_list())
