import polars as pl
import pytest

from visgram import layer_lines, layer_points, resolve, visualise
from visgram.controls import input_slider
from visgram.core.errors import InvalidArgumentError, MissingDependencyError
from visgram.core.grammar import MarkType
from visgram.io.config import VisSettings
from visgram.props import props
from visgram.reactive import reactive, read, source
from visgram.vis import (
    Visualisation,
    add_data,
    add_mark,
    add_options,
    add_props,
    get_reactive,
    register_computation,
    register_reactive,
    register_reactives,
    register_scale_info,
    set_options,
)


def test_visualise_attaches_data_and_props(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"), name="cars")

    assert list(vis.data) == ["cars0"]
    assert vis.cur_data.id == "cars0"
    assert [p.key_str for p in vis.cur_props] == ["x", "y"]
    assert list(vis.props) == ["props0"]
    assert vis.marks == []


def test_visualise_rejects_non_tabular_data() -> None:
    with pytest.raises(InvalidArgumentError):
        visualise([{"a": 1}])


def test_same_data_twice_gets_distinct_ids(cars: pl.DataFrame) -> None:
    vis = add_data(visualise(cars, name="cars"), cars, name="cars")

    assert list(vis.data) == ["cars0", "cars1"]
    assert vis.cur_data.id == "cars1"
    data = resolve(vis).data
    assert set(data) == {"cars0", "cars1"}
    assert data["cars0"] == data["cars1"]


def test_add_data_none_and_no_suffix(cars: pl.DataFrame) -> None:
    vis = visualise(cars)
    assert add_data(vis, None) is vis
    assert add_data(vis, cars, name="exact", add_suffix=False).cur_data.id == "exact"


def test_add_data_rejects_taken_or_empty_ids() -> None:
    first = pl.DataFrame({"x": [1, 2], "y": [1, 2]})
    other = pl.DataFrame({"x": [100, 200], "y": [100, 200]})
    vis = visualise(first, pl.col("x"), pl.col("y"), name="d").pipe(layer_points)

    with pytest.raises(InvalidArgumentError):
        add_data(vis, other, "d0", add_suffix=False)
    with pytest.raises(InvalidArgumentError):
        add_data(vis, other, "", add_suffix=False)
    assert list(vis.data) == ["d0"]
    assert resolve(vis).data["d0"] == [{"x": 1, "y": 1}, {"x": 2, "y": 2}]


def test_suffixed_ids_cannot_collide(cars: pl.DataFrame) -> None:
    vis = visualise(cars, name="d1")
    for _ in range(9):
        vis = add_data(vis, cars, "filler")
    assert len(vis.data) == 10
    with pytest.raises(InvalidArgumentError):
        add_data(vis, cars, "d")


def test_register_computation_rejects_taken_id(cars: pl.DataFrame) -> None:
    vis = add_data(visualise(cars, name="a"), cars, "a0/head2", add_suffix=False)
    vis.cur_data = vis.data["a0"]

    with pytest.raises(InvalidArgumentError):
        register_computation(vis, {}, "head", lambda d, a: d.head(1))
    assert list(vis.data) == ["a0", "a0/head2"]


def test_mark_is_immutable_after_later_props(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg")).pipe(layer_points)
    before = resolve(vis).marks[0]

    later = add_props(vis, fill="red", y=pl.col("cyl"))

    assert resolve(later).marks[0] == before
    assert later.marks[0] is vis.marks[0]
    assert [p.key_str for p in later.cur_props] == ["x", "y", "fill"]


def test_add_props_inherit_false_replaces(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"))
    vis = add_props(vis, pl.col("cyl"), inherit=False)
    assert [p.key_str for p in vis.cur_props] == ["x"]
    assert list(vis.props) == ["props0", "props1"]


def test_add_props_with_propset(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"))
    vis = add_props(vis, propset=props(y=pl.col("mpg")), fill="red")
    assert [p.key_str for p in vis.cur_props] == ["x", "y", "fill"]


def test_failed_call_leaves_builder_untouched(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg")).pipe(layer_points)
    props_before = vis.cur_props

    with pytest.raises(InvalidArgumentError):
        add_props(vis, pl.col("a"), pl.col("b"), pl.col("c"))
    with pytest.raises(InvalidArgumentError):
        add_mark(vis, "bar")

    assert vis.cur_props is props_before
    assert len(vis.marks) == 1
    assert list(vis.props) == ["props0", "props1"]


def test_branching_from_one_base(cars: pl.DataFrame) -> None:
    base = visualise(cars, pl.col("wt"), pl.col("mpg"))
    points = layer_points(base)
    lines = layer_lines(base)

    assert base.marks == []
    assert [m.type for m in points.marks] == [MarkType.POINT]
    assert [m.type for m in lines.marks] == [MarkType.LINE]
    assert "data0/arrange1" not in points.data


def test_add_mark_scopes_data_and_props_to_the_mark(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"))
    other = cars.head(3)

    out = add_mark(vis, "point", props(fill="red"), data=other)

    assert out.cur_data is vis.cur_data
    assert out.cur_props is vis.cur_props
    (mark,) = out.marks
    assert mark.data.id == "unnamed_data1"
    assert mark.data.frame().height == 3
    assert [p.key_str for p in mark.props] == ["x", "y", "fill"]
    assert [s for s in out.scale_info] == ["x", "y"]


def test_register_scale_info_accumulates(cars: pl.DataFrame) -> None:
    vis = visualise(cars)
    vis = register_scale_info(vis, props(pl.col("wt"), size=pl.col("cyl")))
    vis = register_scale_info(vis, props(pl.col("mpg")))
    assert len(vis.scale_info["x"]) == 2
    assert vis.scale_info["size"][0].domain == [4, 8]


def test_register_reactive_is_idempotent(cars: pl.DataFrame) -> None:
    n = source(5, label="n_points")
    vis = register_reactive(register_reactive(visualise(cars), n), n)
    assert list(vis.reactives) == [n.id]

    def make():
        return reactive(lambda: read(n) + 1)

    vis = register_reactives(vis, [make(), make(), "not reactive"])
    assert len(vis.reactives) == 2


def test_register_reactive_rejects_plain_values(cars: pl.DataFrame) -> None:
    with pytest.raises(InvalidArgumentError):
        register_reactive(visualise(cars), 3)


def test_broker_controls_recorded_once(cars: pl.DataFrame) -> None:
    size = input_slider(10, 100, value=40, id="size")
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"), size=size)
    vis = add_props(vis, size=size)
    vis = register_computation(vis, {"size": size}, "noop")

    assert list(vis.reactives) == [size.id]
    assert len(vis.controls) == 1
    assert vis.controls[0]["id"] == "size"
    assert len(vis.connectors) == 1
    assert vis.handlers == []
    assert get_reactive(vis, size.id) is size


def test_get_reactive_missing_raises(cars: pl.DataFrame) -> None:
    with pytest.raises(MissingDependencyError):
        get_reactive(visualise(cars), "reactive_00000000")


def test_register_computation_ids_and_caching(cars: pl.DataFrame) -> None:
    calls: list[int] = []

    def head(data, args):
        calls.append(1)
        return data.head(args["n"])

    vis = register_computation(visualise(cars, name="cars"), {"n": 2}, "head", head)
    vis = register_computation(vis, {"n": 1}, "head", head)

    assert list(vis.data) == ["cars0", "cars0/head1", "cars0/head1/head2"]
    assert vis.cur_data.frame().height == 1
    vis.cur_data.frame()
    assert len(calls) == 2


def test_register_computation_reactive_parent(cars: pl.DataFrame) -> None:
    data = source(cars, label="cars_src")
    vis = visualise(data, name="cars")
    vis = register_computation(vis, {}, "count", lambda d, a: d.select(pl.len()))

    assert data.id in vis.reactives
    assert vis.cur_data.is_reactive
    assert vis.cur_data.frame().item() == 8
    data.set(cars.head(2))
    assert vis.cur_data.frame().item() == 2


def test_register_computation_needs_data() -> None:
    with pytest.raises(InvalidArgumentError):
        register_computation(visualise(), {}, "head", lambda d, a: d)


def test_options_from_settings_and_overrides(cars: pl.DataFrame) -> None:
    vis = visualise(cars, settings=VisSettings(width=300, padding=5))
    assert vis.options == {
        "width": 300,
        "height": 400,
        "padding": 5,
        "renderer": "svg",
        "duration": 250,
    }
    assert set_options(vis, width=100).options["width"] == 100
    assert set_options(vis, replace=False, width=100).options["width"] == 300
    assert add_options(vis, {"renderer": "canvas"}).options["renderer"] == "canvas"
    assert vis.options["width"] == 300


def test_pipe_and_repr(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg")).pipe(layer_points, fill="red")
    assert isinstance(vis, Visualisation)
    assert "marks=1" in repr(vis)


def test_non_visualisation_argument_raises() -> None:
    with pytest.raises(InvalidArgumentError):
        add_props("not a vis", fill="red")
