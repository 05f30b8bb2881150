import polars as pl
import pytest

from visgram import (
    layer_arcs,
    layer_images,
    layer_lines,
    layer_paths,
    layer_points,
    layer_rects,
    layer_ribbons,
    layer_text,
    resolve,
    visualise,
)
from visgram.core.errors import InvalidArgumentError


def test_layer_functions_mark_types(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"))
    for fn, expected in [
        (layer_points, "symbol"),
        (layer_paths, "line"),
        (layer_rects, "rect"),
        (layer_text, "text"),
        (layer_ribbons, "area"),
        (layer_arcs, "arc"),
        (layer_images, "image"),
    ]:
        spec = resolve(fn(vis)).to_dict()
        assert spec["marks"][0]["type"] == expected, fn.__name__


def test_layer_kwargs_apply_to_new_mark_only(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"))
    vis = layer_points(vis, fill="red")
    vis = layer_points(vis)
    first, second = ([p.name for p in m.props] for m in vis.marks)
    assert "fill" in first and "fill" not in second


def test_layer_lines_sorts_by_x(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"), name="cars").pipe(layer_lines, stroke="red")

    spec = resolve(vis).to_dict()
    assert list(spec["data"]) == ["cars0", "cars0/arrange1"]
    (mark,) = spec["marks"]
    assert mark["type"] == "line"
    assert mark["from"] == {"data": "cars0/arrange1"}
    wts = [row["wt"] for row in spec["data"]["cars0/arrange1"]]
    assert wts == sorted(wts)
    assert vis.cur_data.id == "cars0"


def test_layer_lines_with_own_data(cars: pl.DataFrame) -> None:
    other = pl.DataFrame({"wt": [3.0, 1.0], "mpg": [1.0, 2.0]})
    vis = visualise(cars, pl.col("wt"), pl.col("mpg")).pipe(layer_lines, data=other)

    assert list(vis.data) == ["data0", "unnamed_data1", "unnamed_data1/arrange2"]
    rows = resolve(vis).data["unnamed_data1/arrange2"]
    assert [r["wt"] for r in rows] == [1.0, 3.0]
    assert vis.cur_data.id == "data0"


def test_layer_lines_needs_field_x(cars: pl.DataFrame) -> None:
    with pytest.raises(InvalidArgumentError):
        layer_lines(visualise(cars, y=pl.col("mpg")))
    with pytest.raises(InvalidArgumentError):
        layer_lines(visualise(cars, x=1, y=pl.col("mpg")))


def test_stroke_mapping_gets_legend(cars: pl.DataFrame) -> None:
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"), stroke=pl.col("name"))
    spec = resolve(layer_paths(vis)).to_dict()
    stroke = next(s for s in spec["scales"] if s["name"] == "stroke")
    assert stroke["type"] == "ordinal"
    assert stroke["range"] == "category10"
    assert spec["legends"] == [{"stroke": "stroke", "title": "name"}]
