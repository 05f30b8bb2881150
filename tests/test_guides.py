import polars as pl
import pytest

from visgram import add_axis, add_legend, hide_axis, hide_legend, layer_points, visualise
from visgram.core.errors import InvalidArgumentError
from visgram.guides import Axis, Legend


@pytest.fixture
def vis(cars: pl.DataFrame):
    return visualise(cars, pl.col("wt"), pl.col("mpg"), fill=pl.col("cyl")).pipe(layer_points)


def test_add_axis_records_descriptor(vis) -> None:
    out = add_axis(vis, "y", orient="right", title="Miles per gallon", grid=False)
    assert vis.axes == []
    assert out.axes == [
        Axis(type="y", scale="y", orient="right", title="Miles per gallon", grid=False)
    ]


def test_add_axis_rejects_unknown_type(vis) -> None:
    with pytest.raises(InvalidArgumentError):
        add_axis(vis, "z")
    with pytest.raises(InvalidArgumentError):
        hide_axis(vis, "fill")


def test_hide_axis(vis) -> None:
    (axis,) = hide_axis(vis, "x").axes
    assert axis.hide and axis.scale == "x"


def test_legend_channel_forms(vis) -> None:
    assert add_legend(vis, "fill").legends[0].scales == {"fill": "fill"}
    assert add_legend(vis, ["fill", "size"]).legends[0].scales == {"fill": "fill", "size": "size"}
    assert add_legend(vis, {"fill": "colour"}).legends[0].scales == {"fill": "colour"}


def test_legend_rejects_unknown_channels(vis) -> None:
    with pytest.raises(InvalidArgumentError):
        add_legend(vis, "x")
    with pytest.raises(InvalidArgumentError):
        add_legend(vis, [])


def test_hide_legend(vis) -> None:
    out = hide_legend(vis, "fill")
    assert out.legends == [Legend(scales={"fill": "fill"}, hide=True)]
