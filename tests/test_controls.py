import polars as pl
import pytest

from visgram import input_checkbox, input_select, input_slider, layer_points, resolve, visualise
from visgram.core.errors import InvalidArgumentError
from visgram.reactive import read


def test_slider_defaults_to_midpoint_and_describes_itself() -> None:
    s = input_slider(0, 10, step=1, label="Size", id="size_slider")
    assert read(s) == 5
    (control,) = s.broker.controls
    assert control == {
        "type": "slider",
        "label": "Size",
        "min": 0,
        "max": 10,
        "value": 5,
        "step": 1,
        "id": "size_slider",
    }


def test_slider_connect_updates_value() -> None:
    s = input_slider(0, 10, value=2)
    s.broker.connect(7)
    assert read(s) == 7


def test_slider_rejects_bad_bounds() -> None:
    with pytest.raises(InvalidArgumentError):
        input_slider(5, 5)
    with pytest.raises(InvalidArgumentError):
        input_slider(0, 10, value=11)


def test_mapped_control_is_derived() -> None:
    s = input_slider(1, 10, value=2, id="mapped", map=lambda v: v * 10)
    assert read(s) == 20
    s.broker.connect(3)
    assert read(s) == 30
    with pytest.raises(TypeError):
        s.set(4)


def test_select_choices() -> None:
    s = input_select({"Red": "red", "Blue": "blue"}, label="Colour")
    assert read(s) == "red"
    assert s.broker.controls[0]["choices"] == [
        {"label": "Red", "value": "red"},
        {"label": "Blue", "value": "blue"},
    ]

    s = input_select(["a", "b"], selected="b")
    assert read(s) == "b"

    with pytest.raises(InvalidArgumentError):
        input_select(["a", "b"], selected="c")
    with pytest.raises(InvalidArgumentError):
        input_select([])


def test_checkbox() -> None:
    c = input_checkbox(label="Show", map=lambda on: 1.0 if on else 0.2)
    assert read(c) == 0.2
    c.broker.connect(True)
    assert read(c) == 1.0
    assert c.broker.controls[0]["type"] == "checkbox"


def test_control_drives_resolved_spec(cars: pl.DataFrame) -> None:
    size = input_slider(10, 100, value=40, id="point_size")
    vis = visualise(cars, pl.col("wt"), pl.col("mpg"), size=size).pipe(layer_points)

    assert vis.controls == [dict(size.broker.controls[0])]
    assert resolve(vis).marks[0].properties["update"]["size"] == {"value": 40}

    vis.connectors[0](80)
    assert resolve(vis).marks[0].properties["update"]["size"] == {"value": 80}
