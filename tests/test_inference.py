from datetime import date, datetime

import polars as pl
import pytest

from visgram.core.errors import InvalidScaleRangeError
from visgram.core.grammar import ScaleType
from visgram.data import Dataset
from visgram.inference import data_range, infer_scale_info, range_prop, to_epoch_ms, vector_type
from visgram.props import props, unscaled
from visgram.reactive import is_reactive, source


@pytest.mark.parametrize(
    ("series", "expected"),
    [
        (pl.Series([1, 2]), ScaleType.NUMERIC),
        (pl.Series([1.5, 2.0]), ScaleType.NUMERIC),
        (pl.Series(["a", "b"]), ScaleType.NOMINAL),
        (pl.Series([True, False]), ScaleType.LOGICAL),
        (pl.Series([date(2024, 1, 1)]), ScaleType.DATETIME),
        (pl.Series([datetime(2024, 1, 1, 12)]), ScaleType.DATETIME),
        (pl.Series(["a", "b"], dtype=pl.Categorical), ScaleType.ORDINAL),
        (pl.Series(["lo"], dtype=pl.Enum(["lo", "hi"])), ScaleType.ORDINAL),
    ],
)
def test_vector_type(series: pl.Series, expected: ScaleType) -> None:
    assert vector_type(series) is expected


def test_data_range_numeric_drops_missing() -> None:
    assert data_range(pl.Series([3.0, float("nan"), None, 1.0])) == [1.0, 3.0]
    assert data_range(pl.Series([None, None], dtype=pl.Float64)) == []


def test_data_range_discrete_first_appearance() -> None:
    assert data_range(pl.Series(["b", "a", "b", None, "c"])) == ["b", "a", "c"]
    assert data_range(pl.Series([True, False, True])) == [True, False]


def test_data_range_enum_uses_category_order() -> None:
    s = pl.Series(["hi", "lo"], dtype=pl.Enum(["lo", "mid", "hi"]))
    assert data_range(s) == ["lo", "mid", "hi"]


def test_data_range_dates_as_epoch_ms() -> None:
    s = pl.Series([date(1970, 1, 3), date(1970, 1, 2)])
    assert data_range(s) == [86_400_000, 172_800_000]
    assert to_epoch_ms(date(1970, 1, 2)) == 86_400_000
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1)) == 1000
    assert to_epoch_ms("x") == "x"


def test_range_prop_partial_numeric_constraints() -> None:
    assert range_prop([None, 5], "domain") == {"domainMax": 5}
    assert range_prop([1, None], "domain") == {"domainMin": 1}
    assert range_prop([None, None], "domain") == {}
    assert range_prop([1, 5], "domain") == {"domain": [1, 5]}
    assert range_prop([float("nan"), 5], "range") == {"rangeMax": 5}


def test_range_prop_character_passthrough() -> None:
    assert range_prop("width", "range") == {"range": "width"}
    assert range_prop(["a", "b", "c"], "domain") == {"domain": ["a", "b", "c"]}
    assert range_prop(None, "domain") == {}
    assert range_prop(3, "domain") == {"domain": [3]}


@pytest.mark.parametrize("bad", [[1, 2, 3], [{"a": 1}], [1, "a"], object(), [True, False]])
def test_range_prop_rejects_malformed(bad) -> None:
    with pytest.raises(InvalidScaleRangeError):
        range_prop(bad, "domain")


def test_infer_scale_info_skips_unscaled_and_aliases(cars: pl.DataFrame) -> None:
    ds = Dataset.wrap("cars0", cars)
    p = props(pl.col("wt"), fill="red", size=unscaled(pl.col("mpg")), x2=pl.col("wt") + 1)

    infos = infer_scale_info(p, ds)

    assert [scale for scale, _ in infos] == ["x", "x"]
    first = infos[0][1]
    assert first.type is ScaleType.NUMERIC
    assert first.domain == [2.32, 3.57]
    assert first.label == "wt"
    assert first.override is False


def test_infer_scale_info_without_data() -> None:
    assert infer_scale_info(props(pl.col("wt")), None) == []


def test_infer_scale_info_reactive_data_has_lazy_domain(cars: pl.DataFrame) -> None:
    data = source(cars, label="cars_data")
    ds = Dataset.wrap("cars0", data)

    ((scale, info),) = infer_scale_info(props(pl.col("mpg")), ds)

    assert scale == "x"
    assert is_reactive(info.domain)
    assert info.domain_value() == [14.3, 24.4]
    data.set(cars.with_columns(pl.col("mpg") * 2))
    assert info.domain_value() == [28.6, 48.8]
