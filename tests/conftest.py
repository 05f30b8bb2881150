from __future__ import annotations

import polars as pl
import pytest


@pytest.fixture(autouse=True)
def _no_visgram_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in [
        "VISGRAM_WIDTH",
        "VISGRAM_HEIGHT",
        "VISGRAM_PADDING",
        "VISGRAM_RENDERER",
        "VISGRAM_DURATION",
        "VISGRAM_JSON_INDENT",
        "VISGRAM_LOG_LEVEL",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cars() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "wt": [2.62, 2.875, 2.32, 3.215, 3.44, 3.46, 3.57, 3.19],
            "mpg": [21.0, 21.0, 22.8, 21.4, 18.7, 18.1, 14.3, 24.4],
            "cyl": [6, 6, 4, 6, 8, 6, 8, 4],
            "am": [1, 1, 1, 0, 0, 0, 0, 0],
            "name": [
                "mazda",
                "mazda_wag",
                "datsun",
                "hornet",
                "sportabout",
                "valiant",
                "duster",
                "merc",
            ],
        }
    )
