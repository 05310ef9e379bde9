"""Price series provider."""

from goldsim.data.loader import (
    load_bars_json,
    load_csv,
    load_sample_series,
    load_series,
    parse_csv_rows,
    transform_bars,
)
from goldsim.data.models import PricePoint, PriceSeries

__all__ = [
    "PricePoint",
    "PriceSeries",
    "load_bars_json",
    "load_csv",
    "load_sample_series",
    "load_series",
    "parse_csv_rows",
    "transform_bars",
]
