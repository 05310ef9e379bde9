"""Price series providers: CSV files, raw aggregate bars, bundled sample."""

from __future__ import annotations

import csv
import json
import logging
from datetime import date, datetime, timezone
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Optional

from goldsim.data.models import PricePoint, PriceSeries

logger = logging.getLogger(__name__)

SAMPLE_DATASET = "sample_gold_daily.csv"


def load_csv(path: str | Path, name: Optional[str] = None) -> PriceSeries:
    path = Path(path)
    with path.open("r", encoding="utf-8", newline="") as handle:
        series = parse_csv_rows(csv.DictReader(handle), name=name or path.stem)
    logger.debug("Loaded %d price points from %s", len(series), path)
    return series


def load_sample_series() -> PriceSeries:
    source = resources.files("goldsim.data").joinpath(SAMPLE_DATASET)
    with source.open("r", encoding="utf-8", newline="") as handle:
        return parse_csv_rows(csv.DictReader(handle), name="sample_gold_daily")


def parse_csv_rows(rows: Iterable[dict[str, Any]], name: str = "series") -> PriceSeries:
    """Build a series from rows with either OHLC columns or a single ``price`` column."""
    points: list[PricePoint] = []
    for line_no, row in enumerate(rows, start=2):
        try:
            day = _parse_date(row["date"])
            if row.get("open") not in (None, ""):
                point = PricePoint(
                    date=day,
                    open=float(row["open"]),
                    high=float(row["high"]),
                    low=float(row["low"]),
                    close=float(row["close"]),
                )
            else:
                point = PricePoint.from_close(day, float(row["price"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid price row {line_no} in {name}: {row}") from exc
        _check_point(point, name)
        points.append(point)
    return PriceSeries.from_points(points, name=name)


def load_bars_json(path: str | Path, name: Optional[str] = None) -> PriceSeries:
    path = Path(path)
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get("results")
    if not isinstance(payload, list):
        raise ValueError(f"Bars file {path} must contain a list or a 'results' list")
    return transform_bars(payload, name=name or path.stem)


def transform_bars(bars: Iterable[dict[str, Any]], name: str = "series") -> PriceSeries:
    """Convert aggregate bars (``o``/``h``/``l``/``c`` with epoch-ms ``t``) to a series."""
    points: list[PricePoint] = []
    for bar in bars:
        try:
            day = datetime.fromtimestamp(int(bar["t"]) / 1000.0, tz=timezone.utc).date()
            point = PricePoint(
                date=day,
                open=float(bar["o"]),
                high=float(bar["h"]),
                low=float(bar["l"]),
                close=float(bar["c"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid bar in {name}: {bar}") from exc
        _check_point(point, name)
        points.append(point)
    return PriceSeries.from_points(points, name=name)


def load_series(source: str, path: Optional[str | Path] = None) -> PriceSeries:
    if source == "sample":
        return load_sample_series()
    if path is None:
        raise ValueError(f"Data source '{source}' requires a path")
    if source == "csv":
        return load_csv(path)
    if source == "bars_json":
        return load_bars_json(path)
    raise ValueError(f"Unknown data source: {source}")


def _parse_date(value: str) -> date:
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        return datetime.strptime(value, "%m/%d/%Y").date()


def _check_point(point: PricePoint, name: str) -> None:
    if min(point.open, point.high, point.low, point.close) <= 0:
        raise ValueError(f"Non-positive price on {point.date} in {name}")
    if point.high < point.low:
        raise ValueError(f"High below low on {point.date} in {name}")
