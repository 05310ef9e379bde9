"""Price series data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Sequence


@dataclass(frozen=True)
class PricePoint:
    date: date
    open: float
    high: float
    low: float
    close: float

    @staticmethod
    def from_close(day: date, price: float) -> "PricePoint":
        return PricePoint(date=day, open=price, high=price, low=price, close=price)


@dataclass(frozen=True)
class PriceSeries:
    """Immutable, chronologically ordered sequence of daily prices."""

    points: tuple[PricePoint, ...]
    name: str = "series"

    def __post_init__(self) -> None:
        for previous, current in zip(self.points, self.points[1:]):
            if current.date < previous.date:
                raise ValueError(
                    f"Price series {self.name} is not chronological: {current.date} after {previous.date}"
                )

    @classmethod
    def from_points(cls, points: Iterable[PricePoint], name: str = "series") -> "PriceSeries":
        ordered = sorted(points, key=lambda point: point.date)
        return cls(points=tuple(ordered), name=name)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> PricePoint:
        return self.points[index]

    @property
    def start_date(self) -> date | None:
        return self.points[0].date if self.points else None

    @property
    def end_date(self) -> date | None:
        return self.points[-1].date if self.points else None

    def closes(self) -> list[float]:
        return [point.close for point in self.points]

    def between(self, start: date | None = None, end: date | None = None) -> "PriceSeries":
        selected: Sequence[PricePoint] = [
            point
            for point in self.points
            if (start is None or point.date >= start) and (end is None or point.date <= end)
        ]
        return PriceSeries(points=tuple(selected), name=self.name)
