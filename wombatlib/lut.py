"""Piecewise-linear lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class LUTPoint:
    """One recorded sample of the table."""

    x: float = 0.0
    y: float = 0.0


class LUT:
    """Estimates ``y`` for any ``x`` by interpolating between recorded points.

    Points are expected in ascending ``x`` order. Values outside the recorded
    range are clamped to the nearest end point.
    """

    def __init__(self, points: Iterable[LUTPoint]) -> None:
        self._points = list(points)

    @property
    def points(self) -> list[LUTPoint]:
        return list(self._points)

    def estimate(self, x: float) -> float:
        points = self._points
        if not points:
            return 0.0
        if len(points) == 1:
            return points[0].y

        first, last = points[0], points[-1]
        if x < first.x:
            return first.y
        if x > last.x:
            return last.y

        for previous, point in zip(points, points[1:]):
            if point.x >= x:
                slope = (point.y - previous.y) / (point.x - previous.x)
                return slope * (x - previous.x) + previous.y
        return last.y