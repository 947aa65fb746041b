"""Projection of the window buffer onto what a chart displays"""
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

from peakstream.models.schemas import Reading


class SeriesPoint(NamedTuple):
    timestamp: int
    value: float


@dataclass(frozen=True)
class ChartView:
    visible: tuple[Reading, ...]
    highest: Optional[float]
    secondary: tuple[SeriesPoint, ...]

    @property
    def primary(self) -> tuple[SeriesPoint, ...]:
        return tuple(SeriesPoint(p.timestamp, p.value) for p in self.visible)


def project_view(points: Sequence[Reading], width: int) -> ChartView:
    """
    Keep the last `width` points and derive the peak series.

    The peak series is an indicator: a point with a non-zero z-score is
    drawn at the highest value in view, every other point at 0. The
    magnitude of the z-score is not shown.
    """
    start = max(len(points) - width, 0)
    visible = tuple(points[start:])
    if not visible:
        return ChartView(visible=(), highest=None, secondary=())

    highest = max(p.value for p in visible)
    secondary = tuple(
        SeriesPoint(p.timestamp, highest if p.zscore else 0)
        for p in visible
    )
    return ChartView(visible=visible, highest=highest, secondary=secondary)
