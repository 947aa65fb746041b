"""Bounded sliding window of received readings"""
from dataclasses import dataclass
from typing import Iterator, Optional

from peakstream.models.schemas import Reading


@dataclass(frozen=True)
class WindowBuffer:
    """
    Immutable window of the most recent readings, oldest first.
    `append` returns a new buffer trimmed to `capacity`, so a view taken
    from one buffer never changes when later readings arrive.
    """
    capacity: int
    points: tuple[Reading, ...] = ()

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if len(self.points) > self.capacity:
            object.__setattr__(self, "points", tuple(self.points[-self.capacity:]))

    def append(self, reading: Reading) -> "WindowBuffer":
        points = self.points + (reading,)
        overflow = max(len(points) - self.capacity, 0)
        return WindowBuffer(self.capacity, points[overflow:])

    def clear(self) -> "WindowBuffer":
        return WindowBuffer(self.capacity)

    @property
    def last(self) -> Optional[Reading]:
        return self.points[-1] if self.points else None

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self.points)
