"""Capacity-bounded gas price series for the 1 hour and 24 hour views."""

from collections import deque
from typing import Deque

from .constants import NA_LABEL
from .models import AveragedPoint, GasSample, SeriesSnapshot


class SeriesWindow:
    """Four parallel FIFO sequences (labels, low, avg, high) with a fixed capacity."""

    def __init__(self, capacity: int):
        """
        Initialize an empty window.

        Args:
            capacity: Maximum number of points retained; older points are evicted first
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.labels: Deque[str] = deque(maxlen=capacity)
        self.low: Deque[float] = deque(maxlen=capacity)
        self.avg: Deque[float] = deque(maxlen=capacity)
        self.high: Deque[float] = deque(maxlen=capacity)

    def append(self, label: str, low: float, avg: float, high: float) -> None:
        """
        Add a point, evicting the oldest one once the window is full.

        Args:
            label: Timestamp label for the point
            low: Low tier price in Gwei
            avg: Average tier price in Gwei
            high: High tier price in Gwei
        """
        self.labels.append(label)
        self.low.append(low)
        self.avg.append(avg)
        self.high.append(high)

    def append_sample(self, sample: GasSample) -> None:
        self.append(sample.timestamp, sample.low, sample.avg, sample.high)

    def append_point(self, point: AveragedPoint) -> None:
        self.append(point.timestamp, point.low, point.avg, point.high)

    def repeat_last(self, label: str = NA_LABEL) -> bool:
        """
        Append a copy of the most recent values under a sentinel label.

        Keeps the plotted series contiguous when a fetch fails.

        Returns:
            False if the window is empty and nothing was appended
        """
        if not self.labels:
            return False
        self.append(label, self.low[-1], self.avg[-1], self.high[-1])
        return True

    def snapshot(self) -> SeriesSnapshot:
        return SeriesSnapshot(
            labels=tuple(self.labels),
            low=tuple(self.low),
            avg=tuple(self.avg),
            high=tuple(self.high),
        )

    def __len__(self) -> int:
        return len(self.labels)
