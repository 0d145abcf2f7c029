"""Minute and hour downsampling of the raw gas price stream."""

from typing import List, Optional

from .models import AveragedPoint, GasSample


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


class MinuteAggregator:
    """Buffers raw samples for the current minute and averages them on flush."""

    def __init__(self):
        self.low: List[float] = []
        self.avg: List[float] = []
        self.high: List[float] = []

    @property
    def count(self) -> int:
        return len(self.low)

    def add(self, sample: GasSample) -> None:
        self.low.append(sample.low)
        self.avg.append(sample.avg)
        self.high.append(sample.high)

    def flush(self, timestamp: str) -> Optional[AveragedPoint]:
        """
        Average the buffered samples and reset.

        Args:
            timestamp: Label for the emitted point

        Returns:
            Averaged point, or None if no sample arrived this minute (state unchanged)
        """
        if not self.low:
            return None

        point = AveragedPoint(
            timestamp=timestamp,
            low=_mean(self.low),
            avg=_mean(self.avg),
            high=_mean(self.high),
        )
        self.low = []
        self.avg = []
        self.high = []
        return point


class HourAggregator:
    """Running sums of per-minute averages, flushed into one point per hour."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.sum_low = 0.0
        self.sum_avg = 0.0
        self.sum_high = 0.0
        self.count = 0

    def add(self, point: AveragedPoint) -> None:
        self.sum_low += point.low
        self.sum_avg += point.avg
        self.sum_high += point.high
        self.count += 1

    def flush(self, timestamp: str) -> Optional[AveragedPoint]:
        """
        Emit the mean of the accumulated minute averages and reset.

        Args:
            timestamp: Wall-clock label for the emitted point

        Returns:
            Averaged point, or None if nothing accumulated this hour (state unchanged)
        """
        if self.count == 0:
            return None

        point = AveragedPoint(
            timestamp=timestamp,
            low=self.sum_low / self.count,
            avg=self.sum_avg / self.count,
            high=self.sum_high / self.count,
        )
        self.reset()
        return point
