"""Aggregation engine owning the short and long gas price windows."""

from datetime import datetime
from typing import Callable, List, Optional

from .aggregation import HourAggregator, MinuteAggregator
from .constants import (
    DEFAULT_LONG_CAPACITY,
    DEFAULT_LONG_COUNTDOWN_SECS,
    DEFAULT_POLL_SECS,
    DEFAULT_SHORT_CAPACITY,
    LABEL_TIME_FORMAT,
    NA_LABEL,
)
from .logging import get_logger
from .models import AveragedPoint, EngineEvent, GasSample
from .series import SeriesWindow

logger = get_logger(__name__)

Subscriber = Callable[[EngineEvent], None]


class Countdown:
    """Seconds remaining until a window's next scheduled update."""

    def __init__(self, period: int):
        if period <= 0:
            raise ValueError("countdown period must be positive")
        self.period = period
        self.remaining = period

    def tick(self) -> int:
        """Decrement by one second; a countdown at zero wraps back to the full period."""
        self.remaining = self.remaining - 1 if self.remaining > 0 else self.period
        return self.remaining

    def reset(self) -> None:
        self.remaining = self.period


class AggregationEngine:
    """
    Turns the raw poll stream into a 1 hour series of samples and a long
    series of hourly averages.

    The engine never schedules anything itself. The host calls
    ``record_sample``/``record_failure`` on every poll, ``flush_minute``
    every 60 seconds, ``flush_hour`` every hour and ``tick_countdown`` every
    second.
    """

    def __init__(
        self,
        short_capacity: int = DEFAULT_SHORT_CAPACITY,
        long_capacity: int = DEFAULT_LONG_CAPACITY,
        poll_secs: int = DEFAULT_POLL_SECS,
        long_countdown_secs: int = DEFAULT_LONG_COUNTDOWN_SECS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize engine state.

        Args:
            short_capacity: Maximum raw samples kept for the short view
            long_capacity: Maximum hourly points kept for the long view
            poll_secs: Period of the short view countdown
            long_countdown_secs: Period of the long view countdown
            clock: Wall-clock source used for point labels
        """
        self.short_window = SeriesWindow(short_capacity)
        self.long_window = SeriesWindow(long_capacity)
        self.minute = MinuteAggregator()
        self.hour = HourAggregator()
        self.short_countdown = Countdown(poll_secs)
        self.long_countdown = Countdown(long_countdown_secs)
        self.seeded = False
        self._clock = clock
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        """Register a callback invoked after every state change."""
        self._subscribers.append(callback)

    def _notify(self, event: EngineEvent) -> None:
        for callback in self._subscribers:
            callback(event)

    def label_now(self) -> str:
        return self._clock().strftime(LABEL_TIME_FORMAT)

    def record_sample(self, sample: GasSample) -> bool:
        """
        Feed one successfully fetched sample into both windows' pipelines.

        Args:
            sample: Raw oracle reading

        Returns:
            True if the sample was appended, False if it was incomplete and skipped
        """
        self.short_countdown.reset()

        if not sample.is_complete:
            logger.debug(f"Skipping incomplete gas sample at {sample.timestamp}: {sample}")
            return False

        self.short_window.append_sample(sample)

        if not self.seeded:
            self.seeded = True
            self.long_window.append_sample(sample)
            logger.info(f"Seeded long window with first sample at {sample.timestamp}")
            self._notify(EngineEvent("seed"))

        self.minute.add(sample)
        self._notify(EngineEvent("sample"))
        return True

    def record_failure(self) -> bool:
        """
        Extend the short window after a failed fetch by repeating the last values
        under the "N/A" label.

        Returns:
            False if the short window was still empty and the tick was skipped
        """
        if not self.short_window.repeat_last(NA_LABEL):
            logger.debug("Fetch failed before any sample arrived; skipping tick")
            return False
        self._notify(EngineEvent("failure"))
        return True

    def flush_minute(self) -> Optional[AveragedPoint]:
        """Average this minute's samples and hand the point to the hour aggregator."""
        point = self.minute.flush(self.label_now())
        if point is None:
            logger.debug("No samples this minute; nothing to flush")
            return None

        self.hour.add(point)
        logger.debug(
            f"Minute flush: low={point.low:.3f} avg={point.avg:.3f} high={point.high:.3f} "
            f"({self.hour.count} minutes this hour)"
        )
        self._notify(EngineEvent("minute", point))
        return point

    def flush_hour(self) -> Optional[AveragedPoint]:
        """Average this hour's minute points into the long window."""
        point = self.hour.flush(self.label_now())
        if point is None:
            logger.debug("No minute averages this hour; nothing to flush")
            return None

        self.long_window.append_point(point)
        self.long_countdown.reset()
        logger.info(
            f"Hourly point {point.timestamp}: low={point.low:.3f} avg={point.avg:.3f} "
            f"high={point.high:.3f} ({len(self.long_window)} pts)"
        )
        self._notify(EngineEvent("hour", point))
        return point

    def tick_countdown(self) -> None:
        self.short_countdown.tick()
        self.long_countdown.tick()
