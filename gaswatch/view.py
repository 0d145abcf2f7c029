"""Read-side selection between the 1 hour and 24 hour gas price views."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .engine import AggregationEngine


class View(str, Enum):
    SHORT = "1hour"
    LONG = "24hour"


@dataclass(frozen=True)
class ViewSnapshot:
    """Everything a renderer needs to draw the active graph."""
    view: View
    labels: Tuple[str, ...]
    low: Tuple[float, ...]
    avg: Tuple[float, ...]
    high: Tuple[float, ...]
    countdown_seconds: int

    def to_dict(self) -> dict:
        return {
            "view": self.view.value,
            "labels": list(self.labels),
            "low": list(self.low),
            "avg": list(self.avg),
            "high": list(self.high),
            "countdown_seconds": self.countdown_seconds,
        }


class ViewSelector:
    """Two-state selector; only an explicit ``select`` changes the view."""

    def __init__(self, engine: AggregationEngine, initial: View = View.SHORT):
        self.engine = engine
        self.active = View(initial)

    def select(self, view) -> View:
        """
        Switch the active view.

        Args:
            view: View member or its value ("1hour" / "24hour")

        Raises:
            ValueError: If view is not a known view
        """
        self.active = View(view)
        return self.active

    def snapshot(self) -> ViewSnapshot:
        if self.active is View.SHORT:
            series = self.engine.short_window.snapshot()
            countdown = self.engine.short_countdown.remaining
        else:
            series = self.engine.long_window.snapshot()
            countdown = self.engine.long_countdown.remaining

        return ViewSnapshot(
            view=self.active,
            labels=series.labels,
            low=series.low,
            avg=series.avg,
            high=series.high,
            countdown_seconds=countdown,
        )
