"""Tests for view selection."""

from datetime import datetime
import pytest
from gaswatch.engine import AggregationEngine
from gaswatch.models import GasSample
from gaswatch.view import View, ViewSelector


def _engine() -> AggregationEngine:
    engine = AggregationEngine(clock=lambda: datetime(2024, 1, 1, 13, 0, 0))
    engine.record_sample(GasSample(low=1.0, avg=2.0, high=3.0, timestamp="12:00:00"))
    engine.record_sample(GasSample(low=3.0, avg=4.0, high=5.0, timestamp="12:00:10"))
    return engine


def test_initial_view_is_short():
    """Test that the selector starts on the 1 hour view."""
    selector = ViewSelector(_engine())
    snap = selector.snapshot()

    assert snap.view is View.SHORT
    assert snap.labels == ("12:00:00", "12:00:10")
    assert snap.countdown_seconds == 10


def test_select_long_view():
    """Test switching to the long view exposes the long window."""
    engine = _engine()
    selector = ViewSelector(engine)
    selector.select("24hour")
    snap = selector.snapshot()

    assert snap.view is View.LONG
    assert snap.labels == ("12:00:00",)
    assert snap.countdown_seconds == 600

    selector.select(View.SHORT)
    assert selector.snapshot().view is View.SHORT


def test_snapshot_does_not_mutate_engine():
    """Test that reading snapshots leaves aggregation state untouched."""
    engine = _engine()
    selector = ViewSelector(engine, View.LONG)
    selector.snapshot()
    selector.snapshot()

    assert engine.minute.count == 2
    assert len(engine.long_window) == 1


def test_unknown_view_rejected():
    """Test that an unknown view name raises."""
    selector = ViewSelector(_engine())
    with pytest.raises(ValueError):
        selector.select("7day")
    assert selector.active is View.SHORT


def test_snapshot_to_dict():
    """Test the renderer-facing dict form."""
    selector = ViewSelector(_engine())
    data = selector.snapshot().to_dict()
    assert data["view"] == "1hour"
    assert data["avg"] == [2.0, 4.0]
    assert data["countdown_seconds"] == 10
