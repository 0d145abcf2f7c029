"""Tests for capacity-bounded gas price series."""

import pytest
from gaswatch.models import GasSample
from gaswatch.series import SeriesWindow


def _sample(i: int) -> GasSample:
    return GasSample(low=float(i), avg=float(i + 1), high=float(i + 2), timestamp=f"t{i}")


def test_series_lengths_stay_equal():
    """Test that all four sequences grow together up to capacity."""
    window = SeriesWindow(5)
    for n in range(1, 9):
        window.append_sample(_sample(n))
        expected = min(n, 5)
        assert len(window.labels) == expected
        assert len(window.low) == expected
        assert len(window.avg) == expected
        assert len(window.high) == expected


def test_series_fifo_eviction():
    """Test that the oldest point is evicted first."""
    window = SeriesWindow(360)
    for n in range(361):
        window.append_sample(_sample(n))

    assert len(window) == 360
    assert "t0" not in window.labels
    assert window.labels[0] == "t1"
    assert window.low[0] == 1.0
    assert window.labels[-1] == "t360"


def test_repeat_last_uses_sentinel_label():
    """Test that a failed fetch repeats the last values under N/A."""
    window = SeriesWindow(10)
    window.append("12:00:00", 10.0, 20.0, 30.0)

    assert window.repeat_last() is True

    snap = window.snapshot()
    assert snap.labels == ("12:00:00", "N/A")
    assert snap.low == (10.0, 10.0)
    assert snap.avg == (20.0, 20.0)
    assert snap.high == (30.0, 30.0)


def test_repeat_last_on_empty_window_is_skipped():
    """Test that repeating on an empty window appends nothing."""
    window = SeriesWindow(10)
    assert window.repeat_last() is False
    assert len(window) == 0
    assert window.snapshot().labels == ()


def test_repeat_last_respects_capacity():
    """Test that repeated points are evicted like any other."""
    window = SeriesWindow(2)
    window.append("a", 1.0, 2.0, 3.0)
    window.repeat_last()
    window.repeat_last()

    assert window.snapshot().labels == ("N/A", "N/A")


def test_snapshot_is_detached():
    """Test that snapshots do not change when the window does."""
    window = SeriesWindow(3)
    window.append("a", 1.0, 2.0, 3.0)
    snap = window.snapshot()
    window.append("b", 4.0, 5.0, 6.0)

    assert len(snap) == 1
    assert snap.to_dict() == {"labels": ["a"], "low": [1.0], "avg": [2.0], "high": [3.0]}


def test_out_of_order_prices_are_tolerated():
    """Test that low > high is stored as-is."""
    window = SeriesWindow(3)
    window.append_sample(GasSample(low=30.0, avg=20.0, high=10.0, timestamp="x"))
    assert window.low[-1] == 30.0
    assert window.high[-1] == 10.0


def test_invalid_capacity():
    """Test that a non-positive capacity is rejected."""
    with pytest.raises(ValueError):
        SeriesWindow(0)
