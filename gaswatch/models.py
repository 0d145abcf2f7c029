"""Value types passed between the sampling and aggregation stages."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class GasSample:
    """One raw reading from the gas oracle, prices in Gwei."""
    low: float
    avg: float
    high: float
    timestamp: str                     # wall-clock label, e.g. "14:05:30"
    base_fee: Optional[float] = None   # suggested base fee, if the oracle sent one

    @property
    def is_complete(self) -> bool:
        """True when all three tier prices are non-zero."""
        return bool(self.low and self.avg and self.high)


@dataclass(frozen=True)
class AveragedPoint:
    """Mean of a batch of samples or of lower-level averages."""
    timestamp: str
    low: float
    avg: float
    high: float


@dataclass(frozen=True)
class SeriesSnapshot:
    """Read-only copy of a window's four parallel sequences."""
    labels: Tuple[str, ...]
    low: Tuple[float, ...]
    avg: Tuple[float, ...]
    high: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.labels)

    def to_dict(self) -> dict:
        return {
            "labels": list(self.labels),
            "low": list(self.low),
            "avg": list(self.avg),
            "high": list(self.high),
        }


@dataclass(frozen=True)
class EngineEvent:
    """Notification sent to subscribers after the engine changes state."""
    kind: str                                # "sample", "failure", "minute", "hour", "seed"
    point: Optional[AveragedPoint] = None
