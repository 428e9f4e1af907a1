"""
Temporal smoothing and trend estimation for per-frame metrics.
Both keep fixed-capacity histories; the oldest entry is evicted on overflow.
"""

from collections import deque
from typing import Deque, Dict, Mapping

import numpy as np

from fitness_ai import config


class MetricSmoother:
    """Moving average over the last few raw metric sets.

    A key is averaged only over the buffered frames that contain it, so
    intermittently observed metrics are not dragged towards zero.
    """

    def __init__(self, window: int = config.SMOOTHING_WINDOW) -> None:
        self.buffer: Deque[Dict[str, float]] = deque(maxlen=window)

    def __call__(self, metrics: Mapping[str, float]) -> Dict[str, float]:
        self.buffer.append(dict(metrics))
        smoothed = {}
        for key in metrics:
            values = [frame[key] for frame in self.buffer if key in frame]
            smoothed[key] = float(np.mean(values))
        return smoothed

    @property
    def latest(self) -> Dict[str, float]:
        """Most recent raw metric set, or an empty dict."""
        return dict(self.buffer[-1]) if self.buffer else {}


class TrendEstimator:
    """Short-horizon rate of change of the key metric.

    The trend is the mean of the last ``diffs`` first-differences of the
    history. It is only trusted once ``min_samples`` values are buffered.
    """

    def __init__(self, capacity: int = config.TREND_HISTORY,
                 min_samples: int = config.TREND_MIN_SAMPLES,
                 diffs: int = config.TREND_DIFFS) -> None:
        self.history: Deque[float] = deque(maxlen=capacity)
        self.min_samples = int(min_samples)
        self.diffs = int(diffs)

    def push(self, value: float) -> None:
        self.history.append(float(value))

    @property
    def ready(self) -> bool:
        return len(self.history) >= self.min_samples

    def __call__(self) -> float:
        if len(self.history) < 2:
            return 0.0
        differences = np.diff(np.asarray(self.history, dtype=float))
        return float(np.mean(differences[-self.diffs:]))
