"""
Post-hoc form scoring of a repetition (or a held pose) against threshold bounds.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from fitness_ai.models import Phase

NO_THRESHOLDS_MESSAGE = "No thresholds available for this exercise"
NOT_DEEP_ENOUGH_MESSAGE = "Go deeper"


@dataclass
class Verdict:
    """Outcome of a correctness check; ``reason`` explains a failure."""
    is_correct: bool
    reason: Optional[str] = None


class CorrectnessEvaluator:
    """Checks buffered metric frames against ``<metric>_min``/``<metric>_max`` bounds.

    A metric value of exactly 0 means the metric was not observed in that
    frame and is never held against the bound.
    """

    def evaluate(
        self,
        frames: Iterable[Mapping[str, float]],
        bounds: Mapping[str, float],
        max_state: Optional[Phase] = None
    ) -> Verdict:
        """Score frames against bounds.

        Args:
            frames: Metric sets captured during the repetition
            bounds: First threshold entry for the exercise/difficulty
            max_state: Deepest phase reached; when given, the rep must
                have reached at least HOLD to count as correct

        Returns:
            Verdict with the first failure reason, if any
        """
        if not bounds:
            return Verdict(False, NO_THRESHOLDS_MESSAGE)

        frames = list(frames)
        if not frames:
            return Verdict(False, "No frames captured for this repetition")

        violation = self._first_violation(frames, bounds)
        if violation is not None:
            return Verdict(False, violation)
        if max_state is not None and max_state < Phase.HOLD:
            return Verdict(False, NOT_DEEP_ENOUGH_MESSAGE)
        return Verdict(True)

    @staticmethod
    def _first_violation(frames, bounds) -> Optional[str]:
        for metrics in frames:
            for key, limit in bounds.items():
                if key.endswith('_min'):
                    metric, too = key[:-len('_min')], 'low'
                elif key.endswith('_max'):
                    metric, too = key[:-len('_max')], 'high'
                else:
                    continue

                value = metrics.get(metric, 0.0)
                if value == 0:
                    continue
                if (too == 'low' and value < limit) or (too == 'high' and value > limit):
                    return f"{metric.replace('_', ' ').capitalize()} too {too}"
        return None
