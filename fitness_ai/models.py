#The code is according to PEP 8 Coding styles standards
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Deque, Dict, List

from fitness_ai import config
from fitness_ai.smoothing import MetricSmoother, TrendEstimator


class Phase(IntEnum):
    """Repetition phases, ordered by depth reached."""
    START = 1
    DOWN = 2
    HOLD = 3
    UP = 4
    COMPLETE = 5  # defined for completeness; reps re-arm at START instead


@dataclass
class ExerciseSession:
    """
    Stores per-exercise session state for rep counting.
    Tracks phase, counters, and the bounded metric histories.
    """
    current_state: Phase = Phase.START  # Phase of the rep in progress
    max_state_reached: Phase = Phase.START  # Deepest phase reached this rep
    rep_count: int = 0  # Completed repetitions
    correct_rep_count: int = 0  # Repetitions that passed every threshold
    rep_logged: bool = False  # Whether the current rep has been scored
    last_rep_correct: bool = True  # Verdict of the most recently scored rep
    smoother: MetricSmoother = field(default_factory=MetricSmoother)
    trend: TrendEstimator = field(default_factory=TrendEstimator)
    rep_frame_buffer: Deque[Dict[str, float]] = field(
        default_factory=lambda: deque(maxlen=config.REP_FRAME_CAPACITY))
    messages: List[str] = field(default_factory=list)  # Queued user feedback

    @property
    def metric_buffer(self) -> Deque[Dict[str, float]]:
        return self.smoother.buffer

    @property
    def key_metric_history(self) -> Deque[float]:
        return self.trend.history

    def advance(self, phase: Phase) -> None:
        """Enter a phase and record it if it is the deepest so far."""
        self.current_state = phase
        self.max_state_reached = max(self.max_state_reached, phase)

    def rearm(self) -> None:
        """Return to START, ready for the next repetition."""
        self.current_state = Phase.START
        self.max_state_reached = Phase.START


@dataclass
class Feedback:
    """Per-frame result handed to the presentation layer."""
    is_correct: bool
    message: str
    rep_count: int
    correct_rep_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isCorrect': self.is_correct,
            'message': self.message,
            'repCount': self.rep_count,
            'correctReps': self.correct_rep_count
        }
