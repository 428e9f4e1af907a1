"""Frame processing pipeline for exercise analysis.

This module handles the complete per-frame pipeline:
- Landmark frame validation (size and camera viewpoint)
- Metric extraction and temporal smoothing
- Repetition counting through the phase state machine
- Form scoring against the threshold table
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from fitness_ai import config
from fitness_ai.evaluator import NO_THRESHOLDS_MESSAGE, CorrectnessEvaluator
from fitness_ai.exercises import (
    SECONDARY_METRICS,
    Difficulty,
    available_difficulties,
    available_exercises,
    get_exercise,
)
from fitness_ai.geometry import horizontal_distance
from fitness_ai.models import ExerciseSession, Feedback
from fitness_ai.pose_analyzer import PoseAnalyzer, PoseLandmark
from fitness_ai.rep_counter import RepStateMachine, secondary_metric
from fitness_ai.thresholds import Bounds, ThresholdTable

logger = logging.getLogger("ExerciseAnalyzer")

NO_POSE_MESSAGE = "Cannot detect pose"
VIEWPOINT_MESSAGE = "Incorrect viewpoint: Please use a side view"
DEFAULT_MESSAGE = "Continue"
HOLD_GOOD_MESSAGE = "Good form! Hold steady"
HOLD_ADJUST_MESSAGE = "Adjust your form"


class ExerciseAnalyzer:
    """Turns a stream of landmark frames into rep counts and form feedback.

    One instance owns one session. Calls must be serialized by the caller;
    nothing here blocks or runs in the background.

    Attributes:
        pose_analyzer: Metric extractor
        state_machine: Repetition phase logic
        evaluator: Form scoring against threshold bounds
        thresholds: Active threshold table
        frame_width: Expected frame width in pixels for the viewpoint check
    """

    def __init__(
        self,
        exercise: str = config.DEFAULT_EXERCISE,
        difficulty: Union[str, Difficulty] = config.DEFAULT_DIFFICULTY,
        thresholds: Optional[ThresholdTable] = None,
        frame_width: float = config.FRAME_WIDTH
    ) -> None:
        """Initialize the processing pipeline for an exercise selection."""
        self.pose_analyzer = PoseAnalyzer()
        self.evaluator = CorrectnessEvaluator()
        self.state_machine = RepStateMachine(self.evaluator)
        self.thresholds = thresholds if thresholds is not None else ThresholdTable()
        self.frame_width = float(frame_width)
        self.difficulty = Difficulty(difficulty)
        self.set_exercise(exercise)

    # ----------------------------- Configuration -----------------------------

    def set_exercise(self, exercise: str) -> None:
        """Switch exercise and start a fresh session."""
        self.exercise = exercise
        self.profile = get_exercise(exercise)
        self._session = ExerciseSession()
        if self.profile is None:
            logger.warning(f"Unknown exercise: {exercise}")
        else:
            logger.debug(f"Exercise set to: {exercise} ({self.profile.family} family)")

    def set_difficulty(self, difficulty: Union[str, Difficulty]) -> None:
        """Change difficulty without resetting the session.

        Raises:
            ValueError: If the level is not easy, medium or hard
        """
        self.difficulty = Difficulty(difficulty)
        logger.debug(f"Difficulty set to: {self.difficulty.value}")

    def load_thresholds(self, table: Union[ThresholdTable, Mapping[str, Any]]) -> None:
        """Replace the threshold table; malformed entries are dropped."""
        self.thresholds = table if isinstance(table, ThresholdTable) else ThresholdTable(table)

    def reset(self) -> None:
        """Clear session state, keeping exercise, difficulty and thresholds."""
        self._session = ExerciseSession()

    @property
    def session(self) -> ExerciseSession:
        return self._session

    @staticmethod
    def available_exercises() -> List[str]:
        return available_exercises()

    @staticmethod
    def available_difficulties() -> List[str]:
        return available_difficulties()

    def current_thresholds(self) -> Bounds:
        return self.thresholds.lookup(self.exercise, self.difficulty.value)

    # ----------------------------- Per frame -----------------------------

    def analyze_frame(
        self,
        landmarks: Sequence[Sequence[float]],
        frame_width: Optional[float] = None
    ) -> Feedback:
        """Process one landmark frame.

        Args:
            landmarks: At least 33 (x, y) pixel points in standard pose order
            frame_width: Width of this frame in pixels; defaults to the
                analyzer's configured width

        Returns:
            Feedback with the correctness flag, a message and both counters
        """
        session = self._session

        if len(landmarks) < config.MIN_LANDMARKS:
            return self._feedback(False, NO_POSE_MESSAGE)

        if self._wrong_viewpoint(landmarks, frame_width or self.frame_width):
            return self._feedback(False, VIEWPOINT_MESSAGE)

        raw_metrics = self.pose_analyzer.calculate_metrics(self.exercise, landmarks)
        smoothed_metrics = session.smoother(raw_metrics)

        if self.profile is not None and self.profile.static:
            return self._handle_static_exercise(smoothed_metrics)

        session.rep_frame_buffer.append(smoothed_metrics)
        self._process_key_metric(smoothed_metrics)

        if not self.current_thresholds():
            return self._feedback(False, NO_THRESHOLDS_MESSAGE)

        message = session.messages[0] if session.messages else DEFAULT_MESSAGE
        return self._feedback(session.last_rep_correct, message)

    def _wrong_viewpoint(self, landmarks: Sequence[Sequence[float]], frame_width: float) -> bool:
        """Check the hips overlap horizontally, as they do in a side view."""
        if self.profile is not None and not self.profile.requires_side_view:
            return False
        separation = horizontal_distance(
            landmarks[PoseLandmark.LEFT_HIP], landmarks[PoseLandmark.RIGHT_HIP])
        return separation > config.VIEWPOINT_HIP_RATIO * frame_width

    def _process_key_metric(self, metrics: Mapping[str, float]) -> None:
        """Feed the key metric to the trend window and run the state machine.

        Args:
            metrics: Smoothed metric set for this frame
        """
        profile = self.profile
        if profile is None or profile.key_metric is None or profile.key_metric not in metrics:
            return

        bands = profile.trigger_bands(self.difficulty)
        if not bands:
            return

        session = self._session
        value = metrics[profile.key_metric]
        session.trend.push(value)
        if not session.trend.ready:
            return

        self.state_machine.update(
            session,
            value,
            session.trend(),
            secondary_metric(metrics, SECONDARY_METRICS),
            bands,
            profile.policy,
            self.current_thresholds()
        )

    def _handle_static_exercise(self, metrics: Mapping[str, float]) -> Feedback:
        """Score a held pose frame by frame; the hold counts as one rep.

        Args:
            metrics: Smoothed metric set for this frame

        Returns:
            Feedback for the held pose
        """
        session = self._session
        verdict = self.evaluator.evaluate([metrics], self.current_thresholds())

        if session.rep_count == 0:
            session.rep_count = 1
            if verdict.is_correct:
                session.correct_rep_count = 1

        if verdict.is_correct:
            message = HOLD_GOOD_MESSAGE
        elif verdict.reason == NO_THRESHOLDS_MESSAGE:
            message = NO_THRESHOLDS_MESSAGE
        else:
            message = HOLD_ADJUST_MESSAGE
        return self._feedback(verdict.is_correct, message)

    def _feedback(self, is_correct: bool, message: str) -> Feedback:
        return Feedback(
            is_correct=is_correct,
            message=message,
            rep_count=self._session.rep_count,
            correct_rep_count=self._session.correct_rep_count
        )
