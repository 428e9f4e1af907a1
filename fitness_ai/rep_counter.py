"""Repetition state machine.

Phase changes are driven by the smoothed key metric, its short-term trend
and, for some families, a secondary metric. Each family's
``TransitionPolicy`` decides which direction counts as "down", so squats
(knee angle falls) and jumping jacks (hip abduction rises) share one
implementation.
"""

import logging
from typing import Iterable, Mapping, Optional, Tuple

from fitness_ai import config
from fitness_ai.evaluator import CorrectnessEvaluator
from fitness_ai.exercises import TransitionPolicy
from fitness_ai.models import ExerciseSession, Phase

logger = logging.getLogger("RepStateMachine")

GOOD_REP_MESSAGE = "Good rep!"

Band = Tuple[float, float]


class RepStateMachine:
    """Advances an ``ExerciseSession`` through START -> DOWN -> HOLD -> UP -> START.

    Attributes:
        evaluator: Scores each completed repetition
        speed: Trend magnitude (units/frame) required to start or finish a rep
    """

    def __init__(
        self,
        evaluator: Optional[CorrectnessEvaluator] = None,
        speed: float = config.TREND_SPEED
    ) -> None:
        self.evaluator = evaluator or CorrectnessEvaluator()
        self.speed = float(speed)

    def update(
        self,
        session: ExerciseSession,
        value: float,
        trend: float,
        secondary: Optional[float],
        bands: Mapping[str, Band],
        policy: TransitionPolicy,
        bounds: Mapping[str, float]
    ) -> bool:
        """Apply one frame's worth of transition logic.

        Args:
            session: Session state to mutate
            value: Smoothed key metric
            trend: Mean of the latest key-metric first differences
            secondary: First available secondary metric, if any
            bands: ``state1``..``state4`` trigger bands for the difficulty
            policy: Transition directions for the exercise family
            bounds: Threshold entry used to score a completed rep

        Returns:
            True if this frame completed a repetition
        """
        sign = policy.down_sign
        state2, state3, state4 = bands.get('state2'), bands.get('state3'), bands.get('state4')
        state = session.current_state

        if state == Phase.START:
            if state2 is not None and trend * sign > self.speed and self._beyond(value, state2, sign):
                self._enter_down(session)
            return False

        if state == Phase.DOWN and state3 is not None and self._beyond(value, state3, sign):
            self._enter(session, Phase.HOLD)
        elif state in (Phase.DOWN, Phase.HOLD) and self._up_triggered(value, secondary, state4, policy):
            self._enter(session, Phase.UP)
        elif state2 is not None and trend * sign < -self.speed and self._returned(value, state2, sign):
            self.complete_rep(session, bounds)
            return True
        return False

    def complete_rep(self, session: ExerciseSession, bounds: Mapping[str, float]) -> None:
        """Count a finished repetition and score it once.

        Args:
            session: Session state to mutate
            bounds: Threshold entry for the active exercise/difficulty
        """
        session.rep_count += 1

        if not session.rep_logged:
            verdict = self.evaluator.evaluate(
                session.rep_frame_buffer, bounds, session.max_state_reached)
            if verdict.is_correct:
                session.correct_rep_count += 1
            session.last_rep_correct = verdict.is_correct
            session.messages = [GOOD_REP_MESSAGE if verdict.is_correct else verdict.reason]
            session.rep_logged = True
            session.rep_frame_buffer.clear()

        logger.debug(
            f"Rep {session.rep_count} complete (correct: {session.correct_rep_count}, "
            f"depth: {session.max_state_reached.name})")
        session.rearm()

    def _enter_down(self, session: ExerciseSession) -> None:
        self._enter(session, Phase.DOWN)
        session.rep_frame_buffer.clear()
        session.rep_frame_buffer.append(session.smoother.latest)
        session.rep_logged = False
        session.messages.clear()

    @staticmethod
    def _enter(session: ExerciseSession, phase: Phase) -> None:
        logger.debug(f"{session.current_state.name} -> {phase.name}")
        session.advance(phase)

    def _up_triggered(
        self,
        value: float,
        secondary: Optional[float],
        state4: Optional[Band],
        policy: TransitionPolicy
    ) -> bool:
        if state4 is None:
            return False
        if policy.key_drives_up and self._beyond(value, state4, policy.down_sign):
            return True
        if secondary is None or policy.secondary_sign is None:
            return False
        # Secondary metrics are always compared against the low edge
        low = state4[0]
        return secondary < low if policy.secondary_sign < 0 else secondary > low

    @staticmethod
    def _beyond(value: float, band: Band, sign: int) -> bool:
        """Whether value has crossed the low edge of the band in the down direction."""
        return value < band[0] if sign < 0 else value > band[0]

    @staticmethod
    def _returned(value: float, band: Band, sign: int) -> bool:
        """Whether value is back on the start side of the band."""
        return value > band[0] if sign < 0 else value < band[1]


def secondary_metric(metrics: Mapping[str, float], names: Iterable[str]) -> Optional[float]:
    """First available secondary metric in priority order."""
    for name in names:
        if name in metrics:
            return metrics[name]
    return None
