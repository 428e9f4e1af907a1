import pytest

from fitness_ai.evaluator import NO_THRESHOLDS_MESSAGE
from fitness_ai.exercises import (
    ASCENDING_KEY_ONLY,
    DESCENDING,
    DESCENDING_SECONDARY_RISE,
)
from fitness_ai.models import ExerciseSession, Phase
from fitness_ai.rep_counter import GOOD_REP_MESSAGE, RepStateMachine, secondary_metric

DESCENDING_BANDS = {
    'state1': (130.0, 150.0),
    'state2': (95.0, 105.0),
    'state3': (70.0, 80.0),
    'state4': (50.0, 60.0),
}
ASCENDING_BANDS = {
    'state2': (90.0, 110.0),
    'state3': (130.0, 150.0),
    'state4': (160.0, 180.0),
}
BOUNDS = {'knee_angle_min': 10.0}


@pytest.fixture
def machine():
    return RepStateMachine()


def test_start_needs_falling_trend(machine):
    session = ExerciseSession()
    machine.update(session, 80.0, 0.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.START
    machine.update(session, 80.0, -2.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.DOWN


def test_entering_down_seeds_rep_buffer(machine):
    session = ExerciseSession()
    session.smoother({'knee_angle': 91.0})
    session.rep_frame_buffer.extend([{'knee_angle': 170.0}] * 5)
    session.rep_logged = True
    machine.update(session, 90.0, -5.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert list(session.rep_frame_buffer) == [{'knee_angle': 91.0}]
    assert not session.rep_logged


def test_descending_full_cycle(machine):
    session = ExerciseSession()
    session.advance(Phase.DOWN)
    session.rep_frame_buffer.append({'knee_angle': 65.0})

    machine.update(session, 65.0, -3.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.HOLD
    machine.update(session, 45.0, -3.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.UP
    assert session.max_state_reached == Phase.UP

    completed = machine.update(session, 100.0, 3.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert completed
    assert session.rep_count == 1
    assert session.correct_rep_count == 1
    assert session.messages == [GOOD_REP_MESSAGE]
    assert session.current_state == Phase.START
    assert session.max_state_reached == Phase.START
    assert len(session.rep_frame_buffer) == 0


def test_secondary_metric_drives_up(machine):
    session = ExerciseSession()
    session.advance(Phase.DOWN)
    machine.update(session, 90.0, 0.0, 40.0, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.UP


def test_secondary_rise_policy(machine):
    falling = ExerciseSession()
    falling.advance(Phase.DOWN)
    machine.update(falling, 90.0, 0.0, 65.0, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert falling.current_state == Phase.DOWN

    rising = ExerciseSession()
    rising.advance(Phase.DOWN)
    machine.update(rising, 90.0, 0.0, 65.0, DESCENDING_BANDS, DESCENDING_SECONDARY_RISE, BOUNDS)
    assert rising.current_state == Phase.UP


def test_ascending_cycle(machine):
    session = ExerciseSession()
    machine.update(session, 115.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.DOWN
    machine.update(session, 155.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.HOLD
    machine.update(session, 185.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.UP

    assert machine.update(session, 85.0, -5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.rep_count == 1
    assert session.correct_rep_count == 0
    assert session.messages == [NO_THRESHOLDS_MESSAGE]
    assert not session.last_rep_correct


def test_rep_is_scored_once(machine):
    session = ExerciseSession(rep_logged=True)
    session.advance(Phase.HOLD)
    machine.complete_rep(session, BOUNDS)
    assert session.rep_count == 1
    assert session.correct_rep_count == 0
    assert session.current_state == Phase.START


def test_secondary_metric_priority():
    metrics = {'back_angle': 1.0, 'torso_angle': 2.0}
    names = ('body_alignment_angle', 'torso_angle', 'hip_rotation_angle', 'back_angle')
    assert secondary_metric(metrics, names) == 2.0
    assert secondary_metric({}, names) is None


def test_rising_value_inside_band_starts_rep(machine):
    session = ExerciseSession()
    machine.update(session, 100.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.DOWN

    machine.update(session, 140.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.HOLD
    machine.update(session, 170.0, 5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.current_state == Phase.UP

    assert not machine.update(session, 120.0, -5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert machine.update(session, 105.0, -5.0, None, ASCENDING_BANDS, ASCENDING_KEY_ONLY, {})
    assert session.rep_count == 1


def test_next_rep_clears_previous_message(machine):
    session = ExerciseSession(messages=[GOOD_REP_MESSAGE])
    machine.update(session, 90.0, -5.0, None, DESCENDING_BANDS, DESCENDING, BOUNDS)
    assert session.current_state == Phase.DOWN
    assert session.messages == []
