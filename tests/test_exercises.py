import pytest

from fitness_ai.exercises import (
    ASCENDING_KEY_ONLY,
    DESCENDING_SECONDARY_RISE,
    Difficulty,
    available_difficulties,
    available_exercises,
    get_exercise,
)


def test_catalog_lists_every_exercise():
    exercises = available_exercises()
    assert len(exercises) == 26
    assert len(set(exercises)) == 26
    assert {'squat', 'pushup', 'plank', 'wall_sit', 'jumping_jack', 'bird_dog'} <= set(exercises)


def test_difficulties():
    assert available_difficulties() == ['easy', 'medium', 'hard']


def test_unknown_exercise():
    assert get_exercise('handstand') is None


def test_squat_medium_bands():
    bands = get_exercise('squat').trigger_bands(Difficulty.MEDIUM)
    assert bands['state2'] == pytest.approx((99.75, 110.25))
    assert bands['state3'] == pytest.approx((71.25, 78.75))
    assert bands['state4'] == pytest.approx((57.0, 63.0))


def test_bands_tighten_with_difficulty():
    profile = get_exercise('pushup')
    easy = profile.trigger_bands(Difficulty.EASY)['state2']
    hard = profile.trigger_bands(Difficulty.HARD)['state2']
    assert easy == pytest.approx((108.0, 132.0))
    assert hard == pytest.approx((107.8, 112.2))


@pytest.mark.parametrize("exercise", ['glute_bridge', 'mountain_climber', 'bicycle_crunch', 'bird_dog', 'jumping_jack'])
def test_inert_families_have_no_triggers(exercise):
    assert get_exercise(exercise).trigger_bands(Difficulty.MEDIUM) == {}


def test_static_holds():
    assert {e for e in available_exercises() if get_exercise(e).static} == {
        'plank', 'side_bridge', 'superman_pose', 'wall_sit'}


def test_policies():
    assert get_exercise('jumping_jack').policy == ASCENDING_KEY_ONLY
    assert get_exercise('bird_dog').policy == DESCENDING_SECONDARY_RISE
    assert get_exercise('leg_raise').policy.secondary_sign == -1
    assert get_exercise('glute_bridge').policy.down_sign == 1


def test_only_jumping_jack_skips_side_view():
    assert not get_exercise('jumping_jack').requires_side_view
    assert get_exercise('squat').requires_side_view


def test_profiles_name_their_family():
    assert get_exercise('burpee').family == 'squat'
    assert get_exercise('tricep_dip').family == 'push'
    assert get_exercise('side_bridge').family == 'static_hold'
    assert get_exercise('abs_alternating').family == 'trunk_flexion'
