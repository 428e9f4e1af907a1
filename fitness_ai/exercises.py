"""Exercise catalog.

Every supported exercise belongs to a movement family. The family fixes
which metrics are extracted, which metric drives the rep state machine,
the phase trigger values per difficulty and the direction in which the
key metric moves during the down phase. Lookups happen once per exercise
selection so the per-frame path never branches on exercise ids.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

# ----------------------------- Exercise ids -----------------------------

SQUAT = "squat"
BURPEE = "burpee"
STEP_UP = "step_up"
LUNGE = "static_lunge"
BULGARIAN_SPLIT_SQUAT = "bulgarian_split_squat"

PUSHUP = "pushup"
ELEVATED_PUSHUP = "elevated_pushup"
INVERTED_ROW = "inverted_row"
BENT_LEG_INVERTED_ROW = "bent_leg_inverted_row"
TRICEP_DIP = "tricep_dip"

GLUTE_BRIDGE = "glute_bridge"
BRIDGE = "bridge"
SINGLE_LEG_HIP_THRUST = "single_leg_hip_thrust"

MOUNTAIN_CLIMBER = "mountain_climber"
HIGH_KNEES = "high_knees"

BICYCLE_CRUNCH = "bicycle_crunch"
ABS_ALTERNATING = "abs_alternating"

PLANK = "plank"
SIDE_BRIDGE = "side_bridge"
SUPERMAN_POSE = "superman_pose"
WALL_SIT = "wall_sit"

SINGLE_LEG_DEADLIFT = "single_leg_deadlift"
BIRD_DOG = "bird_dog"
LEG_RAISE = "leg_raise"
DONKEY_KICK = "donkey_kick"

JUMPING_JACK = "jumping_jack"


class Difficulty(str, Enum):
    """Difficulty levels; each tightens the phase trigger bands."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Half-width of a trigger band as a fraction of its value
TOLERANCES: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.10,
    Difficulty.MEDIUM: 0.05,
    Difficulty.HARD: 0.02,
}

# Consulted in this order for the HOLD -> UP transition
SECONDARY_METRICS: Tuple[str, ...] = (
    "body_alignment_angle",
    "torso_angle",
    "hip_rotation_angle",
    "back_angle",
)

# Filmed from the front, so exempt from the side-view check
SIDE_VIEW_EXEMPT = frozenset({JUMPING_JACK})


# ----------------------------- Descriptors -----------------------------

@dataclass(frozen=True)
class TransitionPolicy:
    """How a family's key and secondary metrics drive phase changes.

    Attributes:
        down_sign: -1 when the key metric falls during the down phase
            (knee angle in a squat), +1 when it rises (jumping jack).
        key_drives_up: Whether the key metric crossing ``state4`` moves
            the rep into UP.
        secondary_sign: -1 if the secondary metric must drop below the
            ``state4`` bound to move into UP, +1 if it must rise above it,
            None if the family ignores secondary metrics.
    """
    down_sign: int = -1
    key_drives_up: bool = True
    secondary_sign: Optional[int] = -1


DESCENDING = TransitionPolicy()
DESCENDING_KEY_ONLY = TransitionPolicy(secondary_sign=None)
ASCENDING_KEY_ONLY = TransitionPolicy(down_sign=1, secondary_sign=None)
ASCENDING_SECONDARY_RISE = TransitionPolicy(down_sign=1, key_drives_up=False, secondary_sign=1)
DESCENDING_SECONDARY_RISE = TransitionPolicy(key_drives_up=False, secondary_sign=1)


@dataclass(frozen=True)
class ExerciseFamily:
    """A group of exercises that share landmarks, metrics and phase logic."""
    name: str
    exercises: Tuple[str, ...]
    metrics: Tuple[str, ...]
    key_metric: Optional[str] = None
    triggers: Mapping[Difficulty, Mapping[str, float]] = field(default_factory=dict)
    policy: TransitionPolicy = DESCENDING
    static: bool = False
    extra_metrics: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    policy_overrides: Mapping[str, TransitionPolicy] = field(default_factory=dict)


@dataclass(frozen=True)
class ExerciseProfile:
    """Everything the engine needs about the active exercise, resolved once."""
    exercise_id: str
    family: str
    metrics: Tuple[str, ...]
    key_metric: Optional[str]
    policy: TransitionPolicy
    static: bool
    triggers: Mapping[Difficulty, Mapping[str, float]]
    requires_side_view: bool

    def trigger_bands(self, difficulty: Difficulty) -> Dict[str, Tuple[float, float]]:
        """Widen each trigger value into a (low, high) band for a difficulty.

        Args:
            difficulty: Active difficulty level

        Returns:
            Mapping of ``state1``..``state4`` to ``(value*(1-tol), value*(1+tol))``,
            empty when the exercise defines no triggers
        """
        tolerance = TOLERANCES[difficulty]
        return {
            name: (value * (1 - tolerance), value * (1 + tolerance))
            for name, value in self.triggers.get(difficulty, {}).items()
        }


SQUAT_TRIGGERS = {
    Difficulty.EASY: {"state1": 140.0, "state2": 110.0, "state3": 80.0, "state4": 60.0},
    Difficulty.MEDIUM: {"state1": 140.0, "state2": 105.0, "state3": 75.0, "state4": 60.0},
    Difficulty.HARD: {"state1": 140.0, "state2": 100.0, "state3": 70.0, "state4": 60.0},
}

PUSH_TRIGGERS = {
    Difficulty.EASY: {"state1": 150.0, "state2": 120.0, "state3": 80.0, "state4": 170.0},
    Difficulty.MEDIUM: {"state1": 150.0, "state2": 115.0, "state3": 75.0, "state4": 170.0},
    Difficulty.HARD: {"state1": 150.0, "state2": 110.0, "state3": 70.0, "state4": 170.0},
}

FAMILIES: Tuple[ExerciseFamily, ...] = (
    ExerciseFamily(
        name="squat",
        exercises=(SQUAT, BURPEE, STEP_UP, LUNGE, BULGARIAN_SPLIT_SQUAT),
        metrics=("knee_angle", "hip_to_ground"),
        key_metric="knee_angle",
        triggers=SQUAT_TRIGGERS,
        extra_metrics={BURPEE: ("body_alignment_angle",)},
    ),
    ExerciseFamily(
        name="push",
        exercises=(PUSHUP, ELEVATED_PUSHUP, INVERTED_ROW, BENT_LEG_INVERTED_ROW, TRICEP_DIP),
        metrics=("elbow_angle", "body_alignment_angle"),
        key_metric="elbow_angle",
        triggers=PUSH_TRIGGERS,
    ),
    ExerciseFamily(
        name="hip_hinge",
        exercises=(GLUTE_BRIDGE, BRIDGE, SINGLE_LEG_HIP_THRUST),
        metrics=("hip_angle", "hip_height"),
        key_metric="hip_height",
        policy=ASCENDING_SECONDARY_RISE,
    ),
    ExerciseFamily(
        name="knee_drive",
        exercises=(MOUNTAIN_CLIMBER, HIGH_KNEES),
        metrics=("knee_to_shoulder_distance",),
        key_metric="knee_to_shoulder_distance",
        policy=DESCENDING_KEY_ONLY,
    ),
    ExerciseFamily(
        name="trunk_flexion",
        exercises=(BICYCLE_CRUNCH, ABS_ALTERNATING),
        metrics=("knee_to_elbow_distance", "torso_angle"),
        key_metric="knee_to_elbow_distance",
        policy=ASCENDING_SECONDARY_RISE,
    ),
    ExerciseFamily(
        name="static_hold",
        exercises=(PLANK, SIDE_BRIDGE, SUPERMAN_POSE),
        metrics=("body_alignment_angle",),
        static=True,
    ),
    ExerciseFamily(
        name="wall_sit",
        exercises=(WALL_SIT,),
        metrics=("knee_angle",),
        static=True,
    ),
    ExerciseFamily(
        name="posterior_chain",
        exercises=(SINGLE_LEG_DEADLIFT, BIRD_DOG, LEG_RAISE, DONKEY_KICK),
        metrics=("hip_angle",),
        key_metric="hip_angle",
        extra_metrics={
            BIRD_DOG: ("hip_rotation_angle",),
            SINGLE_LEG_DEADLIFT: ("back_angle",),
        },
        policy_overrides={BIRD_DOG: DESCENDING_SECONDARY_RISE},
    ),
    ExerciseFamily(
        name="jumping_jack",
        exercises=(JUMPING_JACK,),
        metrics=("hip_abduction_angle",),
        key_metric="hip_abduction_angle",
        policy=ASCENDING_KEY_ONLY,
    ),
)


def _build_profiles() -> Dict[str, ExerciseProfile]:
    profiles = {}
    for family in FAMILIES:
        for exercise_id in family.exercises:
            profiles[exercise_id] = ExerciseProfile(
                exercise_id=exercise_id,
                family=family.name,
                metrics=family.metrics + family.extra_metrics.get(exercise_id, ()),
                key_metric=family.key_metric,
                policy=family.policy_overrides.get(exercise_id, family.policy),
                static=family.static,
                triggers=family.triggers,
                requires_side_view=exercise_id not in SIDE_VIEW_EXEMPT,
            )
    return profiles


EXERCISES: Dict[str, ExerciseProfile] = _build_profiles()


def get_exercise(exercise_id: str) -> Optional[ExerciseProfile]:
    """Return the profile for an exercise id, or None if it is not in the catalog."""
    return EXERCISES.get(exercise_id)


def available_exercises() -> List[str]:
    return list(EXERCISES)


def available_difficulties() -> List[str]:
    return [level.value for level in Difficulty]
