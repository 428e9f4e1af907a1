"""Body landmark metric extraction.

This module turns one 33-point pose frame into the small set of named
angles and distances that the active exercise is judged on. It is pure:
no session state is read or written here.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, Sequence, Tuple

from fitness_ai.exercises import get_exercise
from fitness_ai.geometry import Point, calculate_angle, vertical_distance

logger = logging.getLogger("PoseAnalyzer")


class PoseLandmark(IntEnum):
    """Index of each body landmark in a 33-point pose frame."""
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


P = PoseLandmark

# name -> (measure, landmarks). Angles are measured at the middle landmark.
METRIC_DEFINITIONS: Dict[str, Tuple[str, Tuple[PoseLandmark, ...]]] = {
    'knee_angle': ('angle', (P.RIGHT_HIP, P.RIGHT_KNEE, P.RIGHT_ANKLE)),
    'hip_to_ground': ('vertical', (P.RIGHT_HIP, P.RIGHT_ANKLE)),
    'body_alignment_angle': ('angle', (P.RIGHT_SHOULDER, P.RIGHT_HIP, P.RIGHT_ANKLE)),
    'elbow_angle': ('angle', (P.RIGHT_SHOULDER, P.RIGHT_ELBOW, P.RIGHT_WRIST)),
    'hip_angle': ('angle', (P.RIGHT_SHOULDER, P.RIGHT_HIP, P.RIGHT_KNEE)),
    'hip_height': ('vertical', (P.RIGHT_HIP, P.RIGHT_SHOULDER)),
    'knee_to_shoulder_distance': ('vertical', (P.RIGHT_KNEE, P.RIGHT_SHOULDER)),
    'knee_to_elbow_distance': ('vertical', (P.RIGHT_KNEE, P.LEFT_SHOULDER)),
    'torso_angle': ('angle', (P.LEFT_SHOULDER, P.RIGHT_HIP, P.RIGHT_SHOULDER)),
    'hip_rotation_angle': ('vertical', (P.LEFT_HIP, P.RIGHT_HIP)),
    'back_angle': ('angle', (P.RIGHT_SHOULDER, P.RIGHT_HIP, P.LEFT_SHOULDER)),
    'hip_abduction_angle': ('angle', (P.LEFT_HIP, P.RIGHT_SHOULDER, P.RIGHT_HIP)),
}

MEASURES: Dict[str, Callable[..., float]] = {
    'angle': calculate_angle,
    'vertical': vertical_distance,
}


class PoseAnalyzer:
    """Extracts per-exercise metrics from landmark frames.

    Attributes:
        definitions: Metric name to (measure, landmark indices) table
    """

    def __init__(self) -> None:
        """Initialize the metric definition table."""
        self.definitions = METRIC_DEFINITIONS

    def calculate_metrics(
        self,
        exercise_id: str,
        landmarks: Sequence[Sequence[float]]
    ) -> Dict[str, float]:
        """Calculate the metric set for one frame of an exercise.

        Args:
            exercise_id: Catalog id of the active exercise
            landmarks: 33 (x, y) points in standard pose order

        Returns:
            Dictionary of metric name to value. Empty for an unknown
            exercise id.
        """
        profile = get_exercise(exercise_id)
        if profile is None:
            logger.debug("No metrics defined for exercise %s", exercise_id)
            return {}
        return self.measure(profile.metrics, landmarks)

    def measure(
        self,
        names: Sequence[str],
        landmarks: Sequence[Sequence[float]]
    ) -> Dict[str, float]:
        """Calculate named metrics from a landmark frame.

        Args:
            names: Metric names from ``METRIC_DEFINITIONS``
            landmarks: 33 (x, y) points in standard pose order

        Returns:
            Dictionary of metric name to value
        """
        metrics: Dict[str, float] = {}
        for name in names:
            measure, indices = self.definitions[name]
            points = [self._get_landmark(landmarks, index) for index in indices]
            metrics[name] = MEASURES[measure](*points)
        return metrics

    def _get_landmark(
        self,
        landmarks: Sequence[Sequence[float]],
        landmark_type: PoseLandmark
    ) -> Point:
        """Extract landmark coordinates.

        Args:
            landmarks: Landmark frame
            landmark_type: Specific landmark to extract

        Returns:
            (x, y) coordinates
        """
        point = landmarks[landmark_type.value]
        return float(point[0]), float(point[1])
