"""Synthetic landmark frames for tests."""

import math

from fitness_ai.pose_analyzer import PoseLandmark as P

KNEE = (300.0, 300.0)
ANKLE = (300.0, 400.0)


def pose_frame(overrides=None, size=33):
    """A frame with every landmark at the frame centre, plus overrides."""
    points = [(320.0, 240.0)] * size
    for index, point in (overrides or {}).items():
        points[index] = point
    return points


def knee_frame(angle):
    """Side-view frame whose right hip-knee-ankle angle is ``angle`` degrees."""
    rad = math.radians(angle)
    hip = (KNEE[0] + 100 * math.sin(rad), KNEE[1] + 100 * math.cos(rad))
    shoulder = (hip[0], hip[1] - 150)
    return pose_frame({
        P.LEFT_HIP: hip,
        P.RIGHT_HIP: hip,
        P.RIGHT_KNEE: KNEE,
        P.RIGHT_ANKLE: ANKLE,
        P.LEFT_SHOULDER: shoulder,
        P.RIGHT_SHOULDER: shoulder,
    })


def plank_frame(sag=5.0):
    """Side-view plank; larger ``sag`` drops the hip and bends the body line."""
    hip = (300.0, 300.0 + sag)
    return pose_frame({
        P.RIGHT_SHOULDER: (100.0, 300.0),
        P.LEFT_HIP: hip,
        P.RIGHT_HIP: hip,
        P.RIGHT_ANKLE: (500.0, 300.0),
    })


def squat_rep(bottom=60, step=10, top=170):
    """Knee angles for one squat: standing, down to ``bottom`` and back up."""
    down = list(range(top - step, bottom - 1, -step))
    up = list(range(bottom + step, top + 1, step))
    return [top] * 6 + down + [bottom] * 3 + up + [top] * 4
