"""
Geometry primitives over 2-D landmark points.
Points are (x, y) pairs in image coordinates (x right, y down).
"""

from typing import Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


def calculate_angle(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """Calculate angle between three points (ABC with B as vertex).

    Args:
        a: First point coordinates
        b: Vertex point coordinates
        c: Third point coordinates

    Returns:
        Unsigned angle in degrees (0-180). 0 when either ray has zero length.
    """
    a, b, c = np.asarray(a, dtype=float), np.asarray(b, dtype=float), np.asarray(c, dtype=float)
    ba, bc = a - b, c - b

    norm_ba, norm_bc = np.linalg.norm(ba), np.linalg.norm(bc)
    if norm_ba == 0 or norm_bc == 0:
        return 0.0

    cosine_angle = np.dot(ba, bc) / (norm_ba * norm_bc)
    return float(np.degrees(np.arccos(np.clip(cosine_angle, -1.0, 1.0))))


def vertical_distance(point1: Sequence[float], point2: Sequence[float]) -> float:
    """Absolute vertical separation between two points."""
    return float(abs(point1[1] - point2[1]))


def horizontal_distance(point1: Sequence[float], point2: Sequence[float]) -> float:
    """Absolute horizontal separation between two points."""
    return float(abs(point1[0] - point2[0]))
