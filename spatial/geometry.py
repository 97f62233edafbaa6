# spatial/geometry.py

"""2D point utilities for the spatial layer."""

import math

from playsim.models import Point

# Below this length a vector is treated as zero
EPSILON = 1e-9


def calculate_distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points.

    Args:
        p1: First point (x, y)
        p2: Second point (x, y)

    Returns:
        Distance in yards
    """
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    return (dx * dx + dy * dy) ** 0.5


def vector_length(vector: Point) -> float:
    """Length of a 2D vector."""
    return (vector[0] * vector[0] + vector[1] * vector[1]) ** 0.5


def normalize_vector(vector: Point) -> Point:
    """Normalize a 2D vector to unit length.

    Args:
        vector: (x, y) vector

    Returns:
        Unit (x, y) vector, or (0, 0) for a zero-length vector
    """
    magnitude = vector_length(vector)
    if magnitude < EPSILON:
        return (0.0, 0.0)
    return (vector[0] / magnitude, vector[1] / magnitude)


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def interpolate(p1: Point, p2: Point, ratio: float) -> Point:
    """Point at ``ratio`` of the way from p1 to p2."""
    return (p1[0] + (p2[0] - p1[0]) * ratio, p1[1] + (p2[1] - p1[1]) * ratio)


def clamp_length(vector: Point, max_length: float) -> Point:
    """Scale a vector down so it is no longer than max_length."""
    length = vector_length(vector)
    if length <= max_length or length < EPSILON:
        return vector
    scale = max_length / length
    return (vector[0] * scale, vector[1] * scale)


def angle_between(a: Point, b: Point) -> float:
    """Unsigned angle in radians between two vectors, 0 if either is zero."""
    la = vector_length(a)
    lb = vector_length(b)
    if la < EPSILON or lb < EPSILON:
        return 0.0
    cos_theta = max(-1.0, min(1.0, dot(a, b) / (la * lb)))
    return math.acos(cos_theta)


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians to [-pi, pi)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def point_segment_distance(point: Point, a: Point, b: Point) -> float:
    """Shortest distance from point to the segment a-b.

    Args:
        point: Query point
        a: Segment start
        b: Segment end

    Returns:
        Distance in yards (distance to ``a`` for a degenerate segment)
    """
    abx = b[0] - a[0]
    aby = b[1] - a[1]
    length_sq = abx * abx + aby * aby
    if length_sq < EPSILON:
        return calculate_distance(point, a)
    t = ((point[0] - a[0]) * abx + (point[1] - a[1]) * aby) / length_sq
    t = max(0.0, min(1.0, t))
    closest = (a[0] + abx * t, a[1] + aby * t)
    return calculate_distance(point, closest)
