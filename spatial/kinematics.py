# spatial/kinematics.py

"""Kinematic path evaluator.

Turns a start point, waypoints and a speed/acceleration profile into a
position at any elapsed time. Each segment follows a trapezoidal velocity
profile (accelerate, cruise, decelerate) and speed is carried through
interior corners in proportion to how gentle the turn is.

Everything here is pure: no caching, no shared state.
"""

from dataclasses import dataclass
from typing import Sequence

from playsim.models import Player, Point

from .geometry import EPSILON, calculate_distance, interpolate

# Braking is modeled as twice as aggressive as accelerating
DECELERATION_FACTOR = 2.0


@dataclass(frozen=True)
class SegmentProfile:
    """Velocity profile over one path segment.

    Phases run in order: accelerate from ``entry_speed`` to ``peak_speed``,
    cruise at ``peak_speed``, decelerate to the exit speed.
    """

    length: float
    entry_speed: float
    peak_speed: float
    accel_time: float
    cruise_time: float
    decel_time: float
    acceleration: float
    deceleration: float

    @property
    def duration(self) -> float:
        return self.accel_time + self.cruise_time + self.decel_time

    @property
    def exit_speed(self) -> float:
        return max(0.0, self.peak_speed - self.deceleration * self.decel_time)

    def distance_at(self, t: float) -> float:
        """Distance covered along the segment after ``t`` seconds in it."""
        if t <= 0:
            return 0.0
        if t <= self.accel_time:
            distance = self.entry_speed * t + 0.5 * self.acceleration * t * t
        else:
            accel_distance = (
                self.entry_speed * self.accel_time
                + 0.5 * self.acceleration * self.accel_time ** 2
            )
            if t <= self.accel_time + self.cruise_time:
                distance = accel_distance + self.peak_speed * (t - self.accel_time)
            else:
                tr = min(t - self.accel_time - self.cruise_time, self.decel_time)
                distance = (
                    accel_distance
                    + self.peak_speed * self.cruise_time
                    + self.peak_speed * tr
                    - 0.5 * self.deceleration * tr * tr
                )
        return min(self.length, max(0.0, distance))


def vertex_speeds(points: Sequence[Point], top_speed: float) -> list[float]:
    """Pass-through speed at every vertex of a polyline.

    Endpoints are full stops. An interior vertex keeps
    ``top_speed * (1 + cos(theta)) / 2`` where theta is the angle between
    the incoming and outgoing segments, so a straight continuation keeps
    top speed and a reversal stops dead.

    Args:
        points: Polyline vertices, start point included
        top_speed: Top speed in yd/s

    Returns:
        One speed per vertex
    """
    if not points:
        return []

    speeds = [0.0]
    for i in range(1, len(points) - 1):
        prev, curr, nxt = points[i - 1], points[i], points[i + 1]
        incoming = (curr[0] - prev[0], curr[1] - prev[1])
        outgoing = (nxt[0] - curr[0], nxt[1] - curr[1])
        mag_in = (incoming[0] ** 2 + incoming[1] ** 2) ** 0.5
        mag_out = (outgoing[0] ** 2 + outgoing[1] ** 2) ** 0.5
        if mag_in < EPSILON or mag_out < EPSILON:
            speeds.append(0.0)
            continue
        cos_theta = (incoming[0] * outgoing[0] + incoming[1] * outgoing[1]) / (mag_in * mag_out)
        speeds.append(top_speed * max(0.0, (1.0 + cos_theta) / 2.0))
    if len(points) > 1:
        speeds.append(0.0)
    return speeds


def segment_profile(
    length: float,
    v0: float,
    v1: float,
    top_speed: float,
    acceleration: float,
    deceleration: float,
) -> SegmentProfile:
    """Build the velocity profile for one segment.

    Args:
        length: Segment length in yards (> 0)
        v0: Entry pass-through speed
        v1: Exit pass-through speed
        top_speed: Top speed (> 0)
        acceleration: Acceleration rate (> 0)
        deceleration: Deceleration rate (> 0)

    Returns:
        SegmentProfile covering exactly ``length`` yards
    """
    d_acc_to_top = (top_speed ** 2 - v0 ** 2) / (2 * acceleration)
    d_dec_to_top = (top_speed ** 2 - v1 ** 2) / (2 * deceleration)

    if d_acc_to_top + d_dec_to_top <= length:
        # Long enough to reach top speed: accelerate, cruise, decelerate
        cruise_distance = length - d_acc_to_top - d_dec_to_top
        return SegmentProfile(
            length=length,
            entry_speed=v0,
            peak_speed=top_speed,
            accel_time=(top_speed - v0) / acceleration,
            cruise_time=cruise_distance / top_speed,
            decel_time=(top_speed - v1) / deceleration,
            acceleration=acceleration,
            deceleration=deceleration,
        )

    # Triangular profile: accelerate then immediately decelerate. If the end
    # speeds are too far apart for the segment one phase time goes negative;
    # the summed duration still stands and distance_at clamps to [0, length].
    v_peak_sq = (2 * length + v0 ** 2 / acceleration + v1 ** 2 / deceleration) / (
        1 / acceleration + 1 / deceleration
    )
    v_peak = v_peak_sq ** 0.5
    return SegmentProfile(
        length=length,
        entry_speed=v0,
        peak_speed=v_peak,
        accel_time=(v_peak - v0) / acceleration,
        cruise_time=0.0,
        decel_time=(v_peak - v1) / deceleration,
        acceleration=acceleration,
        deceleration=deceleration,
    )


def _profiles(points: Sequence[Point], top_speed: float, acceleration: float):
    """Yield (p1, p2, profile) for every non-degenerate segment."""
    deceleration = acceleration * DECELERATION_FACTOR
    speeds = vertex_speeds(points, top_speed)
    for i in range(len(points) - 1):
        p1, p2 = points[i], points[i + 1]
        length = calculate_distance(p1, p2)
        if length < EPSILON:
            continue
        yield p1, p2, segment_profile(
            length, speeds[i], speeds[i + 1], top_speed, acceleration, deceleration
        )


def _can_move(top_speed: float, acceleration: float) -> bool:
    return top_speed > EPSILON and acceleration > EPSILON


def position_at_time(
    start: Point,
    path: Sequence[Point],
    time: float,
    top_speed: float,
    acceleration: float,
    start_offset: float = 0.0,
) -> Point:
    """Position along a path after ``time`` seconds.

    Args:
        start: Rest position, the implicit first point of the path
        path: Waypoints after the start point
        time: Elapsed play time in seconds
        top_speed: Top speed in yd/s
        acceleration: Acceleration in yd/s^2 (braking is twice this)
        start_offset: Seconds to wait before moving; negative values act as 0

    Returns:
        (x, y) position. ``start`` before the path begins, the final
        waypoint once the path is complete.
    """
    t_rem = time - max(0.0, start_offset)
    if not path or t_rem <= 0:
        return start
    if not _can_move(top_speed, acceleration):
        return start

    points = [start, *path]
    for p1, p2, profile in _profiles(points, top_speed, acceleration):
        duration = profile.duration
        if t_rem <= duration:
            ratio = profile.distance_at(t_rem) / profile.length
            return interpolate(p1, p2, ratio)
        t_rem -= duration

    return points[-1]


def path_duration(
    start: Point,
    path: Sequence[Point],
    top_speed: float,
    acceleration: float,
) -> float:
    """Total seconds needed to traverse the path from rest to rest.

    Returns 0 for an empty path or an entity that cannot move.
    """
    if not path or not _can_move(top_speed, acceleration):
        return 0.0
    return sum(profile.duration for _, _, profile in _profiles([start, *path], top_speed, acceleration))


def player_position_at_time(player: Player, time: float) -> Point:
    """Position of a path-following player at ``time``.

    Only offense honours ``path_start_offset``.
    """
    start_offset = player.path_start_offset if player.is_offense else 0.0
    return position_at_time(
        player.position,
        player.path,
        time,
        player.speed,
        player.acceleration,
        start_offset,
    )
