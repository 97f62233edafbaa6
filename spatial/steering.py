# spatial/steering.py

"""Reactive defender steering.

A defender is forward-integrated from t=0 to the query time on every call
using a fixed tick. Nothing is carried between calls, so pausing, rewinding
and scrubbing only need a different ``time``.

Each tick the defender:
- looks at where its matched offense was ``reaction_delay`` seconds ago
- wants to keep its rest offset from that player (or a mark on the disc
  holder, walking around the holder when the straight line is blocked)
- steers toward that point with braking-aware speed, a short burst after
  sharp heading changes, and harder braking than accelerating
"""

import math
from dataclasses import dataclass
from typing import Optional

from playsim.config import SteeringConfig
from playsim.models import CoverageStyle, Force, Player, Point

from .field import clamp_to_field
from .force import break_side_sign, downfield_sign, keep_clear, mark_position
from .geometry import (
    EPSILON,
    angle_between,
    calculate_distance,
    clamp_length,
    dot,
    normalize_vector,
    point_segment_distance,
    vector_length,
    wrap_angle,
)
from .kinematics import player_position_at_time


@dataclass
class SteeringState:
    """Integration state of one defender during a single simulation run."""

    time: float
    position: Point
    velocity: Point
    desired: Point
    heading: Optional[Point] = None  # unit direction of the last meaningful desired velocity
    burst_until: float = -1.0


def avoidance_waypoint(
    holder: Point,
    position: Point,
    desired: Point,
    config: SteeringConfig,
) -> Point:
    """Arc waypoint that walks a marker around the disc holder.

    The waypoint sits on a circle of ``avoidance_radius`` around the holder,
    rotated from the marker's current bearing by a fixed
    ``avoidance_angle_degrees`` toward the desired point, on the shorter side.

    Args:
        holder: Disc holder position
        position: Marker's current position
        desired: Where the marker ultimately wants to be
        config: Steering configuration

    Returns:
        (x, y) waypoint, never closer than ``mark_min_distance`` to the holder
    """
    rel = (position[0] - holder[0], position[1] - holder[1])
    goal = (desired[0] - holder[0], desired[1] - holder[1])
    if vector_length(rel) < EPSILON:
        rel = goal
    if vector_length(rel) < EPSILON:
        return desired

    current_bearing = math.atan2(rel[1], rel[0])
    goal_bearing = math.atan2(goal[1], goal[0]) if vector_length(goal) >= EPSILON else current_bearing
    delta = wrap_angle(goal_bearing - current_bearing)

    step = math.radians(config.avoidance_angle_degrees)
    turn = math.copysign(step, delta) if delta != 0 else step
    bearing = current_bearing + turn
    radius = max(config.avoidance_radius, config.mark_min_distance)
    return (holder[0] + math.cos(bearing) * radius, holder[1] + math.sin(bearing) * radius)


class DefenderSteering:
    """Fixed-step steering simulation for one defender.

    The simulator is configured once per query with the defender, the offense
    it reacts to, the disc holder and the force. ``position_at`` replays the
    whole integration from t=0 each time it is called.
    """

    def __init__(
        self,
        defender: Player,
        matched_offense: Optional[Player],
        disc_holder: Optional[Player],
        force: Force,
        config: Optional[SteeringConfig] = None,
    ):
        """Initialize the steering simulation.

        Args:
            defender: Defensive player being simulated
            matched_offense: Offense the defender reacts to (None: stay put)
            disc_holder: Current disc holder, if any
            force: Current force setting
            config: Steering constants (defaults when omitted)
        """
        self.defender = defender
        self.offense = matched_offense
        self.disc_holder = disc_holder
        self.force = force
        self.config = config or SteeringConfig()

        # Rest offset from the covered player, captured once at t=0
        if matched_offense is not None:
            self.offset = (defender.x - matched_offense.x, defender.y - matched_offense.y)
        else:
            self.offset = (0.0, 0.0)

        self.marking = (
            matched_offense is not None
            and disc_holder is not None
            and disc_holder.id == matched_offense.id
        )

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def desired_point(self, time: float, position: Point) -> Point:
        """Instantaneous target for the defender at ``time``.

        Args:
            time: Simulation time of the tick
            position: Defender's current simulated position

        Returns:
            (x, y) point the defender steers toward
        """
        response_time = max(0.0, time - self.config.reaction_delay)
        target = player_position_at_time(self.offense, response_time)
        raw = (target[0] + self.offset[0], target[1] + self.offset[1])
        if self.marking:
            return self._mark_point(target, raw, position)
        return raw

    def _mark_point(self, holder: Point, raw: Point, position: Point) -> Point:
        cfg = self.config
        side = break_side_sign(holder, self.force)

        if (raw[0] - holder[0]) * side < cfg.mark_min_break_separation:
            desired = mark_position(
                holder,
                self.force,
                cfg.mark_lateral_offset,
                cfg.mark_depth,
                cfg.mark_max_cushion,
            )
        else:
            desired = raw

        desired = keep_clear(holder, desired, cfg.mark_min_distance, fallback=(side, -1.0))

        if point_segment_distance(holder, position, desired) < cfg.body_radius:
            desired = avoidance_waypoint(holder, position, desired, cfg)
            desired = keep_clear(holder, desired, cfg.mark_min_distance, fallback=(side, -1.0))
        return desired

    def _is_recovering(self, target: Point, position: Point, holder: Optional[Point]) -> bool:
        """True while a deep defender has lost its downfield cushion."""
        if self.defender.coverage_style != CoverageStyle.DEEP or self.marking:
            return False
        sign = downfield_sign(target, holder)
        cushion = (position[1] - target[1]) * sign
        return cushion < self.config.deep_cushion_threshold

    def _keep_off_holder(self, holder: Point, position: Point, desired: Point) -> Point:
        """Hold the marker outside the standoff distance, inside the field."""
        radius = self.config.mark_min_distance
        fallback = (desired[0] - holder[0], desired[1] - holder[1])
        cleared = keep_clear(holder, position, radius, fallback)
        pushed = clamp_to_field(cleared)
        if calculate_distance(holder, pushed) >= radius - EPSILON:
            return pushed

        # Pinned against a sideline or end line: mirror the push direction
        dx, dy = cleared[0] - holder[0], cleared[1] - holder[1]
        for mx, my in ((-dx, dy), (dx, -dy), (-dx, -dy)):
            candidate = clamp_to_field((holder[0] + mx, holder[1] + my))
            if calculate_distance(holder, candidate) >= radius - EPSILON:
                return candidate
        return pushed

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def initial_state(self) -> SteeringState:
        rest = self.defender.position
        return SteeringState(
            time=0.0,
            position=rest,
            velocity=(0.0, 0.0),
            desired=self.desired_point(0.0, rest),
        )

    def step(self, state: SteeringState, dt: float) -> SteeringState:
        """Advance the defender by one tick of ``dt`` seconds (in place).

        Args:
            state: Integration state, updated and returned
            dt: Tick length in seconds

        Returns:
            The same state object
        """
        cfg = self.config
        t = state.time + dt

        response_time = max(0.0, t - cfg.reaction_delay)
        target = player_position_at_time(self.offense, response_time)
        holder_delayed = (
            player_position_at_time(self.disc_holder, response_time) if self.disc_holder else None
        )
        desired = self.desired_point(t, state.position)

        max_speed = self.defender.speed
        max_accel = self.defender.acceleration
        if self._is_recovering(target, state.position, holder_delayed):
            max_speed *= cfg.deep_speed_multiplier
            max_accel *= cfg.deep_accel_multiplier
        bursting = t <= state.burst_until
        if bursting:
            max_speed *= cfg.burst_speed_multiplier
            max_accel *= cfg.burst_accel_multiplier

        # Where the target point is heading
        target_velocity = clamp_length(
            ((desired[0] - state.desired[0]) / dt, (desired[1] - state.desired[1]) / dt),
            max_speed,
        )
        target_speed = vector_length(target_velocity)

        # Close the gap no faster than we could still brake to a stop
        to_target = (desired[0] - state.position[0], desired[1] - state.position[1])
        distance = vector_length(to_target)
        approach_speed = min(max_speed, math.sqrt(2.0 * max_accel * distance))
        direction = normalize_vector(to_target)
        desired_velocity = clamp_length(
            (
                target_velocity[0] + direction[0] * approach_speed,
                target_velocity[1] + direction[1] * approach_speed,
            ),
            max_speed,
        )
        desired_speed = vector_length(desired_velocity)

        # Sharp change of heading triggers a reactive burst
        if desired_speed >= cfg.burst_min_speed:
            heading = normalize_vector(desired_velocity)
            if state.heading is not None and angle_between(state.heading, heading) > math.radians(
                cfg.burst_angle_degrees
            ):
                state.burst_until = t + cfg.burst_duration
                if not bursting:
                    max_speed *= cfg.burst_speed_multiplier
                    max_accel *= cfg.burst_accel_multiplier
            state.heading = heading

        current_speed = vector_length(state.velocity)
        slowing = desired_speed < current_speed - EPSILON
        diverging = (
            current_speed > EPSILON
            and desired_speed > EPSILON
            and dot(normalize_vector(state.velocity), normalize_vector(desired_velocity))
            < cfg.braking_alignment
        )
        accel_limit = max_accel * cfg.braking_multiplier if (slowing or diverging) else max_accel

        delta_v = clamp_length(
            (desired_velocity[0] - state.velocity[0], desired_velocity[1] - state.velocity[1]),
            accel_limit * dt,
        )
        velocity = clamp_length(
            (state.velocity[0] + delta_v[0], state.velocity[1] + delta_v[1]),
            max_speed,
        )

        snap_distance = cfg.mark_snap_distance if self.marking else cfg.snap_distance
        if distance <= snap_distance and target_speed <= cfg.snap_target_speed:
            position = desired
            velocity = (0.0, 0.0)
        else:
            position = (state.position[0] + velocity[0] * dt, state.position[1] + velocity[1] * dt)

        position = clamp_to_field(position)
        if self.marking:
            holder_now = player_position_at_time(self.disc_holder, t)
            position = self._keep_off_holder(holder_now, position, desired)

        state.time = t
        state.position = position
        state.velocity = velocity
        state.desired = desired
        return state

    def position_at(self, time: Optional[float]) -> Point:
        """Simulated defender position at ``time``.

        Args:
            time: Elapsed play time in seconds (None or <= 0: rest position)

        Returns:
            (x, y) position inside the field
        """
        if self.offense is None or time is None or time <= 0:
            return self.defender.position

        tick = self.config.tick
        full_ticks = int(time / tick)
        remainder = time - full_ticks * tick

        state = self.initial_state()
        for _ in range(full_ticks):
            self.step(state, tick)
        if remainder > EPSILON:
            self.step(state, remainder)
        return state.position


def defender_position_at_time(
    defender: Player,
    matched_offense: Optional[Player],
    disc_holder: Optional[Player],
    force: Force,
    time: Optional[float],
    config: Optional[SteeringConfig] = None,
) -> Point:
    """Position of a reactive defender at ``time``, simulated from t=0.

    Args:
        defender: Defensive player
        matched_offense: Offense it reacts to; None keeps it at rest
        disc_holder: Current disc holder, if any
        force: Current force setting
        time: Elapsed play time in seconds
        config: Steering constants

    Returns:
        (x, y) position
    """
    steering = DefenderSteering(defender, matched_offense, disc_holder, force, config)
    return steering.position_at(time)
