# spatial/throws.py

"""Throw planning and disc flight.

A throw is planned once from the roster: the disc leaves from just beside
the thrower at release and travels in a curved line to the receiver's
position at catch time (or to a target point for throws into space).
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from playsim.models import Player, Point, ThrowEvent, ThrowPower, default_disc_holder, find_player

from .kinematics import player_position_at_time

THROW_SPEEDS = {
    ThrowPower.SOFT: 8.0,
    ThrowPower.MEDIUM: 12.0,
    ThrowPower.HARD: 16.0,
}

DISC_OFFSET = (1.2, -1.2)  # release point relative to the thrower
MIN_TRAVEL = 0.5  # yards
MIN_FLIGHT_TIME = 0.2  # seconds
CURVE_FACTOR = 0.15  # peak sideways bend as a fraction of throw length
TRAIL_SAMPLES = 24
ROTATION_THRESHOLD = 0.2  # |angle| above which the disc is drawn tilted


@dataclass(frozen=True)
class ThrowPlan:
    """Resolved geometry and timing of one throw."""

    throw: ThrowEvent
    start: Point
    end: Point
    duration: float
    catch_player_id: Optional[str]

    @property
    def release_time(self) -> float:
        return self.throw.release_time

    @property
    def end_time(self) -> float:
        return self.throw.release_time + self.duration

    @property
    def thrower_id(self) -> str:
        return self.throw.thrower_id


@dataclass(frozen=True)
class DiscFlight:
    x: float
    y: float
    rotation: float  # degrees


@dataclass(frozen=True)
class DiscState:
    """Where the disc is at a moment of the play."""

    holder_id: Optional[str]
    flight: Optional[DiscFlight] = None
    trail: tuple[Point, ...] = ()
    turnover_time: Optional[float] = None


def throw_speed(power: ThrowPower) -> float:
    return THROW_SPEEDS.get(power, THROW_SPEEDS[ThrowPower.MEDIUM])


def plan_throw(players: Sequence[Player], throw: ThrowEvent) -> Optional[ThrowPlan]:
    """Resolve a throw against the roster.

    Args:
        players: Roster snapshot
        throw: Scheduled throw

    Returns:
        ThrowPlan, or None when the thrower or the target cannot be resolved
    """
    thrower = find_player(players, throw.thrower_id)
    if thrower is None:
        return None

    at_release = player_position_at_time(thrower, throw.release_time)
    start = (at_release[0] + DISC_OFFSET[0], at_release[1] + DISC_OFFSET[1])

    receiver = None
    if throw.is_space_throw:
        target = throw.target_point
    else:
        receiver = find_player(players, throw.receiver_id)
        if receiver is None:
            return None
        target = player_position_at_time(receiver, throw.release_time)

    dx = target[0] - start[0]
    dy = target[1] - start[1]
    dist = math.hypot(dx, dy)
    duration = max(MIN_FLIGHT_TIME, max(MIN_TRAVEL, dist) / throw_speed(throw.power))

    if receiver is None:
        end = target
    elif dist < MIN_TRAVEL:
        dir_x = dx / dist if dist > 0 else 0.0
        dir_y = dy / dist if dist > 0 else 1.0
        end = (start[0] + dir_x * MIN_TRAVEL, start[1] + dir_y * MIN_TRAVEL)
    else:
        end = player_position_at_time(receiver, throw.release_time + duration)

    return ThrowPlan(
        throw=throw,
        start=start,
        end=end,
        duration=duration,
        catch_player_id=receiver.id if receiver is not None else None,
    )


def plan_throws(players: Sequence[Player], throws: Sequence[ThrowEvent]) -> list[ThrowPlan]:
    """Plan every resolvable throw, ordered by release time."""
    plans = [plan for plan in (plan_throw(players, t) for t in throws) if plan is not None]
    return sorted(plans, key=lambda plan: plan.release_time)


def disc_position(plan: ThrowPlan, time: float) -> Point:
    """Disc position along a throw's curved flight at ``time``."""
    t = min(1.0, max(0.0, (time - plan.release_time) / plan.duration))
    dx = plan.end[0] - plan.start[0]
    dy = plan.end[1] - plan.start[1]
    dist = math.hypot(dx, dy) or 1.0
    ux, uy = dx / dist, dy / dist
    px, py = -uy, ux
    curve = plan.throw.angle * dist * CURVE_FACTOR * math.sin(math.pi * t)
    return (plan.start[0] + dx * t + px * curve, plan.start[1] + dy * t + py * curve)


def _trail(plan: ThrowPlan, samples: int) -> tuple[Point, ...]:
    return tuple(
        disc_position(plan, plan.release_time + plan.duration * i / TRAIL_SAMPLES)
        for i in range(samples + 1)
    )


def disc_state_at(players: Sequence[Player], plans: Sequence[ThrowPlan], time: float) -> DiscState:
    """Disc holder, flight and trail at ``time``.

    Completed throws pass the disc to their receiver. A throw into space
    that lands ends the play as a turnover with no holder. While the disc is
    in the air the thrower is still reported as the holder.
    """
    initial = default_disc_holder(players)
    holder_id = initial.id if initial else None

    for plan in plans:
        if time < plan.release_time:
            break
        if time >= plan.end_time:
            if plan.catch_player_id is None:
                return DiscState(
                    holder_id=None,
                    trail=_trail(plan, TRAIL_SAMPLES),
                    turnover_time=plan.end_time,
                )
            holder_id = plan.catch_player_id
            continue

        position = disc_position(plan, time)
        angle = plan.throw.angle
        rotation = -45.0 if angle < -ROTATION_THRESHOLD else 45.0 if angle > ROTATION_THRESHOLD else 0.0
        progress = min(1.0, max(0.0, (time - plan.release_time) / plan.duration))
        return DiscState(
            holder_id=plan.thrower_id,
            flight=DiscFlight(position[0], position[1], rotation),
            trail=_trail(plan, max(1, math.floor(TRAIL_SAMPLES * progress))),
        )

    return DiscState(holder_id=holder_id)


def disc_holder_at(players: Sequence[Player], plans: Sequence[ThrowPlan], time: float) -> Optional[str]:
    """Id of the player holding (or throwing) the disc at ``time``."""
    return disc_state_at(players, plans, time).holder_id


def turnover_time(plans: Sequence[ThrowPlan]) -> Optional[float]:
    """Landing time of the first throw into space, if any."""
    for plan in plans:
        if plan.catch_player_id is None:
            return plan.end_time
    return None


def last_throw_end(plans: Sequence[ThrowPlan]) -> float:
    return max((plan.end_time for plan in plans), default=0.0)
