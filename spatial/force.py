# spatial/force.py

"""Force-direction geometry for defensive placement.

Pure helpers shared by resting defender placement and the steering
simulator's marking logic, so both produce identical targets for identical
inputs.
"""

from typing import Optional

from playsim.models import CoverageStyle, Force, Player, Point, Role

from .field import is_left_half
from .geometry import EPSILON, calculate_distance

FORCE_LATERAL_OFFSET = 3.0  # yards toward the force side
MAX_DEFENDER_CUSHION = 2.5  # yards from the covered player at rest

MARK_BREAK_OFFSET = 2.0
MARK_DEPTH = 2.0
HANDLER_PULL = 0.25  # fraction of the way toward the disc holder
HANDLER_DEPTH = 3.0
UNDER_DEPTH = 3.0
DEEP_DEPTH = 4.0


def force_lateral_offset(point: Point, force: Force) -> float:
    """Lateral offset toward the force side at ``point``.

    Args:
        point: Point whose field half decides MIDDLE and SIDELINE
        force: Current force setting

    Returns:
        Signed x offset in yards
    """
    if force == Force.HOME:
        return -FORCE_LATERAL_OFFSET
    if force == Force.AWAY:
        return FORCE_LATERAL_OFFSET
    if force == Force.MIDDLE:
        return FORCE_LATERAL_OFFSET if is_left_half(point) else -FORCE_LATERAL_OFFSET
    return -FORCE_LATERAL_OFFSET if is_left_half(point) else FORCE_LATERAL_OFFSET


def break_side_offset(point: Point, magnitude: float, force: Force) -> float:
    """Lateral offset of ``magnitude`` toward the break (non-force) side."""
    if force == Force.HOME:
        return magnitude
    if force == Force.AWAY:
        return -magnitude
    if force == Force.MIDDLE:
        return -magnitude if is_left_half(point) else magnitude
    return magnitude if is_left_half(point) else -magnitude


def break_side_sign(point: Point, force: Force) -> float:
    """+1 or -1: the x direction of the break side at ``point``."""
    return 1.0 if break_side_offset(point, 1.0, force) > 0 else -1.0


def dump_offset(force: Force) -> float:
    """Lateral offset of the dump handler behind a vertical stack."""
    if force == Force.HOME:
        return 8.0
    if force == Force.AWAY:
        return -8.0
    if force == Force.MIDDLE:
        return 12.0
    return 0.0


def clamp_cushion(anchor: Point, point: Point, max_distance: float = MAX_DEFENDER_CUSHION) -> Point:
    """Pull ``point`` back to within ``max_distance`` of ``anchor``."""
    dx = point[0] - anchor[0]
    dy = point[1] - anchor[1]
    dist = (dx * dx + dy * dy) ** 0.5
    if dist <= max_distance or dist < EPSILON:
        return point
    scale = max_distance / dist
    return (anchor[0] + dx * scale, anchor[1] + dy * scale)


def mark_position(
    holder: Point,
    force: Force,
    lateral: float = MARK_BREAK_OFFSET,
    depth: float = MARK_DEPTH,
    max_cushion: float = MAX_DEFENDER_CUSHION,
) -> Point:
    """Canonical mark point: break side of the holder, slightly toward -y."""
    return clamp_cushion(
        holder,
        (holder[0] + break_side_offset(holder, lateral, force), holder[1] - depth),
        max_cushion,
    )


def downfield_sign(target: Point, holder: Optional[Point]) -> float:
    """y direction pointing from the disc holder past the target.

    Defaults to -1 without a holder or when they are level.
    """
    if holder is None:
        return -1.0
    return 1.0 if target[1] > holder[1] else -1.0


def defender_rest_position(
    offense: Player,
    disc_holder: Optional[Player],
    force: Force,
    coverage_style: Optional[CoverageStyle] = None,
) -> Point:
    """Resting spot for a defender assigned to ``offense``.

    The holder gets a mark on the break side, other handlers are shaded
    toward the disc, cutters are played under or deep on the force side.
    Every placement stays within MAX_DEFENDER_CUSHION of the covered player.

    Args:
        offense: Covered offensive player
        disc_holder: Current disc holder, if any
        force: Current force setting
        coverage_style: UNDER (default) or DEEP for cutters

    Returns:
        (x, y) rest position
    """
    op = offense.position
    if disc_holder is not None and offense.id == disc_holder.id:
        return mark_position(op, force)

    role = offense.role or Role.CUTTER
    if role == Role.HANDLER and disc_holder is not None:
        dx = disc_holder.x - offense.x
        dy = disc_holder.y - offense.y
        return clamp_cushion(
            op,
            (offense.x + dx * HANDLER_PULL, offense.y + dy * HANDLER_PULL - HANDLER_DEPTH),
        )

    sign = downfield_sign(op, disc_holder.position if disc_holder else None)
    depth = DEEP_DEPTH if coverage_style == CoverageStyle.DEEP else -UNDER_DEPTH
    return clamp_cushion(
        op,
        (offense.x + force_lateral_offset(op, force), offense.y + depth * sign),
    )


def keep_clear(center: Point, point: Point, radius: float, fallback: Point = (0.0, -1.0)) -> Point:
    """Push ``point`` out to at least ``radius`` from ``center``.

    Args:
        center: Point to stay away from
        point: Candidate point
        radius: Minimum distance
        fallback: Direction used when point coincides with center

    Returns:
        ``point`` unchanged when already far enough, else the point on the
        circle in the same direction
    """
    dist = calculate_distance(center, point)
    if dist >= radius:
        return point
    if dist < EPSILON:
        dx, dy = fallback
        length = (dx * dx + dy * dy) ** 0.5
        if length < EPSILON:
            dx, dy, length = 0.0, -1.0, 1.0
        return (center[0] + dx / length * radius, center[1] + dy / length * radius)
    scale = radius / dist
    return (center[0] + (point[0] - center[0]) * scale, center[1] + (point[1] - center[1]) * scale)
