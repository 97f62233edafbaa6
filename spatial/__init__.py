# spatial/__init__.py

"""Spatial layer for playsim - path kinematics, defender steering and field geometry."""

from .field import (
    ENDZONE_DEPTH,
    ENDZONE_LINE,
    FIELD_LENGTH,
    FIELD_MID_X,
    FIELD_WIDTH,
    clamp_to_field,
)
from .force import (
    break_side_offset,
    defender_rest_position,
    dump_offset,
    force_lateral_offset,
    mark_position,
)
from .geometry import calculate_distance, normalize_vector, point_segment_distance
from .index import SpatialIndex
from .kinematics import (
    path_duration,
    player_position_at_time,
    position_at_time,
    segment_profile,
    vertex_speeds,
)
from .matching import resolve_assignments, resolve_matched_offense
from .steering import DefenderSteering, defender_position_at_time
from .throws import DiscState, ThrowPlan, disc_state_at, plan_throws

__all__ = [
    # Field
    "FIELD_WIDTH",
    "FIELD_LENGTH",
    "FIELD_MID_X",
    "ENDZONE_DEPTH",
    "ENDZONE_LINE",
    "clamp_to_field",
    # Geometry
    "calculate_distance",
    "normalize_vector",
    "point_segment_distance",
    "SpatialIndex",
    # Kinematics
    "position_at_time",
    "player_position_at_time",
    "path_duration",
    "segment_profile",
    "vertex_speeds",
    # Defense
    "force_lateral_offset",
    "break_side_offset",
    "dump_offset",
    "mark_position",
    "defender_rest_position",
    "resolve_matched_offense",
    "resolve_assignments",
    "DefenderSteering",
    "defender_position_at_time",
    # Throws
    "ThrowPlan",
    "DiscState",
    "plan_throws",
    "disc_state_at",
]
