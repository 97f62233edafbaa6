# spatial/field.py

"""Fixed field dimensions, in yards.

Origin is the top-left corner: x runs across the field, y runs along it.
The endzone bands only matter for rendering.
"""

from playsim.models import Point

FIELD_WIDTH = 40.0
FIELD_LENGTH = 110.0
ENDZONE_DEPTH = 20.0
FIELD_MID_X = FIELD_WIDTH / 2

# Line between the playing field proper and the endzone at large y
ENDZONE_LINE = FIELD_LENGTH - ENDZONE_DEPTH


def clamp_to_field(point: Point) -> Point:
    """Clamp a point into x in [0, FIELD_WIDTH], y in [0, FIELD_LENGTH]."""
    return (
        min(FIELD_WIDTH, max(0.0, point[0])),
        min(FIELD_LENGTH, max(0.0, point[1])),
    )


def is_on_field(point: Point) -> bool:
    return 0.0 <= point[0] <= FIELD_WIDTH and 0.0 <= point[1] <= FIELD_LENGTH


def is_left_half(point: Point) -> bool:
    """True when the point lies in the half of the field with smaller x."""
    return point[0] < FIELD_MID_X
