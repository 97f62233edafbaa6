# playsim/models.py

"""Roster records consumed by the simulation engine.

Rosters are immutable snapshots: the engine reads them for one query and
never mutates a player. Editing surfaces build new snapshots instead.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from .exceptions import QueryValidationError, RosterValidationError

# Type alias for a point on the field, in yards
Point = tuple[float, float]

DEFAULT_SPEED = 8.5  # yd/s
DEFAULT_ACCELERATION = 7.0  # yd/s^2
MAX_PLAYERS_PER_TEAM = 7


class Team(str, Enum):
    """Side of the disc a player is on."""

    OFFENSE = "offense"
    DEFENSE = "defense"


class Force(str, Enum):
    """Field-side bias for defensive positioning.

    HOME and AWAY always force toward a fixed sideline; MIDDLE and SIDELINE
    depend on which half of the field width the disc is in.
    """

    HOME = "home"
    AWAY = "away"
    MIDDLE = "middle"
    SIDELINE = "sideline"


class CoverageStyle(str, Enum):
    """How a defender plays a cutter."""

    UNDER = "under"
    DEEP = "deep"


class Role(str, Enum):
    """Offensive role, used for resting defender placement."""

    HANDLER = "handler"
    CUTTER = "cutter"


class ThrowPower(str, Enum):
    """Throw power setting."""

    SOFT = "soft"
    MEDIUM = "medium"
    HARD = "hard"


def parse_point(value: Any) -> Point:
    """Validate and normalize a point to an (x, y) tuple.

    Args:
        value: Point data (list, tuple, or dict with x/y keys)

    Returns:
        Normalized (x, y) tuple

    Raises:
        ValueError: If point format is invalid
    """
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"Point must have 2 coordinates, got {len(value)}")
        return (float(value[0]), float(value[1]))
    elif isinstance(value, dict):
        x = value.get("x", value.get("X"))
        y = value.get("y", value.get("Y"))
        if x is None or y is None:
            raise ValueError("Point dict must have 'x' and 'y' keys")
        return (float(x), float(y))
    else:
        raise ValueError(f"Invalid point type: {type(value)}")


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Player:
    """A player token on the field.

    The rest position (x, y) is the implicit first point of the path and is
    never stored in ``path`` itself.
    """

    id: str
    team: Team
    x: float
    y: float
    label: str
    path: tuple[Point, ...] = ()
    path_start_offset: float = 0.0
    speed: float = DEFAULT_SPEED
    acceleration: float = DEFAULT_ACCELERATION
    has_disc: bool = False
    role: Optional[Role] = None
    auto_assigned: bool = False
    covers_offense_id: Optional[str] = None
    coverage_style: Optional[CoverageStyle] = None

    @property
    def position(self) -> Point:
        """Rest position as an (x, y) tuple."""
        return (self.x, self.y)

    @property
    def is_offense(self) -> bool:
        return self.team == Team.OFFENSE

    @property
    def is_defense(self) -> bool:
        return self.team == Team.DEFENSE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Player":
        """Build a player from its dict form (camelCase or snake_case keys)."""
        role = _pick(data, "role")
        coverage = _pick(data, "coverage_style", "cutterDefense")
        return cls(
            id=str(data["id"]),
            team=Team(data["team"]),
            x=float(data["x"]),
            y=float(data["y"]),
            label=str(data.get("label", "")),
            path=tuple(parse_point(p) for p in data.get("path") or ()),
            path_start_offset=float(_pick(data, "path_start_offset", "pathStartOffset", default=0.0)),
            speed=float(_pick(data, "speed", default=DEFAULT_SPEED)),
            acceleration=float(_pick(data, "acceleration", default=DEFAULT_ACCELERATION)),
            has_disc=bool(_pick(data, "has_disc", "hasDisc", default=False)),
            role=Role(role) if role else None,
            auto_assigned=bool(_pick(data, "auto_assigned", "autoAssigned", default=False)),
            covers_offense_id=_pick(data, "covers_offense_id", "coversOffenseId"),
            coverage_style=CoverageStyle(coverage) if coverage else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict with snake_case keys."""
        return {
            "id": self.id,
            "team": self.team.value,
            "x": self.x,
            "y": self.y,
            "label": self.label,
            "path": [{"x": p[0], "y": p[1]} for p in self.path],
            "path_start_offset": self.path_start_offset,
            "speed": self.speed,
            "acceleration": self.acceleration,
            "has_disc": self.has_disc,
            "role": self.role.value if self.role else None,
            "auto_assigned": self.auto_assigned,
            "covers_offense_id": self.covers_offense_id,
            "coverage_style": self.coverage_style.value if self.coverage_style else None,
        }


@dataclass(frozen=True)
class ThrowEvent:
    """A scheduled throw from one offensive player.

    Throws to a receiver end at the receiver; throws into space (no
    receiver, ``target_point`` set) end at the target point.
    """

    id: str
    thrower_id: str
    release_time: float
    receiver_id: Optional[str] = None
    angle: float = 0.0  # -1 (inside-out) to 1 (outside-in)
    power: ThrowPower = ThrowPower.MEDIUM
    target_point: Optional[Point] = None

    @property
    def is_space_throw(self) -> bool:
        return self.target_point is not None and self.receiver_id is None


@dataclass(frozen=True)
class SimulationQuery:
    """Input of one positions-at-time computation.

    ``time`` of None means "not animating": rest positions are returned.
    """

    players: tuple[Player, ...]
    time: Optional[float]
    force: Force = Force.HOME
    disc_holder_id: Optional[str] = None
    throws: tuple[ThrowEvent, ...] = field(default_factory=tuple)


def offense_of(players: Iterable[Player]) -> list[Player]:
    """Offensive players in roster order."""
    return [p for p in players if p.is_offense]


def defense_of(players: Iterable[Player]) -> list[Player]:
    """Defensive players in roster order."""
    return [p for p in players if p.is_defense]


def find_player(players: Iterable[Player], player_id: Optional[str]) -> Optional[Player]:
    """Look up a player by id, None when absent."""
    if player_id is None:
        return None
    for player in players:
        if player.id == player_id:
            return player
    return None


def default_disc_holder(players: Sequence[Player]) -> Optional[Player]:
    """The offensive player flagged with the disc, else the first offense."""
    offense = offense_of(players)
    for player in offense:
        if player.has_disc:
            return player
    return offense[0] if offense else None


def validate_roster(players: Sequence[Player]) -> None:
    """Check roster invariants at the boundary.

    Dangling coverage references are allowed; the matching resolver falls
    back to label and proximity heuristics for them.

    Raises:
        RosterValidationError: If any invariant is broken
    """
    seen: set[str] = set()
    for player in players:
        if player.id in seen:
            raise RosterValidationError(f"Duplicate player id: {player.id}")
        seen.add(player.id)

        if player.speed < 0:
            raise RosterValidationError(f"Player {player.id} has negative speed {player.speed}")
        if player.acceleration < 0:
            raise RosterValidationError(
                f"Player {player.id} has negative acceleration {player.acceleration}"
            )

        previous = player.position
        for point in player.path:
            if point == previous:
                raise RosterValidationError(
                    f"Player {player.id} path repeats point {point} consecutively"
                )
            previous = point

    for team in Team:
        count = sum(1 for p in players if p.team == team)
        if count > MAX_PLAYERS_PER_TEAM:
            raise RosterValidationError(
                f"Team {team.value} has {count} players, max is {MAX_PLAYERS_PER_TEAM}"
            )

    holders = [p.id for p in players if p.is_offense and p.has_disc]
    if len(holders) > 1:
        raise RosterValidationError(f"More than one disc holder: {', '.join(holders)}")


def validate_query(query: SimulationQuery) -> None:
    """Check a query and its roster at the boundary.

    Raises:
        RosterValidationError: If the roster breaks an invariant
        QueryValidationError: If the query time is negative
    """
    validate_roster(query.players)
    if query.time is not None and query.time < 0:
        raise QueryValidationError(f"Query time must be >= 0, got {query.time}")
