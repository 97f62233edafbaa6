"""Roster records, configuration and infrastructure for the play simulator.

Simulation entry points live in ``playsim.simulation``; they are not
re-exported here so that ``spatial`` can depend on this package without an
import cycle.
"""

from .config import PlaysimConfig, SteeringConfig
from .exceptions import (
    FormationError,
    PlaybackException,
    PlaybackStateError,
    PlayerNotFoundError,
    PlaysimException,
    QueryValidationError,
    RosterException,
    RosterValidationError,
    SimulationException,
)
from .models import (
    DEFAULT_ACCELERATION,
    DEFAULT_SPEED,
    MAX_PLAYERS_PER_TEAM,
    CoverageStyle,
    Force,
    Player,
    Point,
    Role,
    SimulationQuery,
    Team,
    ThrowEvent,
    ThrowPower,
)

__all__ = [
    # Records
    "Player",
    "Point",
    "Team",
    "Force",
    "CoverageStyle",
    "Role",
    "ThrowEvent",
    "ThrowPower",
    "SimulationQuery",
    "DEFAULT_SPEED",
    "DEFAULT_ACCELERATION",
    "MAX_PLAYERS_PER_TEAM",
    # Configuration
    "PlaysimConfig",
    "SteeringConfig",
    # Exceptions
    "PlaysimException",
    "RosterException",
    "RosterValidationError",
    "PlayerNotFoundError",
    "SimulationException",
    "QueryValidationError",
    "PlaybackException",
    "PlaybackStateError",
    "FormationError",
]
