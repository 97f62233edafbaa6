# playsim/exceptions.py

"""Exception hierarchy for the play simulation engine."""


class PlaysimException(Exception):
    """Base exception for all playsim errors."""

    pass


# Roster Exceptions
class RosterException(PlaysimException):
    """Base exception for roster problems."""

    pass


class RosterValidationError(RosterException):
    """Raised when a roster snapshot breaks a roster invariant."""

    pass


class PlayerNotFoundError(RosterException):
    """Raised when a requested player is not part of the roster."""

    pass


# Simulation Exceptions
class SimulationException(PlaysimException):
    """Base exception for simulation queries."""

    pass


class QueryValidationError(SimulationException):
    """Raised when a positions-at-time query is outside its documented domain."""

    pass


# Playback Exceptions
class PlaybackException(PlaysimException):
    """Base exception for playback clock operations."""

    pass


class PlaybackStateError(PlaybackException):
    """Raised when the playback clock is in an invalid state for the requested operation."""

    pass


# Formation Exceptions
class FormationError(PlaysimException):
    """Raised when a preset formation or defensive assignment cannot be built."""

    pass
