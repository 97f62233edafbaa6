"""Tests for custom exception hierarchy."""

import pytest

from playsim.exceptions import (
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
from playsim.models import SimulationQuery, Team, validate_query, validate_roster


class TestExceptionHierarchy:
    """Test exception inheritance hierarchy."""

    def test_playsim_exception_is_base(self):
        """PlaysimException is the base for all custom exceptions."""
        assert issubclass(RosterException, PlaysimException)
        assert issubclass(SimulationException, PlaysimException)
        assert issubclass(PlaybackException, PlaysimException)
        assert issubclass(FormationError, PlaysimException)

    def test_roster_exception_hierarchy(self):
        """Roster exceptions inherit properly."""
        assert issubclass(RosterValidationError, RosterException)
        assert issubclass(PlayerNotFoundError, RosterException)

    def test_simulation_and_playback_hierarchy(self):
        """Query and playback exceptions inherit properly."""
        assert issubclass(QueryValidationError, SimulationException)
        assert issubclass(PlaybackStateError, PlaybackException)

    def test_catch_by_base(self):
        """Specific errors can be caught through the base class."""
        with pytest.raises(PlaysimException):
            raise PlayerNotFoundError("missing")


class TestRosterValidation:
    """Boundary checks raise the documented errors."""

    def test_duplicate_ids(self, make_offense):
        """Duplicate ids are rejected."""
        with pytest.raises(RosterValidationError, match="Duplicate"):
            validate_roster([make_offense("O1", 10, 10), make_offense("O1", 20, 20)])

    def test_negative_speed(self, make_offense):
        """Negative speed or acceleration is rejected."""
        with pytest.raises(RosterValidationError):
            validate_roster([make_offense("O1", 10, 10, speed=-1.0)])
        with pytest.raises(RosterValidationError):
            validate_roster([make_offense("O1", 10, 10, acceleration=-1.0)])

    def test_repeated_path_points(self, make_offense):
        """Consecutive duplicate points, including the rest position, are rejected."""
        with pytest.raises(RosterValidationError):
            validate_roster([make_offense("O1", 10, 10, path=[(10, 10), (20, 20)])])
        with pytest.raises(RosterValidationError):
            validate_roster([make_offense("O1", 10, 10, path=[(20, 20), (20, 20)])])

    def test_team_size(self, make_offense):
        """No team may field more than seven players."""
        players = [make_offense(f"O{i}", i, 10) for i in range(8)]
        with pytest.raises(RosterValidationError):
            validate_roster(players)

    def test_single_disc_holder(self, make_offense):
        """Only one offensive player may hold the disc."""
        with pytest.raises(RosterValidationError):
            validate_roster(
                [make_offense("O1", 10, 10, has_disc=True), make_offense("O2", 20, 10, has_disc=True)]
            )

    def test_valid_roster(self, make_offense, make_defense):
        """A well-formed roster passes, dangling coverage included."""
        validate_roster([make_offense("O1", 10, 10, path=[(10, 20)]), make_defense("D1", 11, 9, covers="gone")])

    def test_negative_query_time(self, make_offense):
        """Negative query times are rejected."""
        query = SimulationQuery(players=(make_offense("O1", 10, 10),), time=-1.0)
        with pytest.raises(QueryValidationError):
            validate_query(query)
        assert query.players[0].team == Team.OFFENSE
