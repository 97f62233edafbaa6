"""Pytest configuration and shared fixtures."""

import pytest

from playsim.config import SteeringConfig
from playsim.models import Player, Role, Team
from playsim.time import PlaybackClock


@pytest.fixture
def steering_config():
    """Default steering constants."""
    return SteeringConfig()


@pytest.fixture
def make_offense():
    """Factory for offensive players."""

    def _make(player_id, x, y, path=(), label=None, **kwargs):
        return Player(
            id=player_id,
            team=Team.OFFENSE,
            x=float(x),
            y=float(y),
            label=label or player_id,
            path=tuple(path),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_defense():
    """Factory for defensive players."""

    def _make(player_id, x, y, covers=None, label=None, style=None, **kwargs):
        return Player(
            id=player_id,
            team=Team.DEFENSE,
            x=float(x),
            y=float(y),
            label=label or player_id,
            covers_offense_id=covers,
            coverage_style=style,
            **kwargs,
        )

    return _make


@pytest.fixture
def holder_and_cutter(make_offense):
    """Disc holder at (20, 88) and a cutter at (20, 70) running deep to (20, 40)."""
    holder = make_offense("O1", 20, 88, has_disc=True, role=Role.HANDLER)
    cutter = make_offense("O2", 20, 70, path=[(20, 40)], role=Role.CUTTER)
    return holder, cutter


@pytest.fixture
def playback_clock():
    """Playback clock for a five second play."""
    return PlaybackClock(duration=5.0, time_scale=1.0, frame_interval=0.01)
