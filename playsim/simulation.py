# playsim/simulation.py

"""Positions-at-time queries over a roster snapshot.

Offense positions come straight from the path evaluator. Every defender is
re-simulated from t=0 for each query, so identical queries always return
identical positions.
"""

from typing import Optional, Sequence

from spatial.field import clamp_to_field
from spatial.kinematics import player_position_at_time
from spatial.matching import resolve_matched_offense
from spatial.steering import defender_position_at_time
from spatial.throws import (
    DiscState,
    ThrowPlan,
    disc_state_at,
    last_throw_end,
    plan_throws,
    turnover_time,
)

from .config import SteeringConfig
from .exceptions import PlayerNotFoundError
from .logging import get_logger
from .models import (
    Force,
    Player,
    Point,
    SimulationQuery,
    ThrowEvent,
    default_disc_holder,
    find_player,
    offense_of,
)

logger = get_logger(__name__)

# Base play length estimate: paths at 90% of top speed, plus a settle tail
DURATION_SPEED_FACTOR = 0.9
DURATION_TAIL = 1.5


def estimated_play_duration(players: Sequence[Player], plans: Sequence[ThrowPlan] = ()) -> float:
    """Playback length for a play.

    Args:
        players: Roster snapshot
        plans: Planned throws

    Returns:
        Seconds of playback: the longest path estimate plus a tail, or the
        end of the last throw if that is later
    """
    longest = 0.0
    for player in players:
        if not player.path or player.speed <= 0:
            continue
        points = [player.position, *player.path]
        total = 0.0
        for p1, p2 in zip(points, points[1:]):
            length = ((p2[0] - p1[0]) ** 2 + (p2[1] - p1[1]) ** 2) ** 0.5
            total += length / (player.speed * DURATION_SPEED_FACTOR)
        if player.is_offense:
            total += max(0.0, player.path_start_offset)
        longest = max(longest, total)
    return max(longest + DURATION_TAIL, last_throw_end(plans))


class PlaySimulation:
    """A play ready to be queried frame by frame.

    Holds the roster snapshot, force and planned throws. Queries never
    mutate it.
    """

    def __init__(
        self,
        players: Sequence[Player],
        force: Force = Force.HOME,
        throws: Sequence[ThrowEvent] = (),
        config: Optional[SteeringConfig] = None,
    ):
        self.players = tuple(players)
        self.force = force
        self.config = config or SteeringConfig()
        self.throw_plans = plan_throws(self.players, throws)

    @property
    def duration(self) -> float:
        return estimated_play_duration(self.players, self.throw_plans)

    @property
    def turnover_time(self) -> Optional[float]:
        return turnover_time(self.throw_plans)

    def disc_state_at(self, time: float) -> DiscState:
        return disc_state_at(self.players, self.throw_plans, time)

    def disc_holder_at(self, time: Optional[float], disc_holder_id: Optional[str] = None) -> Optional[Player]:
        """Resolve the disc holder for a query.

        An explicit holder id wins when it names an offensive player. Otherwise
        throws decide the holder at ``time``, falling back to the player
        flagged with the disc (or the first offense).
        """
        offense = offense_of(self.players)
        explicit = find_player(offense, disc_holder_id)
        if explicit is not None:
            return explicit
        if self.throw_plans and time is not None:
            return find_player(offense, self.disc_state_at(time).holder_id)
        return default_disc_holder(self.players)

    def positions_at_time(
        self,
        time: Optional[float],
        disc_holder_id: Optional[str] = None,
    ) -> dict[str, Point]:
        """Position of every player at ``time``.

        Args:
            time: Elapsed play time in seconds, or None when not animating
            disc_holder_id: Optional explicit disc holder

        Returns:
            Mapping of player id to (x, y), clamped to the field
        """
        if time is None:
            return {player.id: player.position for player in self.players}

        holder = self.disc_holder_at(time, disc_holder_id)
        positions: dict[str, Point] = {}
        for player in self.players:
            if player.is_offense:
                point = player_position_at_time(player, time)
            else:
                matched = resolve_matched_offense(player, self.players)
                point = defender_position_at_time(
                    player, matched, holder, self.force, time, self.config
                )
            positions[player.id] = clamp_to_field(point)

        logger.debug(
            "simulation.query",
            time=time,
            players=len(self.players),
            disc_holder=holder.id if holder else None,
        )
        return positions

    def position_of(self, player_id: str, time: Optional[float]) -> Point:
        """Position of a single player at ``time``.

        Raises:
            PlayerNotFoundError: If the id is not in the roster
        """
        player = find_player(self.players, player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player {player_id} is not in the roster")
        if time is None:
            return player.position
        if player.is_offense:
            return clamp_to_field(player_position_at_time(player, time))
        holder = self.disc_holder_at(time)
        matched = resolve_matched_offense(player, self.players)
        return clamp_to_field(
            defender_position_at_time(player, matched, holder, self.force, time, self.config)
        )


def positions_at_time(
    query: SimulationQuery,
    config: Optional[SteeringConfig] = None,
) -> dict[str, Point]:
    """Answer one positions-at-time query.

    Args:
        query: Roster snapshot, time, force, optional disc holder and throws
        config: Steering constants

    Returns:
        Mapping of player id to (x, y)
    """
    simulation = PlaySimulation(query.players, query.force, query.throws, config)
    return simulation.positions_at_time(query.time, query.disc_holder_id)
