# playsim/formations.py

"""Preset offensive formations and defender auto-assignment."""

from enum import Enum
from typing import Callable, Optional, Sequence
from uuid import uuid4

from spatial.field import ENDZONE_LINE, FIELD_MID_X, FIELD_WIDTH
from spatial.force import defender_rest_position, dump_offset

from .exceptions import FormationError, PlayerNotFoundError
from .logging import get_logger
from .models import (
    DEFAULT_ACCELERATION,
    DEFAULT_SPEED,
    MAX_PLAYERS_PER_TEAM,
    CoverageStyle,
    Force,
    Player,
    Role,
    Team,
    default_disc_holder,
    defense_of,
    find_player,
    offense_of,
)

logger = get_logger(__name__)

IdFactory = Callable[[int], str]


class Formation(str, Enum):
    """Preset offensive sets."""

    VERTICAL = "vertical"
    SIDE = "side"
    HO = "ho"


def _new_id(_: int) -> str:
    return uuid4().hex


def _formation_points(formation: Formation, force: Force) -> tuple[list[tuple[float, float]], int]:
    """Offense positions for a preset and how many of them are cutters."""
    if formation == Formation.VERTICAL:
        stack_x = FIELD_MID_X
        cutters = [(stack_x, ENDZONE_LINE - depth) for depth in (12, 16, 20, 24, 28)]
        center_handler = (stack_x, ENDZONE_LINE - 2)
        dump_handler = (stack_x + dump_offset(force), ENDZONE_LINE + 3)
        return cutters + [center_handler, dump_handler], 5

    if formation == Formation.SIDE:
        stack_x = FIELD_WIDTH - 6
        cutters = [(stack_x, ENDZONE_LINE - depth) for depth in (8, 13, 18, 23, 28)]
        handlers = [(16.0, ENDZONE_LINE - 2), (22.0, ENDZONE_LINE - 4)]
        return cutters + handlers, 5

    handlers = [(FIELD_MID_X + dx, ENDZONE_LINE - 2) for dx in (-12, 0, 12)]
    cutters = [(float(x), ENDZONE_LINE - 20) for x in (6, 14, 26, 34)]
    return handlers + cutters, 4


def build_preset_formation(
    formation: Formation,
    force: Force = Force.HOME,
    make_id: IdFactory = _new_id,
) -> list[Player]:
    """Build the seven offensive players of a preset formation.

    Args:
        formation: Preset to build
        force: Force setting (moves the dump handler in a vertical stack)
        make_id: Id factory, called with the player index

    Returns:
        Offensive players labeled O1..O7

    Raises:
        FormationError: If the formation is unknown
    """
    try:
        formation = Formation(formation)
    except ValueError as exc:
        raise FormationError(f"Unknown formation: {formation}") from exc
    points, cutter_count = _formation_points(formation, force)

    players = []
    for idx, (x, y) in enumerate(points[:MAX_PLAYERS_PER_TEAM]):
        if formation == Formation.HO:
            role = Role.HANDLER if idx <= 2 else Role.CUTTER
            has_disc = y == ENDZONE_LINE - 2 and x == FIELD_MID_X
        else:
            role = Role.CUTTER if idx < cutter_count else Role.HANDLER
            has_disc = formation == Formation.VERTICAL and idx == 5
        players.append(
            Player(
                id=make_id(idx),
                team=Team.OFFENSE,
                x=float(x),
                y=float(y),
                label=f"O{idx + 1}",
                speed=DEFAULT_SPEED,
                acceleration=DEFAULT_ACCELERATION,
                has_disc=has_disc,
                role=role,
            )
        )

    logger.info("formation.built", formation=formation.value, force=force.value, players=len(players))
    return players


def auto_assign_defense(
    players: Sequence[Player],
    force: Force,
    make_id: IdFactory = _new_id,
) -> list[Player]:
    """Replace auto-assigned defenders with a fresh set covering the offense.

    Manually placed defenders are kept. New defenders cover offense in
    roster order until the defense is full, are placed with
    ``defender_rest_position`` and play cutters under.

    Args:
        players: Current roster
        force: Current force setting
        make_id: Id factory, called with the new defender's index

    Returns:
        New roster: offense, manual defense, then auto-assigned defense
    """
    offense = offense_of(players)
    if not offense:
        return list(players)

    holder = default_disc_holder(players)
    manual = [p for p in defense_of(players) if not p.auto_assigned]
    to_add = max(0, min(len(offense), MAX_PLAYERS_PER_TEAM - len(manual)))

    new_defenders = []
    for idx, op in enumerate(offense[:to_add]):
        style = CoverageStyle.UNDER if (op.role or Role.CUTTER) == Role.CUTTER else None
        x, y = defender_rest_position(op, holder, force, style)
        new_defenders.append(
            Player(
                id=make_id(idx),
                team=Team.DEFENSE,
                x=x,
                y=y,
                label=f"D{len(manual) + idx + 1}",
                speed=op.speed,
                acceleration=op.acceleration,
                auto_assigned=True,
                covers_offense_id=op.id,
                coverage_style=style,
            )
        )

    logger.info(
        "defense.auto_assigned",
        force=force.value,
        manual=len(manual),
        added=len(new_defenders),
    )
    non_defense = [p for p in players if not p.is_defense]
    return non_defense + manual + new_defenders


def _replace(player: Player, **changes) -> Player:
    data = {**player.__dict__, **changes}
    return Player(**data)


def refresh_auto_assigned(
    players: Sequence[Player],
    force: Force,
    formation: Optional[Formation] = None,
) -> list[Player]:
    """Re-place auto-assigned defenders, e.g. after the force changes.

    In a vertical stack the dump handler (O7) is moved to the dump side of
    the new force first. Defenders whose covered player no longer exists are
    left where they are.
    """
    if formation == Formation.VERTICAL:
        dump_x = FIELD_MID_X + dump_offset(force)
        players = [
            _replace(p, x=dump_x) if p.is_offense and p.label == "O7" and p.x != dump_x else p
            for p in players
        ]

    offense = offense_of(players)
    holder = default_disc_holder(players)
    refreshed = []
    for player in players:
        covered: Optional[Player] = None
        if player.is_defense and player.auto_assigned:
            covered = find_player(offense, player.covers_offense_id)
        if covered is None:
            refreshed.append(player)
            continue
        x, y = defender_rest_position(covered, holder, force, player.coverage_style)
        refreshed.append(player if (x, y) == player.position else _replace(player, x=x, y=y))
    return refreshed


def set_coverage_style(
    players: Sequence[Player],
    defender_id: str,
    style: CoverageStyle,
    force: Force,
) -> list[Player]:
    """Switch a defender between under and deep coverage.

    Defenders covering an existing offense are re-placed for the new style.

    Raises:
        PlayerNotFoundError: If ``defender_id`` is not a defender in the roster
    """
    defender = find_player(defense_of(players), defender_id)
    if defender is None:
        raise PlayerNotFoundError(f"Defender {defender_id} is not in the roster")

    offense = offense_of(players)
    holder = default_disc_holder(players)
    updated = _replace(defender, coverage_style=style)
    covered = find_player(offense, defender.covers_offense_id)
    if covered is not None:
        x, y = defender_rest_position(covered, holder, force, style)
        updated = _replace(updated, x=x, y=y)

    return [updated if p.id == defender_id else p for p in players]
