# spatial/matching.py

"""Resolve which offensive player a defender is guarding.

Strategies are tried in priority order and the first hit wins:

1. the defender's explicit coverage relation, if that player still exists
2. the offense sharing the defender's trailing label number ("D3" -> "O3")
3. the nearest offense by rest position

The label heuristic assumes both teams share a numbering convention. Rosters
with freeform or renumbered labels can silently mismatch at step 2.
"""

import re
from typing import Callable, Optional, Sequence

from playsim.models import Player, offense_of

from .index import SpatialIndex

MatchStrategy = Callable[[Player, Sequence[Player]], Optional[Player]]

_TRAILING_NUMBER = re.compile(r"(\d+)\s*$")


def label_number(label: str) -> Optional[int]:
    """Trailing integer of a label, None when there is none."""
    match = _TRAILING_NUMBER.search(label or "")
    return int(match.group(1)) if match else None


def match_by_coverage(defender: Player, offense: Sequence[Player]) -> Optional[Player]:
    if defender.covers_offense_id is None:
        return None
    for player in offense:
        if player.id == defender.covers_offense_id:
            return player
    return None


def match_by_label_number(defender: Player, offense: Sequence[Player]) -> Optional[Player]:
    number = label_number(defender.label)
    if number is None:
        return None
    for player in offense:
        if label_number(player.label) == number:
            return player
    return None


def match_by_proximity(defender: Player, offense: Sequence[Player]) -> Optional[Player]:
    if not offense:
        return None
    index = SpatialIndex((p.id, p.position) for p in offense)
    nearest = index.nearest(defender.position, 1)
    if not nearest:
        return None
    by_id = {p.id: p for p in offense}
    return by_id[nearest[0]]


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    match_by_coverage,
    match_by_label_number,
    match_by_proximity,
)


def resolve_matched_offense(
    defender: Player,
    players: Sequence[Player],
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> Optional[Player]:
    """Find the offensive player a defender reacts to.

    Args:
        defender: Defensive player
        players: Full roster snapshot
        strategies: Resolver chain, highest priority first

    Returns:
        Matched offensive player, or None when the roster has no offense
    """
    offense = offense_of(players)
    if not offense:
        return None
    for strategy in strategies:
        matched = strategy(defender, offense)
        if matched is not None:
            return matched
    return None


def resolve_assignments(
    players: Sequence[Player],
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> dict[str, str]:
    """Map every resolvable defender id to its matched offense id."""
    assignments = {}
    for player in players:
        if not player.is_defense:
            continue
        matched = resolve_matched_offense(player, players, strategies)
        if matched is not None:
            assignments[player.id] = matched.id
    return assignments
