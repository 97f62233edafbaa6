"""Tests for the defender matching resolver chain."""

from playsim.models import Team
from spatial.matching import (
    label_number,
    match_by_coverage,
    match_by_label_number,
    match_by_proximity,
    resolve_assignments,
    resolve_matched_offense,
)


class TestLabelNumber:
    def test_trailing_digits(self):
        """Trailing digits are parsed, anything else is ignored."""
        assert label_number("D3") == 3
        assert label_number("Cutter 12") == 12
        assert label_number("Mark") is None
        assert label_number("") is None


class TestResolverChain:
    """Coverage relation, then label number, then proximity."""

    def test_coverage_relation_wins(self, make_offense, make_defense):
        """An explicit coverage relation beats a matching label."""
        o1 = make_offense("o-1", 10, 50, label="O1")
        o2 = make_offense("o-2", 30, 50, label="O2")
        d1 = make_defense("d-1", 10, 48, covers="o-2", label="D1")
        assert resolve_matched_offense(d1, [o1, o2, d1]) is o2

    def test_dangling_coverage_falls_back_to_label(self, make_offense, make_defense):
        """A coverage relation to a deleted player falls through to the label."""
        o1 = make_offense("o-1", 10, 50, label="O1")
        o2 = make_offense("o-2", 30, 50, label="O2")
        d2 = make_defense("d-2", 10, 48, covers="deleted", label="D2")
        assert match_by_coverage(d2, [o1, o2]) is None
        assert resolve_matched_offense(d2, [o1, o2, d2]) is o2

    def test_label_number_match(self, make_offense, make_defense):
        """Defenders without a relation pair with the same label number."""
        o1 = make_offense("o-1", 10, 50, label="O1")
        o3 = make_offense("o-3", 30, 50, label="O3")
        d3 = make_defense("d-3", 10, 48, label="D3")
        assert match_by_label_number(d3, [o1, o3]) is o3

    def test_proximity_fallback(self, make_offense, make_defense):
        """Without a relation or label number the nearest offense is used."""
        near = make_offense("near", 12, 50, label="Cutter")
        far = make_offense("far", 35, 90, label="Handler")
        mark = make_defense("mark", 10, 50, label="Mark")
        assert resolve_matched_offense(mark, [far, near, mark]) is near

    def test_proximity_tie_uses_roster_order(self, make_offense, make_defense):
        """Equidistant offense resolves to the earlier player in the roster."""
        left = make_offense("left", 15, 50, label="A")
        right = make_offense("right", 25, 50, label="B")
        d = make_defense("d", 20, 50, label="X")
        assert resolve_matched_offense(d, [left, right, d]) is left
        assert resolve_matched_offense(d, [right, left, d]) is right

    def test_no_offense(self, make_defense):
        """Defense-only rosters resolve to nothing."""
        d = make_defense("d", 20, 50, label="D1")
        assert resolve_matched_offense(d, [d]) is None

    def test_custom_strategy_chain(self, make_offense, make_defense):
        """The chain can be replaced, e.g. to disable the label heuristic."""
        o1 = make_offense("o-1", 30, 50, label="O1")
        o2 = make_offense("o-2", 11, 50, label="O2")
        d1 = make_defense("d-1", 10, 50, label="D1")
        assert resolve_matched_offense(d1, [o1, o2, d1]) is o1

        chain = (match_by_coverage, match_by_proximity)
        assert resolve_matched_offense(d1, [o1, o2, d1], chain) is o2


class TestResolveAssignments:
    def test_maps_every_defender(self, make_offense, make_defense):
        """Assignments map defender ids to offense ids."""
        o1 = make_offense("o-1", 10, 50, label="O1")
        o2 = make_offense("o-2", 30, 50, label="O2")
        d1 = make_defense("d-1", 10, 48, label="D1")
        d2 = make_defense("d-2", 30, 48, covers="o-2", label="D9")
        players = [o1, o2, d1, d2]

        assignments = resolve_assignments(players)

        assert assignments == {"d-1": "o-1", "d-2": "o-2"}
        assert all(p.team == Team.OFFENSE for p in players if p.id in assignments.values())
