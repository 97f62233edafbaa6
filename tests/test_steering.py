"""Tests for the reactive defender steering simulator."""

import math

import pytest

from playsim.config import SteeringConfig
from playsim.models import CoverageStyle, Force, Role
from spatial.field import FIELD_LENGTH, FIELD_WIDTH
from spatial.geometry import calculate_distance
from spatial.steering import DefenderSteering, avoidance_waypoint, defender_position_at_time


@pytest.fixture
def holder(make_offense):
    """Disc holder standing at (20, 88)."""
    return make_offense("O1", 20, 88, has_disc=True, role=Role.HANDLER)


@pytest.fixture
def runner(make_offense):
    """Cutter running straight from (20, 60) to (20, 40)."""
    return make_offense("O2", 20, 60, path=[(20, 40)], role=Role.CUTTER)


class TestRestBehaviour:
    """Cases where the defender never moves."""

    def test_no_matched_offense(self, make_defense, holder):
        """Without a matched offense the defender stays at rest."""
        defender = make_defense("D1", 10, 50)
        assert defender_position_at_time(defender, None, holder, Force.HOME, 5.0) == (10, 50)

    def test_time_zero_and_none(self, make_defense, holder, runner):
        """At t<=0 (or when not animating) the rest position is returned."""
        defender = make_defense("D2", 22, 58, covers="O2")
        assert defender_position_at_time(defender, runner, holder, Force.HOME, 0.0) == (22, 58)
        assert defender_position_at_time(defender, runner, holder, Force.HOME, None) == (22, 58)

    def test_stationary_target(self, make_offense, make_defense, holder):
        """A defender at its rest offset from a stationary player stays put."""
        standing = make_offense("O3", 30, 60)
        defender = make_defense("D3", 28, 62, covers="O3")
        for t in (0.5, 3.0, 6.0):
            assert defender_position_at_time(defender, standing, holder, Force.HOME, t) == (28, 62)

    def test_reaction_delay(self, make_defense, holder, runner):
        """The defender does not react before the reaction delay has elapsed."""
        defender = make_defense("D2", 22, 58, covers="O2")
        assert defender_position_at_time(defender, runner, holder, Force.HOME, 0.05) == (22, 58)

    def test_zero_reaction_delay_reacts_immediately(self, make_defense, holder, runner):
        """With no reaction delay the defender starts moving right away."""
        defender = make_defense("D2", 22, 58, covers="O2")
        config = SteeringConfig(reaction_delay=0.0)
        _, y = defender_position_at_time(defender, runner, holder, Force.HOME, 0.05, config)
        assert y < 58


class TestConvergence:
    """Following a moving target."""

    def test_converges_to_offset_of_final_position(self, make_defense, holder, runner):
        """Once the target stops the defender settles at its rest offset."""
        defender = make_defense("D2", 22, 58, covers="O2")
        settled = defender_position_at_time(defender, runner, holder, Force.HOME, 8.0)
        assert settled == pytest.approx((22.0, 38.0), abs=0.05)

    def test_no_residual_oscillation(self, make_defense, holder, runner):
        """After settling the position no longer changes."""
        defender = make_defense("D2", 22, 58, covers="O2")
        positions = [
            defender_position_at_time(defender, runner, holder, Force.HOME, t) for t in (8.0, 9.0, 10.0)
        ]
        assert positions[0] == positions[1] == positions[2]

    def test_lags_behind_target(self, make_defense, holder, runner):
        """Mid-run the defender trails the point it is chasing."""
        defender = make_defense("D2", 22, 58, covers="O2")
        _, y = defender_position_at_time(defender, runner, holder, Force.HOME, 1.5)
        assert 38.0 < y < 58.0

    def test_idempotent(self, make_defense, holder, runner):
        """Identical queries give bit-identical answers."""
        defender = make_defense("D2", 22, 58, covers="O2")
        steering = DefenderSteering(defender, runner, holder, Force.HOME)
        first = steering.position_at(2.345)
        second = steering.position_at(2.345)
        assert first == second
        assert first == defender_position_at_time(defender, runner, holder, Force.HOME, 2.345)

    def test_deep_recovery_is_faster(self, make_defense, holder_and_cutter):
        """A deep defender beaten downfield recovers faster than an under defender."""
        holder, cutter = holder_and_cutter
        under = make_defense("D1", 20, 72, covers="O2", style=CoverageStyle.UNDER)
        deep = make_defense("D2", 20, 72, covers="O2", style=CoverageStyle.DEEP)

        _, under_y = defender_position_at_time(under, cutter, holder, Force.HOME, 2.0)
        _, deep_y = defender_position_at_time(deep, cutter, holder, Force.HOME, 2.0)

        assert deep_y < under_y


class TestBurstAndBraking:
    """Reactive burst after sharp cuts and asymmetric braking."""

    @pytest.fixture
    def standing(self, make_offense):
        return make_offense("O3", 30, 60)

    @pytest.fixture
    def defender(self, make_defense):
        """Defender whose rest point is (28, 62), two yards off the standing player."""
        return make_defense("D3", 28, 62, covers="O3")

    def reversing_state(self, steering):
        """Defender below its rest point still running away from it at 5 yd/s."""
        state = steering.initial_state()
        state.position = (28.0, 55.0)
        state.velocity = (0.0, -5.0)
        state.heading = (0.0, -1.0)
        return state

    def test_sharp_cut_opens_burst(self, standing, defender, holder):
        """Reversing heading opens a burst window of burst_duration."""
        config = SteeringConfig()
        steering = DefenderSteering(defender, standing, holder, Force.HOME, config)
        state = self.reversing_state(steering)

        steering.step(state, config.tick)

        assert state.burst_until == pytest.approx(config.tick + config.burst_duration)
        assert state.heading == pytest.approx((0.0, 1.0))
        # Burst acceleration and braking apply on the cut itself
        braking = config.braking_multiplier * config.burst_accel_multiplier
        assert state.velocity[1] == pytest.approx(-5.0 + defender.acceleration * braking * config.tick)

    def test_gentle_turn_does_not_burst(self, standing, defender, holder):
        """Staying on the same heading never opens a burst."""
        steering = DefenderSteering(defender, standing, holder, Force.HOME)
        state = steering.initial_state()
        state.position = (28.0, 55.0)
        state.velocity = (0.0, 2.0)
        state.heading = (0.0, 1.0)

        steering.step(state, steering.config.tick)

        assert state.burst_until == -1.0

    def test_burst_window_keeps_boost(self, standing, defender, holder):
        """Inside the burst window the next tick still brakes harder."""
        with_window = DefenderSteering(defender, standing, holder, Force.HOME, SteeringConfig())
        no_window = DefenderSteering(
            defender, standing, holder, Force.HOME, SteeringConfig(burst_duration=0.0)
        )
        boosted = self.reversing_state(with_window)
        plain = self.reversing_state(no_window)

        for _ in range(2):
            with_window.step(boosted, with_window.config.tick)
            no_window.step(plain, no_window.config.tick)

        assert boosted.velocity[1] > plain.velocity[1]

    def test_braking_multiplier(self, standing, defender, holder):
        """Reversing sheds speed braking_multiplier times faster than accelerating."""
        default = DefenderSteering(defender, standing, holder, Force.HOME, SteeringConfig())
        even = DefenderSteering(
            defender, standing, holder, Force.HOME, SteeringConfig(braking_multiplier=1.0)
        )
        hard = self.reversing_state(default)
        soft = self.reversing_state(even)

        default.step(hard, default.config.tick)
        even.step(soft, even.config.tick)

        shed_hard = hard.velocity[1] + 5.0
        shed_soft = soft.velocity[1] + 5.0
        assert shed_hard == pytest.approx(shed_soft * default.config.braking_multiplier)

    def test_braking_alignment_threshold(self, standing, defender, holder):
        """A 60 degree divergence counts as braking only below the alignment threshold."""
        angle = math.radians(60)
        start = (28.0 - 7.0 * math.cos(angle), 62.0 - 7.0 * math.sin(angle))

        def velocity_change(config):
            steering = DefenderSteering(defender, standing, holder, Force.HOME, config)
            state = steering.initial_state()
            state.position = start
            state.velocity = (5.0, 0.0)
            steering.step(state, config.tick)
            return calculate_distance(state.velocity, (5.0, 0.0))

        config = SteeringConfig()
        assert velocity_change(config) == pytest.approx(
            defender.acceleration * config.braking_multiplier * config.tick
        )
        lenient = SteeringConfig(braking_alignment=0.4)
        assert velocity_change(lenient) == pytest.approx(defender.acceleration * lenient.tick)


class TestMarking:
    """Guarding the disc holder."""

    @pytest.mark.parametrize("start", [(20, 57), (19.5, 63), (20, 60.5)])
    def test_mark_standoff(self, make_offense, make_defense, start):
        """The mark never gets closer than the minimum mark distance."""
        holder = make_offense("O1", 20, 60, has_disc=True)
        marker = make_defense("D1", start[0], start[1], covers="O1")
        config = SteeringConfig()
        steering = DefenderSteering(marker, holder, holder, Force.HOME, config)

        state = steering.initial_state()
        for _ in range(240):
            steering.step(state, config.tick)
            assert calculate_distance(holder.position, state.position) >= config.mark_min_distance - 1e-9

    def test_mark_settles_on_break_side(self, make_offense, make_defense):
        """A mark starting on the force side moves to the canonical break-side mark."""
        holder = make_offense("O1", 20, 60, has_disc=True)
        marker = make_defense("D1", 20, 57, covers="O1")
        x, y = defender_position_at_time(marker, holder, holder, Force.HOME, 6.0)
        assert x == pytest.approx(21.7678, abs=0.1)
        assert y == pytest.approx(58.2322, abs=0.1)

    def test_avoidance_waypoint_rotates_toward_goal(self, steering_config):
        """Waypoints step around the holder by the avoidance angle."""
        waypoint = avoidance_waypoint((0, 0), (0, -2), (0, 2), steering_config)
        assert calculate_distance((0, 0), waypoint) == pytest.approx(steering_config.avoidance_radius)
        bearing = math.degrees(math.atan2(waypoint[1], waypoint[0]))
        assert bearing == pytest.approx(-150.0)

    @pytest.mark.parametrize("goal_degrees, expected_degrees", [(30, 60), (-30, -60), (150, 60)])
    def test_avoidance_step_is_fixed(self, steering_config, goal_degrees, expected_degrees):
        """The waypoint always turns the full step, toward the shorter side."""
        goal = (2.5 * math.cos(math.radians(goal_degrees)), 2.5 * math.sin(math.radians(goal_degrees)))
        waypoint = avoidance_waypoint((0, 0), (2.5, 0), goal, steering_config)
        bearing = math.degrees(math.atan2(waypoint[1], waypoint[0]))
        assert bearing == pytest.approx(expected_degrees)

    def test_mark_snaps_with_tighter_threshold(self, make_offense, make_defense):
        """A mark only snaps within the mark snap distance."""
        holder = make_offense("O1", 20, 60, has_disc=True)
        marker = make_defense("D1", 22, 58, covers="O1")

        steering = DefenderSteering(marker, holder, holder, Force.HOME, SteeringConfig())
        state = steering.initial_state()
        state.position = (22.03, 58.0)
        steering.step(state, steering.config.tick)
        assert state.position[0] > 22.0

        loose = SteeringConfig(mark_snap_distance=0.05)
        steering = DefenderSteering(marker, holder, holder, Force.HOME, loose)
        state = steering.initial_state()
        state.position = (22.03, 58.0)
        steering.step(state, loose.tick)
        assert state.position == (22.0, 58.0)
        assert state.velocity == (0.0, 0.0)

    def test_unmarked_defender_snaps_at_default_distance(self, make_offense, make_defense, holder):
        """Away from the disc the wider snap distance applies."""
        standing = make_offense("O3", 20, 60)
        defender = make_defense("D3", 22, 58, covers="O3")
        steering = DefenderSteering(defender, standing, holder, Force.HOME)
        state = steering.initial_state()
        state.position = (22.03, 58.0)
        steering.step(state, steering.config.tick)
        assert state.position == (22.0, 58.0)


class TestFieldClamping:
    def test_defender_stays_on_field(self, make_offense, make_defense, holder):
        """Targets beyond the sideline are clamped onto the field."""
        runner = make_offense("O2", 2, 50, path=[(0.5, 30)])
        defender = make_defense("D2", 0.2, 50, covers="O2")
        for t in (0.5, 1.0, 2.0, 4.0, 10.0):
            x, y = defender_position_at_time(defender, runner, holder, Force.HOME, t)
            assert 0.0 <= x <= FIELD_WIDTH
            assert 0.0 <= y <= FIELD_LENGTH
        x, _ = defender_position_at_time(defender, runner, holder, Force.HOME, 10.0)
        assert x == 0.0
