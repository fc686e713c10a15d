# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Tests for carrier pressure, carry valuation, and the carry-or-pass decision."""

import math
from dataclasses import replace

import pytest

from pitchvalue.engine.carry import (
    compare_with_passes,
    evaluate_carry,
    evaluate_carry_on_field,
    pressure,
    pressure_score,
    project_position,
    turnover_probability,
)
from pitchvalue.engine.passing import evaluate_pass
from pitchvalue.engine.physics import Vector2D
from pitchvalue.engine.value import generate_value_field, value_at, value_at_field
from pitchvalue.models.snapshot import Mover
from pitchvalue.utils.generator import generate_snapshot


class TestPressure:
    """Tests for the pressure score around the carrier."""

    def test_no_opponents(self) -> None:
        """Report no pressure without defenders."""
        report = pressure(Mover(1, "CM", 0.0, 0.0), [])
        assert report.score == 0.0
        assert report.nearest_distance == math.inf
        assert report.nearest_id is None
        assert not report.under_high_pressure

    def test_single_close_opponent(self) -> None:
        """Score a tight marker as high pressure."""
        report = pressure(Mover(1, "CM", 0.0, 0.0), [Mover(101, "CB", 1.0, 0.0)])
        assert report.score == pytest.approx(0.9)
        assert report.nearest_id == 101
        assert report.close_count == 1
        assert report.nearby_count == 1
        assert report.under_high_pressure

    def test_extra_close_opponents_add_pressure(self) -> None:
        """Add pressure per extra close marker up to the cap."""
        carrier = Mover(1, "CM", 0.0, 0.0)
        two = [Mover(101, "CB", 1.0, 0.0), Mover(102, "CB", 0.0, 1.0)]
        four = two + [Mover(103, "CB", -1.0, 0.0), Mover(104, "CB", 0.0, -1.0)]
        assert pressure_score(carrier, two) == pytest.approx(0.95)
        assert pressure_score(carrier, four) == 1.0

    def test_distance_bands(self) -> None:
        """Fade pressure linearly through the outer bands."""
        carrier = Mover(1, "CM", 0.0, 0.0)
        assert pressure_score(carrier, [Mover(101, "CB", 2.25, 0.0)]) == pytest.approx(0.65)
        assert pressure_score(carrier, [Mover(101, "CB", 4.5, 0.0)]) == pytest.approx(0.1)
        assert pressure_score(carrier, [Mover(101, "CB", 7.0, 0.0)]) == 0.0


class TestTurnoverProbability:
    """Tests for the chance of losing the ball while carrying."""

    def test_no_opponents(self) -> None:
        """Never lose the ball without defenders."""
        assert turnover_probability(Mover(1, "CM", 0.0, 0.0), []) == 0.0

    def test_stationary_under_pressure(self) -> None:
        """Penalise a slow carrier beside a marker."""
        carrier = Mover(1, "CM", 0.0, 0.0)
        opponents = [Mover(101, "CB", 1.0, 0.0)]
        assert turnover_probability(carrier, opponents) == pytest.approx(0.324)

    def test_horizon_compounds(self) -> None:
        """Compound the per-step probability over longer horizons."""
        carrier = Mover(1, "CM", 0.0, 0.0)
        opponents = [Mover(101, "CB", 1.0, 0.0)]
        assert turnover_probability(carrier, opponents, horizon=0.5) == pytest.approx(1.0 - 0.676**2)
        assert turnover_probability(carrier, opponents, horizon=0.0) == 0.0
        assert turnover_probability(carrier, opponents, horizon=60.0) <= 0.95

    def test_heading_matters(self) -> None:
        """Raise risk when running at the nearest defender and lower it when running away."""
        opponents = [Mover(101, "CB", 2.0, 0.0)]
        toward = turnover_probability(Mover(1, "CM", 0.0, 0.0, vx=3.0), opponents)
        across = turnover_probability(Mover(1, "CM", 0.0, 0.0, vy=3.0), opponents)
        away = turnover_probability(Mover(1, "CM", 0.0, 0.0, vx=-3.0), opponents)
        assert across == pytest.approx(0.22)
        assert toward == pytest.approx(0.286)
        assert away == pytest.approx(0.176)


class TestEvaluateCarry:
    """Tests for carry valuation."""

    def test_project_position_stays_on_pitch(self) -> None:
        """Extrapolate along the velocity and clamp to the touchlines."""
        carrier = Mover(1, "ST", 50.0, 0.0, vx=20.0)
        assert project_position(carrier, 1.0) == Vector2D(52.5, 0.0)
        assert project_position(Mover(1, "CM", 0.0, 0.0, vx=4.0), 0.25) == Vector2D(1.0, 0.0)

    def test_carry_value_identity(self) -> None:
        """Blend the projected and dispossession values by turnover probability."""
        snapshot = generate_snapshot(seed=2, jitter=2.0)
        carrier = replace(snapshot.mover_by_id(7), vx=3.0, vy=1.0)
        carry = evaluate_carry(carrier, snapshot)
        assert carry.horizon == 0.25
        p = carry.turnover_probability
        assert carry.carry_value == pytest.approx((1.0 - p) * carry.projected_value + p * carry.turnover_value)
        assert carry.value_added == pytest.approx(carry.carry_value - carry.current_value)
        swapped = snapshot.role_swapped(carrier.x, carrier.y)
        assert carry.turnover_value == pytest.approx(-value_at(carrier.x, carrier.y, swapped))
        assert carry.current_value == pytest.approx(value_at(carrier.x, carrier.y, snapshot))

    def test_field_variant_reads_the_surface(self) -> None:
        """Take current and projected values from a prebuilt value field."""
        snapshot = generate_snapshot()
        field = generate_value_field(snapshot, resolution=4.0)
        carrier = snapshot.mover_by_id(7)
        carry = evaluate_carry_on_field(carrier, snapshot, field, horizon=1.0)
        assert carry.current_value == value_at_field(field, carrier.x, carrier.y)
        assert carry.projected_value == value_at_field(field, carry.projected_x, carry.projected_y)


class TestCompareWithPasses:
    """Tests for the carry-or-pass recommendation."""

    def _fixtures(self):
        """Build a carry and two pass options from a generated snapshot.

        Returns
        -------
        tuple
            Carry evaluation and two pass options.
        """
        snapshot = generate_snapshot()
        carrier = snapshot.mover_by_id(7)
        carry = evaluate_carry(carrier, snapshot)
        first = evaluate_pass(carrier, snapshot.mover_by_id(10), snapshot)
        second = evaluate_pass(carrier, snapshot.mover_by_id(8), snapshot)
        return carry, first, second

    def test_no_passes(self) -> None:
        """Recommend carrying when there is nobody to pass to."""
        carry, _, _ = self._fixtures()
        comparison = compare_with_passes(carry, [])
        assert comparison.recommended == "carry"
        assert comparison.best_pass_value is None
        assert comparison.best_receiver_id is None
        assert comparison.margin == 0.0

    def test_better_pass_is_recommended(self) -> None:
        """Recommend the pass with the highest expected value."""
        carry, first, second = self._fixtures()
        carry = replace(carry, carry_value=0.1)
        first = replace(first, expected_value=0.2)
        second = replace(second, expected_value=0.3)
        comparison = compare_with_passes(carry, [first, second])
        assert comparison.pass_recommended
        assert comparison.best_receiver_id == second.receiver_id
        assert comparison.margin == pytest.approx(0.2)

    def test_equal_values_favour_carry(self) -> None:
        """Keep the ball when a pass is only as good as carrying."""
        carry, first, _ = self._fixtures()
        carry = replace(carry, carry_value=0.2)
        first = replace(first, expected_value=0.2)
        comparison = compare_with_passes(carry, [first])
        assert comparison.recommended == "carry"
        assert comparison.margin == 0.0

    def test_first_option_wins_ties(self) -> None:
        """Pick the earlier option between equally valued passes."""
        carry, first, second = self._fixtures()
        carry = replace(carry, carry_value=0.0)
        first = replace(first, expected_value=0.4)
        second = replace(second, expected_value=0.4)
        comparison = compare_with_passes(carry, [first, second])
        assert comparison.best_receiver_id == first.receiver_id
