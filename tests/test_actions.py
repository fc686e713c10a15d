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
"""Tests for shoot, carry, and pass likelihood heuristics."""

import pytest

from pitchvalue.engine.actions import (
    ActionLikelihood,
    action_likelihood,
    carry_probability,
    most_likely_action,
    pass_probability,
    shot_probability,
)
from pitchvalue.models.snapshot import BallPosition, Mover, PossessionSnapshot
from pitchvalue.utils.generator import generate_snapshot


def _alone(carrier: Mover, opponents=(), attacking_right: bool = True) -> PossessionSnapshot:
    """Snapshot holding a single carrier and optional defenders.

    Parameters
    ----------
    carrier : Mover
        The only possessing mover.
    opponents : tuple
        Defending movers.
    attacking_right : bool
        Direction of attack.

    Returns
    -------
    PossessionSnapshot
        Snapshot with the ball at the carrier.
    """
    return PossessionSnapshot((carrier,), tuple(opponents), BallPosition(carrier.x, carrier.y), attacking_right)


class TestShotProbability:
    """Tests for shot likelihood."""

    def test_six_yard_box(self) -> None:
        """Shoot often from inside the goal area."""
        carrier = Mover(1, "ST", 50.0, 0.0)
        assert shot_probability(carrier, _alone(carrier)) == pytest.approx(0.7)

    def test_six_yard_box_attacking_left(self) -> None:
        """Use the goal the side is attacking."""
        carrier = Mover(1, "ST", -50.0, 0.0)
        assert shot_probability(carrier, _alone(carrier, attacking_right=False)) == pytest.approx(0.7)
        assert shot_probability(carrier, _alone(carrier, attacking_right=True)) == pytest.approx(0.01)

    def test_high_pressure_reduces_shots(self) -> None:
        """Scale shots down when a marker is tight."""
        carrier = Mover(1, "ST", 50.0, 0.0)
        marked = _alone(carrier, [Mover(101, "CB", 51.0, 0.0)])
        assert shot_probability(carrier, marked) == pytest.approx(0.42)

    def test_far_from_goal(self) -> None:
        """Rarely shoot from the own half."""
        carrier = Mover(1, "CM", -10.0, 0.0)
        assert shot_probability(carrier, _alone(carrier)) <= 0.02

    def test_box_beats_edge(self) -> None:
        """Prefer shooting from inside the penalty area."""
        inside = Mover(1, "ST", 42.0, 0.0)
        edge = Mover(1, "ST", 32.0, 0.0)
        assert shot_probability(inside, _alone(inside)) > shot_probability(edge, _alone(edge))


class TestCarryProbability:
    """Tests for carry likelihood."""

    def test_standing_in_space(self) -> None:
        """Scale the base rate by open space ahead."""
        carrier = Mover(1, "CM", 0.0, 0.0)
        assert carry_probability(carrier, _alone(carrier)) == pytest.approx(0.45)

    def test_driving_carrier(self) -> None:
        """Carry more when already running with the ball."""
        carrier = Mover(1, "CM", 0.0, 0.0, vx=5.0)
        assert carry_probability(carrier, _alone(carrier)) == pytest.approx(0.75)

    def test_defensive_third(self) -> None:
        """Carry less deep in the own half."""
        carrier = Mover(1, "CB", -30.0, 0.0)
        assert carry_probability(carrier, _alone(carrier)) == pytest.approx(0.315)

    def test_bounds(self) -> None:
        """Stay inside the configured bounds under heavy pressure."""
        carrier = Mover(1, "CB", -40.0, 0.0)
        markers = [Mover(101, "ST", -39.0, 0.0), Mover(102, "ST", -40.0, 1.0)]
        assert carry_probability(carrier, _alone(carrier, markers)) == pytest.approx(0.1)


class TestActionLikelihood:
    """Tests for the combined action distribution."""

    def test_pass_floor(self) -> None:
        """Keep passing plausible even when other actions dominate."""
        assert pass_probability(0.7, 0.3) == pytest.approx(0.15)
        assert pass_probability(0.1, 0.3) == pytest.approx(0.6)

    @pytest.mark.parametrize("attacking_right", [True, False])
    def test_probabilities_sum_to_one(self, attacking_right: bool) -> None:
        """Normalise every carrier's probabilities to one."""
        snapshot = generate_snapshot(attacking_right=attacking_right, seed=4, jitter=1.0)
        for carrier in snapshot.team:
            likelihood = action_likelihood(carrier, snapshot)
            total = likelihood.p_shoot + likelihood.p_carry + likelihood.p_pass
            assert total == pytest.approx(1.0)
            assert all(0.0 <= p <= 1.0 for p in likelihood.as_dict().values())

    def test_normalisation_with_floor(self) -> None:
        """Renormalise when the pass floor pushes the total above one."""
        carrier = Mover(1, "ST", 50.0, 0.0, vx=5.0)
        likelihood = action_likelihood(carrier, _alone(carrier))
        assert likelihood.p_shoot + likelihood.p_carry + likelihood.p_pass == pytest.approx(1.0)
        assert likelihood.p_shoot > likelihood.p_pass

    def test_most_likely_action(self) -> None:
        """Pick the largest probability, preferring pass then carry on ties."""
        assert most_likely_action(ActionLikelihood(0.6, 0.2, 0.2)) == "shoot"
        assert most_likely_action(ActionLikelihood(0.2, 0.5, 0.3)) == "carry"
        assert most_likely_action(ActionLikelihood(0.2, 0.4, 0.4)) == "pass"
        assert most_likely_action(ActionLikelihood(0.4, 0.4, 0.2)) == "carry"

    def test_as_dict(self) -> None:
        """Expose probabilities by action name."""
        assert ActionLikelihood(0.1, 0.3, 0.6).as_dict() == {"shoot": 0.1, "carry": 0.3, "pass": 0.6}
