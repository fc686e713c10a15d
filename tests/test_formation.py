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
"""Tests for defensive line detection and zone classification."""

import pytest

from pitchvalue.engine.formation import (
    FormationLines,
    cluster_1d,
    detect_lines,
    line_break_analysis,
    zone_multiplier,
    zone_of,
)
from pitchvalue.models.snapshot import Mover
from pitchvalue.utils.generator import generate_snapshot


class TestCluster1D:
    """Tests for one-dimensional clustering."""

    def test_three_separated_groups(self) -> None:
        """Converge to the mean of each well-separated group."""
        centroids = cluster_1d([-40, -41, -39, -9, -10, -11, 20, 21, 19])
        assert centroids == pytest.approx([-40.0, -10.0, 20.0], abs=1.0)

    def test_fewer_points_than_clusters(self) -> None:
        """Return the sorted input when there are too few points."""
        assert cluster_1d([5.0, -3.0]) == [-3.0, 5.0]
        assert cluster_1d([]) == []

    def test_identical_points(self) -> None:
        """Handle a zero spread without dividing by zero."""
        assert cluster_1d([7.0, 7.0, 7.0, 7.0]) == [7.0, 7.0, 7.0]

    def test_invalid_k(self) -> None:
        """Reject a non-positive cluster count."""
        with pytest.raises(ValueError):
            cluster_1d([1.0, 2.0], k=0)

    def test_results_are_sorted(self) -> None:
        """Return centroids in ascending order."""
        centroids = cluster_1d([30.0, -5.0, 12.0, 31.0, -6.0, 11.0, 29.0], k=3)
        assert centroids == sorted(centroids)


class TestDetectLines:
    """Tests for defensive line detection."""

    def test_flat_four_four_two(self) -> None:
        """Find striker, midfield and back lines with the keeper on the last."""
        snapshot = generate_snapshot(opponent_formation="4-4-2")
        lines = detect_lines(snapshot.opponents, True)
        assert lines.positions == pytest.approx((10.0, 30.0, 50.0))
        assert len(lines.assignments) == 11
        assert lines.assignments[101] == 3
        assert lines.assignments[102] == 2
        assert lines.assignments[110] == 1

    def test_mirrored_direction(self) -> None:
        """Measure lines along the attack axis whichever way the side attacks."""
        right = detect_lines(generate_snapshot(attacking_right=True).opponents, True)
        left = detect_lines(generate_snapshot(attacking_right=False).opponents, False)
        assert left.positions == pytest.approx(right.positions)
        assert left.pitch_positions() == pytest.approx(tuple(-p for p in right.positions))

    def test_no_defenders(self) -> None:
        """Return collapsed lines for an empty defending side."""
        lines = detect_lines([], True)
        assert lines.positions == (0.0, 0.0, 0.0)
        assert lines.assignments == {}

    def test_pads_missing_lines(self) -> None:
        """Repeat the deepest line when there are fewer defenders than lines."""
        defenders = [Mover(101, "CB", 10.0, 0.0), Mover(102, "CB", 30.0, 5.0)]
        lines = detect_lines(defenders, True)
        assert lines.positions == (10.0, 30.0, 30.0)
        assert lines.assignments == {101: 1, 102: 2}


class TestZones:
    """Tests for zone classification and line breaks."""

    LINES = FormationLines(10.0, 30.0, 50.0)

    def test_zone_of(self) -> None:
        """Classify points against the three lines."""
        assert zone_of(5.0, 0.0, self.LINES, True).code == "Z1"
        zone = zone_of(20.0, 3.0, self.LINES, True)
        assert zone.code == "Z2"
        assert zone.phase == "progression"
        assert zone.nearest_line_distance == pytest.approx(10.0)
        assert zone_of(40.0, 0.0, self.LINES, True).index == 3
        assert zone_of(51.0, 0.0, self.LINES, True).name == "Beyond Third Line"

    def test_zone_of_attacking_left(self) -> None:
        """Flip the point onto the attack axis when attacking left."""
        zone = zone_of(-20.0, 0.0, self.LINES, False)
        assert zone.code == "Z2"
        assert zone.x == -20.0

    def test_zone_multiplier(self) -> None:
        """Weight advanced zones more heavily."""
        assert [zone_multiplier(z) for z in (1, 2, 3, 4)] == [0.6, 0.9, 1.2, 1.5]
        with pytest.raises(ValueError):
            zone_multiplier(5)
        with pytest.raises(ValueError):
            zone_multiplier(0)

    def test_forward_line_break(self) -> None:
        """Count lines crossed by a forward pass."""
        result = line_break_analysis((5.0, 0.0), (40.0, 0.0), self.LINES, True)
        assert result.direction == "forward"
        assert result.lines_crossed == 2
        assert result.breaks_lines

    def test_backward_and_lateral(self) -> None:
        """Do not count backward or same-zone moves as line breaks."""
        backward = line_break_analysis((40.0, 0.0), (5.0, 0.0), self.LINES, True)
        assert backward.direction == "backward"
        assert backward.lines_crossed == 2
        assert not backward.breaks_lines
        lateral = line_break_analysis((15.0, -20.0), (25.0, 20.0), self.LINES, True)
        assert lateral.direction == "lateral"
        assert lateral.lines_crossed == 0
