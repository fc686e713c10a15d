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
"""Tests for the viewer's pure colour and projection helpers."""

import pytest

from pitchvalue.engine.physics import Pitch
from pitchvalue.visualizer.visualizer import pass_arrow_colour, value_alpha, value_colour, world_to_screen


class TestColours:
    """Tests for heatmap and arrow colours."""

    def test_value_colour_endpoints(self) -> None:
        """Run from blue through white to red."""
        assert value_colour(-1.0) == (50, 100, 200)
        assert value_colour(0.0) == (255, 255, 255)
        assert value_colour(1.0) == (255, 75, 55)

    def test_value_colour_midpoint(self) -> None:
        """Blend halfway toward white for moderate opponent value."""
        assert value_colour(-0.5) == (153, 178, 228)

    def test_value_colour_clamps(self) -> None:
        """Clamp values outside the unit range."""
        assert value_colour(3.0) == value_colour(1.0)
        assert value_colour(-3.0) == value_colour(-1.0)

    def test_value_alpha(self) -> None:
        """Grow opacity with magnitude."""
        assert value_alpha(0.0) == pytest.approx(0.2)
        assert value_alpha(1.0) == pytest.approx(0.7)
        assert value_alpha(-1.0) == pytest.approx(0.7)
        assert value_alpha(5.0) == pytest.approx(0.7)

    def test_pass_arrow_colour(self) -> None:
        """Colour gains green, losses red and small changes amber."""
        assert pass_arrow_colour(0.1) == (34, 197, 94)
        assert pass_arrow_colour(-0.1) == (239, 68, 68)
        assert pass_arrow_colour(0.0) == (251, 191, 36)
        assert pass_arrow_colour(0.02) == (251, 191, 36)


class TestProjection:
    """Tests for pitch-to-screen projection."""

    def test_corners_and_centre(self) -> None:
        """Map pitch corners to rectangle corners with positive y at the top."""
        pitch = Pitch()
        rect = (10, 20, 1050, 680)
        assert world_to_screen(-52.5, 34.0, pitch, rect) == (10, 20)
        assert world_to_screen(52.5, -34.0, pitch, rect) == (1060, 700)
        assert world_to_screen(0.0, 0.0, pitch, rect) == (535, 360)
