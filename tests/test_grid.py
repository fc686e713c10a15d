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
"""Tests for pitch-aligned raster surfaces."""

import math

import numpy as np
import pytest

from pitchvalue.engine.grid import ControlField, PitchGrid, ValueField


class TestPitchGrid:
    """Tests for grid layout and lookups."""

    def test_shape_covers_pitch(self) -> None:
        """Round partial cells up so the whole pitch is covered."""
        grid = PitchGrid(105.0, 68.0, 2.0)
        assert grid.shape == (34, 53)
        coarse = PitchGrid(105.0, 68.0, 4.0)
        assert coarse.shape == (17, 27)

    def test_invalid_arguments(self) -> None:
        """Reject non-positive sizes and mismatched values."""
        with pytest.raises(ValueError):
            PitchGrid(105.0, 68.0, 0.0)
        with pytest.raises(ValueError):
            PitchGrid(0.0, 68.0, 2.0)
        with pytest.raises(ValueError):
            PitchGrid(105.0, 68.0, 2.0, values=np.zeros((3, 3)))

    def test_cell_centres(self) -> None:
        """Place centres half a cell in from the bottom-left corner."""
        grid = PitchGrid(105.0, 68.0, 2.0)
        assert grid.cell_centre(0, 0) == (-51.5, -33.0)
        xs, ys = grid.cell_centres()
        assert xs.shape == grid.shape
        assert ys.shape == grid.shape
        assert xs[3, 5] == pytest.approx(grid.cell_centre(3, 5)[0])
        assert ys[3, 5] == pytest.approx(grid.cell_centre(3, 5)[1])

    def test_index_of(self) -> None:
        """Map points to cells and reject points off the grid."""
        grid = PitchGrid(105.0, 68.0, 2.0)
        assert grid.index_of(-52.5, -34.0) == (0, 0)
        assert grid.index_of(-50.9, -31.9) == (1, 0)
        assert grid.index_of(60.0, 0.0) is None
        assert grid.index_of(0.0, -40.0) is None
        assert grid.index_of(math.nan, 0.0) is None
        assert grid.index_of(math.inf, 0.0) is None

    def test_value_at_returns_neutral_off_grid(self) -> None:
        """Read stored cells and fall back to the neutral value elsewhere."""
        values = np.arange(34 * 53, dtype=float).reshape(34, 53)
        grid = PitchGrid(105.0, 68.0, 2.0, values=values, neutral=-7.0)
        assert grid.value_at(-52.0, -33.5) == 0.0
        assert grid.value_at(-50.0, -33.5) == 1.0
        assert grid.value_at(100.0, 0.0) == -7.0

    def test_to_rows(self) -> None:
        """Export plain nested lists row by row."""
        grid = PitchGrid(10.0, 4.0, 2.0)
        rows = grid.to_rows()
        assert len(rows) == 2
        assert all(len(row) == 5 for row in rows)


class TestFields:
    """Tests for control and value surfaces."""

    def test_control_field_defaults_to_neutral(self) -> None:
        """Fill an empty control field with an even split."""
        field = ControlField(105.0, 68.0, 4.0)
        assert field.neutral == 0.5
        assert np.all(field.values == 0.5)
        assert field.value_at(200.0, 0.0) == 0.5

    def test_value_field_wraps_control(self) -> None:
        """Keep the control surface and report value extremes."""
        control = ControlField(10.0, 4.0, 2.0)
        values = np.array([[0.1, -0.4, 0.0, 0.2, 0.3], [0.5, 0.0, -0.1, 0.0, 0.0]])
        field = ValueField(control, values)
        assert field.control_field is control
        assert field.shape == control.shape
        assert field.min_value == -0.4
        assert field.max_value == 0.5
        assert field.value_at(50.0, 50.0) == 0.0
