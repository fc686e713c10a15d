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
"""Uniform grids laid over the pitch.

Every surface the engine produces shares the same indexing: row ``i`` covers
the across-pitch band starting at ``-width / 2 + i * resolution`` and column
``j`` covers the along-pitch band starting at ``-length / 2 + j * resolution``.
Lookups outside the covered area return the grid's neutral value.
"""
import math
from typing import List, Optional, Tuple

import numpy as np


def _cell_count(extent: float, resolution: float) -> int:
    """Return how many cells of ``resolution`` are needed to cover ``extent``.

    Parameters
    ----------
    extent : float
        Length of the side being covered in metres.
    resolution : float
        Cell size in metres.

    Returns
    -------
    int
        Ceiling of ``extent / resolution`` ignoring floating point dust.
    """
    return max(1, math.ceil(round(extent / resolution, 9)))


class PitchGrid:
    """Row-major numeric surface covering a pitch at a fixed resolution.

    Parameters
    ----------
    length : float
        Along-pitch extent in metres, centred on the origin.
    width : float
        Across-pitch extent in metres, centred on the origin.
    resolution : float
        Cell size in metres.
    values : numpy.ndarray | None, optional
        Initial cell values of shape ``(rows, cols)``; filled with ``neutral``
        when omitted.
    neutral : float, optional
        Value returned for lookups outside the grid.
    """

    def __init__(
        self,
        length: float,
        width: float,
        resolution: float,
        values: Optional[np.ndarray] = None,
        neutral: float = 0.0,
    ) -> None:
        """Create the grid and validate any supplied cell values.

        Parameters
        ----------
        length : float
            Along-pitch extent in metres, centred on the origin.
        width : float
            Across-pitch extent in metres, centred on the origin.
        resolution : float
            Cell size in metres.
        values : numpy.ndarray | None, optional
            Initial cell values of shape ``(rows, cols)``.
        neutral : float, optional
            Value returned for lookups outside the grid.
        """
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        if length <= 0 or width <= 0:
            raise ValueError("Grid dimensions must be positive")

        self.length = float(length)
        self.width = float(width)
        self.resolution = float(resolution)
        self.neutral = float(neutral)
        self.cols = _cell_count(self.length, self.resolution)
        self.rows = _cell_count(self.width, self.resolution)

        if values is None:
            self.values = np.full((self.rows, self.cols), self.neutral, dtype=float)
        else:
            array = np.asarray(values, dtype=float)
            if array.shape != self.shape:
                raise ValueError(f"values shape {array.shape} does not match grid shape {self.shape}")
            self.values = array

    @property
    def shape(self) -> Tuple[int, int]:
        """``(rows, cols)`` of the underlying storage."""
        return (self.rows, self.cols)

    def cell_centre(self, row: int, col: int) -> Tuple[float, float]:
        """Return the pitch coordinates at the centre of one cell.

        Parameters
        ----------
        row : int
            Across-pitch cell index.
        col : int
            Along-pitch cell index.

        Returns
        -------
        Tuple[float, float]
            ``(x, y)`` of the cell centre.
        """
        half = self.resolution / 2
        x = col * self.resolution - self.length / 2 + half
        y = row * self.resolution - self.width / 2 + half
        return x, y

    def cell_centres(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return coordinate arrays for every cell centre.

        Returns
        -------
        Tuple[numpy.ndarray, numpy.ndarray]
            ``(xs, ys)`` arrays, each of shape ``(rows, cols)``.
        """
        half = self.resolution / 2
        xs = np.arange(self.cols) * self.resolution - self.length / 2 + half
        ys = np.arange(self.rows) * self.resolution - self.width / 2 + half
        grid_x, grid_y = np.meshgrid(xs, ys)
        return grid_x, grid_y

    def index_of(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """Map pitch coordinates to the cell that contains them.

        Parameters
        ----------
        x : float
            Along-pitch coordinate.
        y : float
            Across-pitch coordinate.

        Returns
        -------
        Tuple[int, int] | None
            ``(row, col)`` or ``None`` when the point falls outside the grid.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        col = math.floor((x + self.length / 2) / self.resolution)
        row = math.floor((y + self.width / 2) / self.resolution)
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row, col
        return None

    def value_at(self, x: float, y: float) -> float:
        """Return the stored value at a point, or the neutral value off-grid.

        Parameters
        ----------
        x : float
            Along-pitch coordinate.
        y : float
            Across-pitch coordinate.

        Returns
        -------
        float
            Cell value covering ``(x, y)``.
        """
        index = self.index_of(x, y)
        if index is None:
            return self.neutral
        row, col = index
        return float(self.values[row, col])

    def to_rows(self) -> List[List[float]]:
        """Return the storage as nested lists, one list per row.

        Returns
        -------
        List[List[float]]
            Row-major copy of the cell values.
        """
        return self.values.tolist()


class ControlField(PitchGrid):
    """Probability that the possessing side reaches each cell first.

    Parameters
    ----------
    length : float
        Along-pitch extent in metres.
    width : float
        Across-pitch extent in metres.
    resolution : float
        Cell size in metres.
    values : numpy.ndarray | None, optional
        Control probabilities in ``[0, 1]``.
    neutral : float, optional
        Out-of-range control, ``0.5`` by default.
    """

    def __init__(
        self,
        length: float,
        width: float,
        resolution: float,
        values: Optional[np.ndarray] = None,
        neutral: float = 0.5,
    ) -> None:
        """Create the control surface.

        Parameters
        ----------
        length : float
            Along-pitch extent in metres.
        width : float
            Across-pitch extent in metres.
        resolution : float
            Cell size in metres.
        values : numpy.ndarray | None, optional
            Control probabilities in ``[0, 1]``.
        neutral : float, optional
            Out-of-range control.
        """
        super().__init__(length, width, resolution, values=values, neutral=neutral)


class ValueField(PitchGrid):
    """Signed possession value per cell, derived from a control surface.

    Parameters
    ----------
    control_field : ControlField
        Surface the values were computed from; its geometry is reused.
    values : numpy.ndarray
        Possession values in ``[-1, 1]`` with the control field's shape.
    """

    def __init__(self, control_field: ControlField, values: np.ndarray) -> None:
        """Wrap ``values`` computed from ``control_field``.

        Parameters
        ----------
        control_field : ControlField
            Surface the values were computed from.
        values : numpy.ndarray
            Possession values with the control field's shape.
        """
        super().__init__(
            control_field.length,
            control_field.width,
            control_field.resolution,
            values=values,
            neutral=0.0,
        )
        self.control_field = control_field
        self.min_value = float(self.values.min())
        self.max_value = float(self.values.max())
