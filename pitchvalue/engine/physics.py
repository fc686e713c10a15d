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
"""Geometric primitives shared by the valuation models.

The physics layer provides a small vector maths helper and a pitch
representation that encodes real-world dimensions and attack-direction
conventions. Higher-level models use it so that no component has to redo
coordinate flips or boundary clamping on its own.
"""
import math
from dataclasses import dataclass
from typing import Optional

from .config import ENGINE_CONFIG, EngineConfig, PitchConfig


@dataclass(frozen=True)
class Vector2D:
    """Two-dimensional vector with convenience operations.

    Parameters
    ----------
    x : float
        Along-pitch component measured in metres.
    y : float
        Across-pitch component measured in metres.
    """

    x: float
    y: float

    def __add__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector sum of ``self`` and ``other``."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2D") -> "Vector2D":
        """Return the vector difference ``self - other``."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2D":
        """Scale the vector by ``scalar`` while preserving direction."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector.

        Returns
        -------
        float
            Scalar magnitude measured in metres.
        """
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vector2D":
        """Return a unit vector pointing in the same direction as ``self``.

        Returns
        -------
        Vector2D
            Normalised vector; zero vector when ``self`` has no magnitude.
        """
        mag = self.magnitude()
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(self.x / mag, self.y / mag)

    def dot(self, other: "Vector2D") -> float:
        """Return the scalar product of ``self`` and ``other``.

        Parameters
        ----------
        other : Vector2D
            Second operand.

        Returns
        -------
        float
            Sum of component-wise products.
        """
        return self.x * other.x + self.y * other.y

    def distance_to(self, other: "Vector2D") -> float:
        """Return the straight-line distance between ``self`` and ``other``.

        Parameters
        ----------
        other : Vector2D
            Vector whose separation from ``self`` should be measured.

        Returns
        -------
        float
            Euclidean distance in metres between the two points.
        """
        return (other - self).magnitude()


class Pitch:
    """Rectangular playing surface centred on the origin.

    The pitch owns the conventions every model shares: ``x`` runs along the
    pitch between the goal lines, ``y`` runs across it, and a side attacking
    right targets the goal at ``x = +length / 2``.

    Parameters
    ----------
    length : float | None, optional
        Pitch length override in metres; defaults to configuration.
    width : float | None, optional
        Pitch width override in metres; defaults to configuration.
    config : PitchConfig | None, optional
        Dimension block supplying defaults and box measurements.
    """

    def __init__(
        self,
        length: Optional[float] = None,
        width: Optional[float] = None,
        config: Optional[PitchConfig] = None,
    ) -> None:
        """Initialise pitch with FIFA standard dimensions (in metres).

        Parameters
        ----------
        length : float | None, optional
            Pitch length override in metres; defaults to configuration.
        width : float | None, optional
            Pitch width override in metres; defaults to configuration.
        config : PitchConfig | None, optional
            Dimension block supplying defaults and box measurements.
        """
        cfg = config if config is not None else ENGINE_CONFIG.pitch
        self.length = length if length is not None else cfg.length
        self.width = width if width is not None else cfg.width
        if self.length <= 0 or self.width <= 0:
            raise ValueError("Pitch dimensions must be positive")
        self.goal_width = cfg.goal_width

        # Define key areas
        self.penalty_area_width = cfg.penalty_area_width
        self.penalty_area_depth = cfg.penalty_area_depth
        self.goal_area_width = cfg.goal_area_width
        self.goal_area_depth = cfg.goal_area_depth

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None) -> "Pitch":
        """Build a pitch from an engine configuration.

        Parameters
        ----------
        config : EngineConfig | None
            Engine configuration; the module default is used when omitted.

        Returns
        -------
        Pitch
            Pitch sized according to ``config.pitch``.
        """
        cfg = config if config is not None else ENGINE_CONFIG
        return cls(config=cfg.pitch)

    @property
    def half_length(self) -> float:
        """Distance from the centre spot to either goal line."""
        return self.length / 2

    @property
    def half_width(self) -> float:
        """Distance from the centre line to either touchline."""
        return self.width / 2

    def along_axis(self, x: float, attacking_right: bool) -> float:
        """Express ``x`` in the attacking side's frame of reference.

        Parameters
        ----------
        x : float
            Pitch coordinate along the length.
        attacking_right : bool
            Whether the side attacks toward positive ``x``.

        Returns
        -------
        float
            Coordinate that grows toward the attacked goal.
        """
        return x if attacking_right else -x

    def normalized_progress(self, x: float, attacking_right: bool) -> float:
        """Return how far up the pitch ``x`` is for the attacking side.

        Parameters
        ----------
        x : float
            Pitch coordinate along the length.
        attacking_right : bool
            Whether the side attacks toward positive ``x``.

        Returns
        -------
        float
            ``0`` on the own goal line and ``1`` on the opponent goal line,
            clamped to that interval.
        """
        progress = (self.along_axis(x, attacking_right) + self.half_length) / self.length
        return max(0.0, min(1.0, progress))

    def goal_position(self, attacking_right: bool) -> Vector2D:
        """Return the centre of the goal attacked by a side.

        Parameters
        ----------
        attacking_right : bool
            Whether the side attacks toward positive ``x``.

        Returns
        -------
        Vector2D
            Goal-mouth centre coordinates.
        """
        return Vector2D(self.half_length if attacking_right else -self.half_length, 0.0)

    def in_penalty_area(self, x: float, y: float, attacking_right: bool) -> bool:
        """Check whether a point lies inside the attacked penalty box.

        Parameters
        ----------
        x : float
            Pitch coordinate along the length.
        y : float
            Pitch coordinate across the width.
        attacking_right : bool
            Whether the side attacks toward positive ``x``.

        Returns
        -------
        bool
            ``True`` inside the box in front of the attacked goal.
        """
        depth_line = self.half_length - self.penalty_area_depth
        return self.along_axis(x, attacking_right) > depth_line and abs(y) < self.penalty_area_width / 2

    def in_goal_area(self, x: float, y: float, attacking_right: bool) -> bool:
        """Check whether a point lies inside the attacked six-yard box.

        Parameters
        ----------
        x : float
            Pitch coordinate along the length.
        y : float
            Pitch coordinate across the width.
        attacking_right : bool
            Whether the side attacks toward positive ``x``.

        Returns
        -------
        bool
            ``True`` inside the six-yard box in front of the attacked goal.
        """
        depth_line = self.half_length - self.goal_area_depth
        return self.along_axis(x, attacking_right) > depth_line and abs(y) < self.goal_area_width / 2

    def is_in_bounds(self, position: Vector2D) -> bool:
        """Check if position is within pitch boundaries.

        Parameters
        ----------
        position : Vector2D
            Location to check for boundary compliance.

        Returns
        -------
        bool
            ``True`` when the position is inside the legal playing area.
        """
        return abs(position.x) <= self.half_length and abs(position.y) <= self.half_width

    def constrain_to_bounds(self, position: Vector2D) -> Vector2D:
        """Constrain position to pitch boundaries.

        Parameters
        ----------
        position : Vector2D
            Location to clamp to the playable area.

        Returns
        -------
        Vector2D
            Adjusted position guaranteed to lie within the field limits.
        """
        return Vector2D(
            max(-self.half_length, min(self.half_length, position.x)),
            max(-self.half_width, min(self.half_width, position.y)),
        )


def resolve_pitch(pitch: Optional[Pitch], config: Optional[EngineConfig] = None) -> Pitch:
    """Return ``pitch`` or one built from ``config`` when it is missing.

    Parameters
    ----------
    pitch : Pitch | None
        Explicit pitch supplied by the caller.
    config : EngineConfig | None
        Configuration used to size a default pitch.

    Returns
    -------
    Pitch
        Pitch to use for the current computation.
    """
    if pitch is not None:
        return pitch
    return Pitch.from_config(config)
