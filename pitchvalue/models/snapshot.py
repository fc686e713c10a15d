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
"""Immutable per-instant models consumed by every valuation component."""
import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple, Union

from pitchvalue.engine.physics import Vector2D

MoverId = Union[int, str]


@dataclass(frozen=True)
class Mover:
    """A player reduced to the state the valuation models need.

    Parameters
    ----------
    mover_id : int | str
        Stable identity of the player across instants.
    role : str | None
        Role code, for example ``"CB"``, used to look up a speed multiplier.
    x : float
        Along-pitch coordinate in metres.
    y : float
        Across-pitch coordinate in metres.
    vx : float, optional
        Along-pitch velocity in metres per second.
    vy : float, optional
        Across-pitch velocity in metres per second.
    """

    mover_id: MoverId
    role: Optional[str]
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    @property
    def position(self) -> Vector2D:
        """Current location as a vector."""
        return Vector2D(self.x, self.y)

    @property
    def velocity(self) -> Vector2D:
        """Current velocity as a vector."""
        return Vector2D(self.vx, self.vy)

    @property
    def speed(self) -> float:
        """Magnitude of the current velocity."""
        return math.hypot(self.vx, self.vy)

    def distance_to(self, x: float, y: float) -> float:
        """Return the straight-line distance from the mover to a point.

        Parameters
        ----------
        x : float
            Target along-pitch coordinate.
        y : float
            Target across-pitch coordinate.

        Returns
        -------
        float
            Distance in metres.
        """
        return math.hypot(x - self.x, y - self.y)


@dataclass(frozen=True)
class BallPosition:
    """Ball location at the instant being valued.

    Parameters
    ----------
    x : float
        Along-pitch coordinate in metres.
    y : float
        Across-pitch coordinate in metres.
    z : float, optional
        Height above the ground in metres.
    """

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class PossessionSnapshot:
    """Everything the models know about one instant of a possession.

    The ``team`` side is always the side in possession. Every helper returns a
    new snapshot; none of them mutates the instance.

    Parameters
    ----------
    team : Tuple[Mover, ...]
        Movers belonging to the possessing side.
    opponents : Tuple[Mover, ...]
        Movers belonging to the defending side.
    ball : BallPosition
        Ball location.
    attacking_right : bool, optional
        Whether the possessing side attacks toward positive ``x``.
    """

    team: Tuple[Mover, ...]
    opponents: Tuple[Mover, ...]
    ball: BallPosition
    attacking_right: bool = True

    def __post_init__(self) -> None:
        """Freeze mover collections supplied as lists into tuples."""
        object.__setattr__(self, "team", tuple(self.team))
        object.__setattr__(self, "opponents", tuple(self.opponents))

    def with_ball_at(self, x: float, y: float, z: float = 0.0) -> "PossessionSnapshot":
        """Return a copy with the ball relocated.

        Parameters
        ----------
        x : float
            New along-pitch ball coordinate.
        y : float
            New across-pitch ball coordinate.
        z : float, optional
            New ball height.

        Returns
        -------
        PossessionSnapshot
            Snapshot identical to ``self`` apart from the ball.
        """
        return replace(self, ball=BallPosition(x, y, z))

    def role_swapped(self, ball_x: float, ball_y: float) -> "PossessionSnapshot":
        """Return the snapshot seen by the defending side after a turnover.

        Parameters
        ----------
        ball_x : float
            Along-pitch coordinate where possession changes hands.
        ball_y : float
            Across-pitch coordinate where possession changes hands.

        Returns
        -------
        PossessionSnapshot
            Snapshot with sides exchanged, the ball at the turnover point, and
            the attack direction flipped.
        """
        return PossessionSnapshot(
            team=self.opponents,
            opponents=self.team,
            ball=BallPosition(ball_x, ball_y),
            attacking_right=not self.attacking_right,
        )

    def mover_by_id(self, mover_id: MoverId) -> Optional[Mover]:
        """Find a mover on either side by identity.

        Parameters
        ----------
        mover_id : int | str
            Identity to look up.

        Returns
        -------
        Mover | None
            Matching mover, or ``None`` when absent.
        """
        for mover in self.all_movers():
            if mover.mover_id == mover_id:
                return mover
        return None

    def teammates_of(self, mover_id: MoverId) -> Tuple[Mover, ...]:
        """Return the possessing side without the given mover.

        Parameters
        ----------
        mover_id : int | str
            Identity of the mover to exclude, usually the ball-carrier.

        Returns
        -------
        Tuple[Mover, ...]
            Remaining possessing movers in input order.
        """
        return tuple(m for m in self.team if m.mover_id != mover_id)

    def all_movers(self) -> Iterable[Mover]:
        """Iterate over both sides, possessing side first.

        Returns
        -------
        Iterable[Mover]
            Every mover in the snapshot.
        """
        return self.team + self.opponents
