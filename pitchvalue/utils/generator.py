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
"""Utilities that synthesise possession snapshots for demos and tests."""
import random
from typing import Dict, List, Optional, Tuple

from pitchvalue.models.snapshot import BallPosition, Mover, PossessionSnapshot

Shape = List[Tuple[str, float, float]]

# Coordinates are along the possessing side's attack axis: its own goal is at
# x = -52.5 and the goal it attacks is at x = +52.5.
ATTACKING_SHAPES: Dict[str, Shape] = {
    "4-3-3": [
        ("GK", -45.0, 0.0),
        ("RCB", -25.0, -10.0),
        ("LCB", -25.0, 10.0),
        ("RB", -12.0, -28.0),
        ("LB", -12.0, 28.0),
        ("CDM", -8.0, 0.0),
        ("CM", 2.0, -12.0),
        ("CAM", 8.0, 10.0),
        ("RW", 22.0, -25.0),
        ("ST", 25.0, 0.0),
        ("LW", 22.0, 25.0),
    ],
    "4-4-2": [
        ("GK", -45.0, 0.0),
        ("RCB", -25.0, -10.0),
        ("LCB", -25.0, 10.0),
        ("RB", -12.0, -28.0),
        ("LB", -12.0, 28.0),
        ("CDM", -6.0, 8.0),
        ("CM", -2.0, -8.0),
        ("RM", 8.0, -26.0),
        ("LM", 8.0, 26.0),
        ("ST", 24.0, -6.0),
        ("CF", 22.0, 6.0),
    ],
    "3-5-2": [
        ("GK", -45.0, 0.0),
        ("RCB", -25.0, -14.0),
        ("CB", -27.0, 0.0),
        ("LCB", -25.0, 14.0),
        ("CDM", -8.0, 0.0),
        ("CM", 2.0, -12.0),
        ("CAM", 8.0, 10.0),
        ("RM", 5.0, -28.0),
        ("LM", 5.0, 28.0),
        ("ST", 24.0, -6.0),
        ("CF", 22.0, 6.0),
    ],
}

# Defending blocks in the same frame: the defending goal is at x = +52.5.
DEFENDING_SHAPES: Dict[str, Shape] = {
    "4-4-2": [
        ("GK", 50.0, 0.0),
        ("RB", 30.0, -20.0),
        ("RCB", 30.0, -7.0),
        ("LCB", 30.0, 7.0),
        ("LB", 30.0, 20.0),
        ("RM", 15.0, -22.0),
        ("CM", 15.0, -7.0),
        ("CDM", 15.0, 7.0),
        ("LM", 15.0, 22.0),
        ("ST", 0.0, -6.0),
        ("CF", 0.0, 6.0),
    ],
    "4-3-3": [
        ("GK", 50.0, 0.0),
        ("RB", 32.0, -20.0),
        ("RCB", 32.0, -7.0),
        ("LCB", 32.0, 7.0),
        ("LB", 32.0, 20.0),
        ("CM", 16.0, -10.0),
        ("CDM", 18.0, 0.0),
        ("CAM", 16.0, 10.0),
        ("RW", 2.0, -20.0),
        ("ST", 0.0, 0.0),
        ("LW", 2.0, 20.0),
    ],
    "3-5-2": [
        ("GK", 50.0, 0.0),
        ("RCB", 32.0, -12.0),
        ("CB", 32.0, 0.0),
        ("LCB", 32.0, 12.0),
        ("RM", 14.0, -26.0),
        ("CM", 16.0, -9.0),
        ("CDM", 20.0, 0.0),
        ("CAM", 16.0, 9.0),
        ("LM", 14.0, 26.0),
        ("ST", 0.0, -6.0),
        ("CF", 0.0, 6.0),
    ],
}


def _place(
    shape: Shape,
    first_id: int,
    attacking_right: bool,
    rng: random.Random,
    jitter: float,
) -> Tuple[Mover, ...]:
    """Turn a formation template into movers in pitch coordinates.

    Parameters
    ----------
    shape : Shape
        ``(role, x, y)`` rows along the possessing side's attack axis.
    first_id : int
        Identity given to the first mover; later movers count up from it.
    attacking_right : bool
        Whether the possessing side attacks toward positive ``x``.
    rng : random.Random
        Source of positional jitter.
    jitter : float
        Maximum offset in metres added to each coordinate.

    Returns
    -------
    Tuple[Mover, ...]
        Stationary movers in template order.
    """
    sign = 1.0 if attacking_right else -1.0
    movers = []
    for offset, (role, x, y) in enumerate(shape):
        if jitter > 0:
            x += rng.uniform(-jitter, jitter)
            y += rng.uniform(-jitter, jitter)
        movers.append(Mover(first_id + offset, role, sign * x, y))
    return tuple(movers)


def generate_snapshot(
    team_formation: str = "4-3-3",
    opponent_formation: str = "4-4-2",
    attacking_right: bool = True,
    carrier_role: str = "CM",
    seed: Optional[int] = None,
    jitter: float = 0.0,
) -> PossessionSnapshot:
    """Generate a plausible settled-possession snapshot.

    Parameters
    ----------
    team_formation : str
        Shape of the side in possession, for example ``"4-3-3"``.
    opponent_formation : str
        Shape of the defending block.
    attacking_right : bool
        Whether the possessing side attacks toward positive ``x``.
    carrier_role : str
        Role of the possessing mover who has the ball.
    seed : int | None
        Seed for reproducible jitter.
    jitter : float
        Maximum random offset in metres applied to every coordinate.

    Returns
    -------
    PossessionSnapshot
        Snapshot with the ball at the carrier's feet.
    """
    if team_formation not in ATTACKING_SHAPES:
        raise ValueError(f"Unsupported formation: {team_formation}")
    if opponent_formation not in DEFENDING_SHAPES:
        raise ValueError(f"Unsupported formation: {opponent_formation}")

    rng = random.Random(seed)
    team = _place(ATTACKING_SHAPES[team_formation], 1, attacking_right, rng, jitter)
    opponents = _place(DEFENDING_SHAPES[opponent_formation], 101, attacking_right, rng, jitter)

    carrier = next((m for m in team if m.role == carrier_role.upper()), None)
    if carrier is None:
        raise ValueError(f"Formation {team_formation} has no {carrier_role} to carry the ball")

    return PossessionSnapshot(team, opponents, BallPosition(carrier.x, carrier.y), attacking_right)
