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
"""Spatial control: which side gets to a point before the other.

Each mover contributes an influence between 0 and 1 at a point, a logistic
function of how much earlier than the ball it can arrive there. Control is the
possessing side's share of the total influence.
"""
import math
from typing import Optional, Sequence

import numpy as np

from pitchvalue.models.snapshot import BallPosition, Mover

from .config import EngineConfig, resolve_config
from .grid import ControlField
from .kinematics import arrival_time_grid, ball_travel_time, ball_travel_time_grid, time_to_intercept
from .physics import Pitch, resolve_pitch


def logistic(z: float) -> float:
    """Evaluate ``1 / (1 + exp(-z))`` without overflowing for large ``|z|``.

    Parameters
    ----------
    z : float
        Logistic argument.

    Returns
    -------
    float
        Value in ``[0, 1]``.
    """
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def logistic_array(z: np.ndarray) -> np.ndarray:
    """Vectorised :func:`logistic`.

    Parameters
    ----------
    z : numpy.ndarray
        Logistic arguments.

    Returns
    -------
    numpy.ndarray
        Element-wise logistic values.
    """
    z = np.asarray(z, dtype=float)
    e = np.exp(-np.abs(z))
    return np.where(z >= 0, 1.0 / (1.0 + e), e / (1.0 + e))


def influence(
    mover: Mover,
    x: float,
    y: float,
    ball_time: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Return one mover's influence over a point.

    Parameters
    ----------
    mover : Mover
        Mover whose arrival time is compared with the ball's.
    x : float
        Along-pitch coordinate of the point.
    y : float
        Across-pitch coordinate of the point.
    ball_time : float
        Seconds the ball needs to reach the point.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Logistic of the mover's time advantage over the ball.
    """
    cfg = resolve_config(config)
    advantage = ball_time - time_to_intercept(mover, x, y, cfg)
    return logistic(cfg.control.steepness * advantage)


def _control_share(team_sum, opponent_sum, neutral):
    """Return the possessing share of influence, neutral when both are zero.

    Parameters
    ----------
    team_sum : float | numpy.ndarray
        Summed influence of the possessing side.
    opponent_sum : float | numpy.ndarray
        Summed influence of the defending side.
    neutral : float
        Control reported where the total influence is zero.

    Returns
    -------
    float | numpy.ndarray
        Control probability with the shape of the inputs.
    """
    total = team_sum + opponent_sum
    if np.ndim(total) == 0:
        return neutral if total == 0 else team_sum / total
    safe_total = np.where(total > 0, total, 1.0)
    return np.where(total > 0, team_sum / safe_total, neutral)


def control_at(
    x: float,
    y: float,
    team: Sequence[Mover],
    opponents: Sequence[Mover],
    ball: BallPosition,
    config: Optional[EngineConfig] = None,
) -> float:
    """Compute the possessing side's control probability at one point.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.
    team : Sequence[Mover]
        Possessing movers.
    opponents : Sequence[Mover]
        Defending movers.
    ball : BallPosition
        Current ball location.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Control in ``[0, 1]``; the neutral value when nobody has influence.
    """
    cfg = resolve_config(config)
    ball_time = ball_travel_time(ball, x, y, cfg)
    team_sum = sum(influence(m, x, y, ball_time, cfg) for m in team)
    opponent_sum = sum(influence(m, x, y, ball_time, cfg) for m in opponents)
    return float(_control_share(team_sum, opponent_sum, cfg.control.neutral))


def _influence_grid(
    movers: Sequence[Mover],
    xs: np.ndarray,
    ys: np.ndarray,
    ball_times: np.ndarray,
    config: EngineConfig,
) -> np.ndarray:
    """Sum influence of a group of movers over arrays of points.

    Parameters
    ----------
    movers : Sequence[Mover]
        Movers on one side.
    xs : numpy.ndarray
        Along-pitch coordinates.
    ys : numpy.ndarray
        Across-pitch coordinates.
    ball_times : numpy.ndarray
        Ball travel times to each point.
    config : EngineConfig
        Active configuration.

    Returns
    -------
    numpy.ndarray
        Summed influence with the shape of ``xs``.
    """
    total = np.zeros(np.shape(xs), dtype=float)
    for mover in movers:
        advantage = ball_times - arrival_time_grid(mover, xs, ys, config)
        total += logistic_array(config.control.steepness * advantage)
    return total


def generate_control_field(
    team: Sequence[Mover],
    opponents: Sequence[Mover],
    ball: BallPosition,
    pitch: Optional[Pitch] = None,
    resolution: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> ControlField:
    """Evaluate control at every cell centre of a grid over the pitch.

    Cells are independent, so the whole grid is computed as array operations
    with one pass per mover.

    Parameters
    ----------
    team : Sequence[Mover]
        Possessing movers.
    opponents : Sequence[Mover]
        Defending movers.
    ball : BallPosition
        Current ball location.
    pitch : Pitch | None
        Pitch bounding the grid; built from configuration when omitted.
    resolution : float | None
        Cell size in metres; defaults to the static grid resolution.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    ControlField
        Control probabilities for the possessing side.
    """
    cfg = resolve_config(config)
    pitch = resolve_pitch(pitch, cfg)
    if resolution is None:
        resolution = cfg.grid.static_resolution

    field = ControlField(pitch.length, pitch.width, resolution, neutral=cfg.control.neutral)
    xs, ys = field.cell_centres()
    ball_times = ball_travel_time_grid(ball, xs, ys, cfg)
    team_sum = _influence_grid(team, xs, ys, ball_times, cfg)
    opponent_sum = _influence_grid(opponents, xs, ys, ball_times, cfg)
    field.values = _control_share(team_sum, opponent_sum, cfg.control.neutral)
    return field


def control_at_field(field: ControlField, x: float, y: float) -> float:
    """Look up control in a prebuilt field.

    Parameters
    ----------
    field : ControlField
        Surface produced by :func:`generate_control_field`.
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.

    Returns
    -------
    float
        Cell control, or the field's neutral value off-grid.
    """
    return field.value_at(x, y)
