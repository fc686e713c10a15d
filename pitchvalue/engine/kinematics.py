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
"""Arrival-time estimates for movers and the ball.

A mover waits out a fixed reaction delay, accelerates from the part of its
current velocity that already points at the target, and then cruises at a
role-scaled top speed. Everything is closed form so the same formula can be
evaluated for a single point or broadcast across a whole grid with numpy.
"""
import math
from typing import Optional

import numpy as np

from pitchvalue.models.snapshot import BallPosition, Mover

from .config import EngineConfig, resolve_config


def top_speed(mover: Mover, config: Optional[EngineConfig] = None) -> float:
    """Return the capped running speed for a mover's role.

    Parameters
    ----------
    mover : Mover
        Mover whose role selects the speed multiplier.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Top speed in metres per second.
    """
    cfg = resolve_config(config).kinematics
    return cfg.max_speed * cfg.speed_factor(mover.role)


def time_to_intercept(
    mover: Mover,
    target_x: float,
    target_y: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Estimate the earliest time a mover can stand on a target point.

    Parameters
    ----------
    mover : Mover
        Mover whose position and velocity seed the motion model.
    target_x : float
        Along-pitch target coordinate.
    target_y : float
        Across-pitch target coordinate.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Seconds until arrival; ``0`` when the mover is already within the
        arrival radius.
    """
    cfg = resolve_config(config).kinematics
    dx = target_x - mover.x
    dy = target_y - mover.y
    distance = math.hypot(dx, dy)

    if distance < cfg.arrival_radius:
        return 0.0

    cap = top_speed(mover, config)
    closing_speed = (mover.vx * dx + mover.vy * dy) / distance
    initial = min(max(0.0, closing_speed), cap)

    accel = cfg.acceleration
    accel_time = (cap - initial) / accel
    accel_distance = initial * accel_time + 0.5 * accel * accel_time * accel_time

    if distance <= accel_distance:
        # Target reached before top speed: positive root of d = v0 t + a t^2 / 2.
        motion_time = (-initial + math.sqrt(initial * initial + 2.0 * accel * distance)) / accel
    else:
        motion_time = accel_time + (distance - accel_distance) / cap

    return cfg.reaction_time + motion_time


def arrival_time_grid(
    mover: Mover,
    xs: np.ndarray,
    ys: np.ndarray,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """Vectorised :func:`time_to_intercept` over arrays of target points.

    Parameters
    ----------
    mover : Mover
        Mover whose position and velocity seed the motion model.
    xs : numpy.ndarray
        Along-pitch target coordinates; broadcast against ``ys``.
    ys : numpy.ndarray
        Across-pitch target coordinates.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    numpy.ndarray
        Arrival times with the broadcast shape of ``xs`` and ``ys``.
    """
    cfg = resolve_config(config).kinematics
    dx = np.asarray(xs, dtype=float) - mover.x
    dy = np.asarray(ys, dtype=float) - mover.y
    distance = np.hypot(dx, dy)

    cap = top_speed(mover, config)
    safe_distance = np.where(distance > 0.0, distance, 1.0)
    closing_speed = (mover.vx * dx + mover.vy * dy) / safe_distance
    initial = np.clip(closing_speed, 0.0, cap)

    accel = cfg.acceleration
    accel_time = (cap - initial) / accel
    accel_distance = initial * accel_time + 0.5 * accel * accel_time**2

    partial = (-initial + np.sqrt(initial**2 + 2.0 * accel * distance)) / accel
    full = accel_time + np.maximum(distance - accel_distance, 0.0) / cap
    motion_time = np.where(distance <= accel_distance, partial, full)

    return np.where(distance < cfg.arrival_radius, 0.0, cfg.reaction_time + motion_time)


def ball_travel_time(
    ball: BallPosition,
    target_x: float,
    target_y: float,
    config: Optional[EngineConfig] = None,
) -> float:
    """Return the straight-line flight time of the ball to a point.

    Parameters
    ----------
    ball : BallPosition
        Current ball location.
    target_x : float
        Along-pitch target coordinate.
    target_y : float
        Across-pitch target coordinate.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Seconds at the configured constant ball speed.
    """
    cfg = resolve_config(config).kinematics
    return math.hypot(target_x - ball.x, target_y - ball.y) / cfg.ball_speed


def ball_travel_time_grid(
    ball: BallPosition,
    xs: np.ndarray,
    ys: np.ndarray,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """Vectorised :func:`ball_travel_time` over arrays of target points.

    Parameters
    ----------
    ball : BallPosition
        Current ball location.
    xs : numpy.ndarray
        Along-pitch target coordinates; broadcast against ``ys``.
    ys : numpy.ndarray
        Across-pitch target coordinates.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    numpy.ndarray
        Flight times with the broadcast shape of ``xs`` and ``ys``.
    """
    cfg = resolve_config(config).kinematics
    return np.hypot(np.asarray(xs, dtype=float) - ball.x, np.asarray(ys, dtype=float) - ball.y) / cfg.ball_speed
