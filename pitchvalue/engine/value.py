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
"""Possession value built from progression potential and spatial control.

Value is signed from the possessing side's point of view. A point the side
controls is worth its progression potential scaled by how firmly it is
controlled; a point the opponent controls is worth the negative of that.
"""
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from pitchvalue.models.snapshot import PossessionSnapshot

from .config import EngineConfig, ValueConfig, resolve_config
from .control import control_at, control_at_field, generate_control_field
from .grid import ControlField, ValueField
from .physics import Pitch, resolve_pitch


def _band_value(n: float, config: ValueConfig) -> float:
    """Piecewise-linear progression curve on normalised position.

    Parameters
    ----------
    n : float
        Normalised along-axis position in ``[0, 1]``.
    config : ValueConfig
        Band table to apply.

    Returns
    -------
    float
        Un-penalised progression value.
    """
    for upper, base, start, slope in config.progression_bands:
        if n < upper:
            return base + (n - start) * slope
    _, base, start, slope = config.progression_bands[-1]
    return base + (n - start) * slope


def progression_potential(
    x: float,
    y: float,
    attacking_right: bool,
    pitch: Optional[Pitch] = None,
    config: Optional[EngineConfig] = None,
) -> float:
    """Return how promising it is to have the ball at a location.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.
    attacking_right : bool
        Whether the possessing side attacks toward positive ``x``.
    pitch : Pitch | None
        Pitch geometry; built from configuration when omitted.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Progression potential in ``[0, 1]``.
    """
    cfg = resolve_config(config)
    pitch = resolve_pitch(pitch, cfg)
    n = pitch.normalized_progress(x, attacking_right)
    lateral = min(1.0, abs(y) / pitch.half_width)
    central = 1.0 - cfg.value.central_penalty * lateral
    return min(1.0, max(0.0, _band_value(n, cfg.value) * central))


def progression_grid(
    xs: np.ndarray,
    ys: np.ndarray,
    attacking_right: bool,
    pitch: Optional[Pitch] = None,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """Vectorised :func:`progression_potential`.

    Parameters
    ----------
    xs : numpy.ndarray
        Along-pitch coordinates.
    ys : numpy.ndarray
        Across-pitch coordinates.
    attacking_right : bool
        Whether the possessing side attacks toward positive ``x``.
    pitch : Pitch | None
        Pitch geometry; built from configuration when omitted.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    numpy.ndarray
        Progression potential with the broadcast shape of the inputs.
    """
    cfg = resolve_config(config)
    pitch = resolve_pitch(pitch, cfg)
    along = np.asarray(xs, dtype=float) if attacking_right else -np.asarray(xs, dtype=float)
    n = np.clip((along + pitch.half_length) / pitch.length, 0.0, 1.0)

    bands = cfg.value.progression_bands
    conditions = [n < upper for upper, _, _, _ in bands[:-1]]
    choices = [base + (n - start) * slope for _, base, start, slope in bands[:-1]]
    _, base, start, slope = bands[-1]
    raw = np.select(conditions, choices, default=base + (n - start) * slope)

    lateral = np.minimum(1.0, np.abs(np.asarray(ys, dtype=float)) / pitch.half_width)
    central = 1.0 - cfg.value.central_penalty * lateral
    return np.clip(raw * central, 0.0, 1.0)


def shot_quality(
    x: float,
    y: float,
    attacking_right: bool,
    pitch: Optional[Pitch] = None,
    config: Optional[EngineConfig] = None,
) -> float:
    """Return the quality of a shot taken from a location.

    Parameters
    ----------
    x : float
        Along-pitch coordinate of the shooter.
    y : float
        Across-pitch coordinate of the shooter.
    attacking_right : bool
        Whether the shooter attacks toward positive ``x``.
    pitch : Pitch | None
        Pitch geometry; built from configuration when omitted.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Shot quality between the long-range floor and the cap.
    """
    cfg = resolve_config(config)
    pitch = resolve_pitch(pitch, cfg)
    goal = pitch.goal_position(attacking_right)
    distance = math.hypot(x - goal.x, y - goal.y)
    if distance > cfg.value.shot_range:
        return cfg.value.shot_floor

    distance_factor = math.exp(-distance / cfg.value.shot_distance_decay)
    angle_factor = math.exp(-(y * y) / cfg.value.shot_angle_variance)
    return min(cfg.value.shot_cap, distance_factor * angle_factor)


def _combine(progression: float, control: float) -> float:
    """Turn progression and control into a clamped signed value.

    Parameters
    ----------
    progression : float
        Progression potential at the point.
    control : float
        Possessing side's control at the point.

    Returns
    -------
    float
        Value in ``[-1, 1]``.
    """
    value = progression * (control - 0.5) * 2.0
    return max(-1.0, min(1.0, value))


def value_at(
    x: float,
    y: float,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> float:
    """Compute possession value at a point from scratch.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Possession value in ``[-1, 1]``.
    """
    cfg = resolve_config(config)
    control = control_at(x, y, snapshot.team, snapshot.opponents, snapshot.ball, cfg)
    progression = progression_potential(x, y, snapshot.attacking_right, config=cfg)
    return _combine(progression, control)


def value_at_with_control(
    x: float,
    y: float,
    snapshot: PossessionSnapshot,
    control_field: ControlField,
    config: Optional[EngineConfig] = None,
) -> float:
    """Compute possession value at a point reading control from a prebuilt field.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.
    snapshot : PossessionSnapshot
        Instant being valued; only the attack direction is read.
    control_field : ControlField
        Control surface previously built for ``snapshot``.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Possession value in ``[-1, 1]``.
    """
    control = control_at_field(control_field, x, y)
    progression = progression_potential(x, y, snapshot.attacking_right, config=config)
    return _combine(progression, control)


def value_at_field(field: ValueField, x: float, y: float) -> float:
    """Look up possession value in a prebuilt field.

    Parameters
    ----------
    field : ValueField
        Surface produced by :func:`generate_value_field`.
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.

    Returns
    -------
    float
        Cell value, or ``0`` off-grid.
    """
    return field.value_at(x, y)


def generate_value_field(
    snapshot: PossessionSnapshot,
    pitch: Optional[Pitch] = None,
    resolution: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> ValueField:
    """Build the possession value surface for a snapshot.

    Parameters
    ----------
    snapshot : PossessionSnapshot
        Instant being valued.
    pitch : Pitch | None
        Pitch bounding the grid; built from configuration when omitted.
    resolution : float | None
        Cell size in metres; defaults to the static grid resolution.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    ValueField
        Value surface wrapping the control field it was derived from.
    """
    cfg = resolve_config(config)
    pitch = resolve_pitch(pitch, cfg)
    control_field = generate_control_field(
        snapshot.team,
        snapshot.opponents,
        snapshot.ball,
        pitch=pitch,
        resolution=resolution,
        config=cfg,
    )
    xs, ys = control_field.cell_centres()
    progression = progression_grid(xs, ys, snapshot.attacking_right, pitch=pitch, config=cfg)
    values = np.clip(progression * (control_field.values - 0.5) * 2.0, -1.0, 1.0)
    return ValueField(control_field, values)


@dataclass(frozen=True)
class DecomposedValue:
    """Expected possession value split by action.

    Parameters
    ----------
    total : float
        Probability-weighted sum of the action values.
    pass_contribution : float
        Pass probability times best pass value.
    carry_contribution : float
        Carry probability times carry value.
    shot_contribution : float
        Shot probability times shot value.
    """

    total: float
    pass_contribution: float
    carry_contribution: float
    shot_contribution: float


def decomposed_value(
    p_pass: float,
    best_pass_value: float,
    p_carry: float,
    carry_value: float,
    p_shoot: float,
    shot_value: float,
) -> DecomposedValue:
    """Combine action probabilities and values into one expected value.

    The probabilities are used as given; normalising them is the caller's job.

    Parameters
    ----------
    p_pass : float
        Probability of passing.
    best_pass_value : float
        Expected value of the best available pass.
    p_carry : float
        Probability of carrying.
    carry_value : float
        Expected value of carrying.
    p_shoot : float
        Probability of shooting.
    shot_value : float
        Value of the shot.

    Returns
    -------
    DecomposedValue
        Total and per-action contributions.
    """
    pass_part = p_pass * best_pass_value
    carry_part = p_carry * carry_value
    shot_part = p_shoot * shot_value
    return DecomposedValue(
        total=pass_part + carry_part + shot_part,
        pass_contribution=pass_part,
        carry_contribution=carry_part,
        shot_contribution=shot_part,
    )
