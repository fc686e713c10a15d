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
"""Carry evaluation: keep the ball for one more short interval.

The carrier is moved along its current velocity for a short horizon. The
value of carrying blends the value at the projected spot with the cost of
being dispossessed where the carrier stands now.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from pitchvalue.models.snapshot import Mover, MoverId, PossessionSnapshot

from .config import EngineConfig, resolve_config
from .grid import ValueField
from .passing import PassOption
from .physics import Pitch, Vector2D, resolve_pitch
from .value import value_at, value_at_field


@dataclass(frozen=True)
class PressureReport:
    """How closely the carrier is being pressed.

    Parameters
    ----------
    score : float
        Pressure in ``[0, 1]``.
    nearest_distance : float
        Distance to the closest opponent, infinite without opponents.
    nearest_id : int | str | None
        Identity of the closest opponent.
    nearby_count : int
        Opponents inside the pressure radius.
    close_count : int
        Opponents inside the high-pressure radius.
    """

    score: float
    nearest_distance: float
    nearest_id: Optional[MoverId]
    nearby_count: int
    close_count: int

    @property
    def under_high_pressure(self) -> bool:
        """Whether at least one opponent is inside the high-pressure radius."""
        return self.close_count > 0


@dataclass(frozen=True)
class CarryEvaluation:
    """Outcome of carrying the ball for one horizon.

    Parameters
    ----------
    carrier_id : int | str
        Identity of the carrier.
    horizon : float
        Seconds the carry is projected over.
    current_value : float
        Possession value at the carrier now.
    projected_x : float
        Along-pitch coordinate after the horizon.
    projected_y : float
        Across-pitch coordinate after the horizon.
    projected_value : float
        Possession value at the projected position.
    turnover_probability : float
        Chance of losing the ball during the horizon.
    turnover_value : float
        Possession value for the carrier's side if dispossessed now.
    carry_value : float
        Expected value of carrying.
    pressure : PressureReport
        Pressure the carrier is under.
    """

    carrier_id: MoverId
    horizon: float
    current_value: float
    projected_x: float
    projected_y: float
    projected_value: float
    turnover_probability: float
    turnover_value: float
    carry_value: float
    pressure: PressureReport

    @property
    def value_added(self) -> float:
        """Change in value relative to standing still with the ball."""
        return self.carry_value - self.current_value


@dataclass(frozen=True)
class CarryComparison:
    """Carry set against the best available pass.

    Parameters
    ----------
    carry_value : float
        Expected value of carrying.
    best_pass_value : float | None
        Expected value of the best pass, ``None`` without options.
    best_receiver_id : int | str | None
        Receiver of the best pass.
    recommended : str
        ``"pass"`` or ``"carry"``.
    margin : float
        Absolute difference between the two values, ``0`` without passes.
    """

    carry_value: float
    best_pass_value: Optional[float]
    best_receiver_id: Optional[MoverId]
    recommended: str
    margin: float

    @property
    def pass_recommended(self) -> bool:
        """Whether passing beats carrying."""
        return self.recommended == "pass"


def pressure(
    carrier: Mover,
    opponents: Sequence[Mover],
    config: Optional[EngineConfig] = None,
) -> PressureReport:
    """Measure pressure on the carrier from the nearest opponents.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    opponents : Sequence[Mover]
        Defenders.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    PressureReport
        Score and supporting counts.
    """
    ccfg = resolve_config(config).carry
    nearest_distance = math.inf
    nearest_id: Optional[MoverId] = None
    nearby = 0
    close = 0

    for opponent in opponents:
        distance = carrier.distance_to(opponent.x, opponent.y)
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_id = opponent.mover_id
        if distance < ccfg.pressure_radius:
            nearby += 1
        if distance < ccfg.high_pressure_radius:
            close += 1

    if nearest_distance < ccfg.high_pressure_radius:
        score = 0.9 + 0.05 * (close - 1)
    elif nearest_distance < ccfg.pressure_radius:
        band = ccfg.pressure_radius - ccfg.high_pressure_radius
        score = 0.4 + 0.5 * (ccfg.pressure_radius - nearest_distance) / band
    elif nearest_distance < ccfg.outer_pressure_radius:
        band = ccfg.outer_pressure_radius - ccfg.pressure_radius
        score = 0.2 * (ccfg.outer_pressure_radius - nearest_distance) / band
    else:
        score = 0.0

    return PressureReport(min(1.0, score), nearest_distance, nearest_id, nearby, close)


def pressure_score(
    carrier: Mover,
    opponents: Sequence[Mover],
    config: Optional[EngineConfig] = None,
) -> float:
    """Return only the pressure score.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    opponents : Sequence[Mover]
        Defenders.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Pressure in ``[0, 1]``.
    """
    return pressure(carrier, opponents, config).score


def turnover_probability(
    carrier: Mover,
    opponents: Sequence[Mover],
    horizon: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> float:
    """Chance the carrier loses the ball within ``horizon`` seconds.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    opponents : Sequence[Mover]
        Defenders.
    horizon : float | None
        Interval in seconds; defaults to the configured carry horizon.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Probability in ``[0, max_turnover]``.
    """
    ccfg = resolve_config(config).carry
    if horizon is None:
        horizon = ccfg.horizon

    report = pressure(carrier, opponents, config)
    base = report.score * ccfg.base_turnover_rate

    speed = carrier.speed
    if speed > ccfg.fast_speed:
        base *= ccfg.fast_factor
    elif speed < ccfg.slow_speed:
        base *= ccfg.slow_factor

    nearest = None
    if report.nearest_id is not None:
        nearest = next(o for o in opponents if o.mover_id == report.nearest_id)
    if nearest is not None and speed > ccfg.heading_min_speed and report.nearest_distance > 0:
        to_opponent = Vector2D(nearest.x - carrier.x, nearest.y - carrier.y).normalize()
        alignment = carrier.velocity.normalize().dot(to_opponent)
        if alignment > ccfg.heading_alignment:
            base *= ccfg.toward_factor
        elif alignment < -ccfg.heading_alignment:
            base *= ccfg.away_factor

    base = min(ccfg.max_turnover, max(0.0, base))
    compounded = 1.0 - (1.0 - base) ** (max(0.0, horizon) / ccfg.horizon)
    return min(ccfg.max_turnover, max(0.0, compounded))


def project_position(
    carrier: Mover,
    horizon: float,
    pitch: Optional[Pitch] = None,
) -> Vector2D:
    """Extrapolate the carrier along its velocity and keep it on the pitch.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    horizon : float
        Seconds to extrapolate.
    pitch : Pitch | None
        Pitch bounds; built from the default configuration when omitted.

    Returns
    -------
    Vector2D
        Projected position clamped to the pitch.
    """
    pitch = resolve_pitch(pitch)
    projected = carrier.position + carrier.velocity * horizon
    return pitch.constrain_to_bounds(projected)


def _dispossession_value(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    config: EngineConfig,
) -> float:
    """Value for the carrier's side if the ball is lost where the carrier stands.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig
        Active configuration.

    Returns
    -------
    float
        Negated opponent value at the carrier's position.
    """
    swapped = snapshot.role_swapped(carrier.x, carrier.y)
    return -value_at(carrier.x, carrier.y, swapped, config)


def _build_evaluation(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    horizon: float,
    projected: Vector2D,
    current_value: float,
    projected_value: float,
    config: EngineConfig,
) -> CarryEvaluation:
    """Blend projected and turnover values into a carry evaluation.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    horizon : float
        Seconds the carry is projected over.
    projected : Vector2D
        Carrier position after the horizon.
    current_value : float
        Possession value at the carrier now.
    projected_value : float
        Possession value at ``projected``.
    config : EngineConfig
        Active configuration.

    Returns
    -------
    CarryEvaluation
        Fully populated evaluation.
    """
    p_loss = turnover_probability(carrier, snapshot.opponents, horizon, config)
    loss_value = _dispossession_value(carrier, snapshot, config)
    return CarryEvaluation(
        carrier_id=carrier.mover_id,
        horizon=horizon,
        current_value=current_value,
        projected_x=projected.x,
        projected_y=projected.y,
        projected_value=projected_value,
        turnover_probability=p_loss,
        turnover_value=loss_value,
        carry_value=(1.0 - p_loss) * projected_value + p_loss * loss_value,
        pressure=pressure(carrier, snapshot.opponents, config),
    )


def evaluate_carry(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    horizon: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> CarryEvaluation:
    """Evaluate carrying the ball computing every value from scratch.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    horizon : float | None
        Seconds to project; defaults to the configured carry horizon.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    CarryEvaluation
        Evaluated carry.
    """
    cfg = resolve_config(config)
    if horizon is None:
        horizon = cfg.carry.horizon
    projected = project_position(carrier, horizon, Pitch.from_config(cfg))
    current = value_at(carrier.x, carrier.y, snapshot, cfg)
    moved = snapshot.with_ball_at(projected.x, projected.y)
    projected_value = value_at(projected.x, projected.y, moved, cfg)
    return _build_evaluation(carrier, snapshot, horizon, projected, current, projected_value, cfg)


def evaluate_carry_on_field(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    value_field: ValueField,
    horizon: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> CarryEvaluation:
    """Evaluate carrying the ball reading values from a prebuilt value field.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    value_field : ValueField
        Value surface previously built for ``snapshot``.
    horizon : float | None
        Seconds to project; defaults to the configured carry horizon.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    CarryEvaluation
        Evaluated carry.
    """
    cfg = resolve_config(config)
    if horizon is None:
        horizon = cfg.carry.horizon
    projected = project_position(carrier, horizon, Pitch.from_config(cfg))
    current = value_at_field(value_field, carrier.x, carrier.y)
    projected_value = value_at_field(value_field, projected.x, projected.y)
    return _build_evaluation(carrier, snapshot, horizon, projected, current, projected_value, cfg)


def compare_with_passes(carry: CarryEvaluation, pass_options: Sequence[PassOption]) -> CarryComparison:
    """Decide whether the best pass beats carrying.

    Parameters
    ----------
    carry : CarryEvaluation
        Evaluated carry.
    pass_options : Sequence[PassOption]
        Evaluated passes in any order.

    Returns
    -------
    CarryComparison
        Recommendation and the values it was based on.
    """
    if not pass_options:
        return CarryComparison(carry.carry_value, None, None, "carry", 0.0)

    best = pass_options[0]
    for option in pass_options[1:]:
        if option.expected_value > best.expected_value:
            best = option

    recommended = "pass" if best.expected_value > carry.carry_value else "carry"
    return CarryComparison(
        carry_value=carry.carry_value,
        best_pass_value=best.expected_value,
        best_receiver_id=best.receiver_id,
        recommended=recommended,
        margin=abs(best.expected_value - carry.carry_value),
    )
