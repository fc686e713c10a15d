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
"""Heuristic likelihood of the carrier shooting, carrying or passing."""
import math
from dataclasses import dataclass
from typing import Dict, Optional

from pitchvalue.models.snapshot import Mover, PossessionSnapshot

from .carry import pressure
from .config import EngineConfig, resolve_config
from .control import control_at
from .physics import Pitch


@dataclass(frozen=True)
class ActionLikelihood:
    """Probabilities of the three on-ball actions, summing to one.

    Parameters
    ----------
    p_shoot : float
        Probability of shooting.
    p_carry : float
        Probability of carrying.
    p_pass : float
        Probability of passing.
    """

    p_shoot: float
    p_carry: float
    p_pass: float

    def as_dict(self) -> Dict[str, float]:
        """Return the probabilities keyed by action name.

        Returns
        -------
        Dict[str, float]
            ``{"shoot": ..., "carry": ..., "pass": ...}``.
        """
        return {"shoot": self.p_shoot, "carry": self.p_carry, "pass": self.p_pass}


def shot_probability(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> float:
    """Likelihood that the carrier shoots from where they stand.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Probability clamped to the configured shot bounds.
    """
    cfg = resolve_config(config)
    acfg = cfg.actions
    pitch = Pitch.from_config(cfg)
    attacking_right = snapshot.attacking_right
    goal = pitch.goal_position(attacking_right)
    distance = math.hypot(carrier.x - goal.x, carrier.y - goal.y)

    if pitch.in_goal_area(carrier.x, carrier.y, attacking_right):
        probability = acfg.six_yard_shot
    elif pitch.in_penalty_area(carrier.x, carrier.y, attacking_right):
        probability = acfg.box_shot_scale * math.exp(-(distance - acfg.box_shot_offset) / acfg.box_shot_decay)
    elif distance < acfg.edge_range:
        probability = acfg.edge_shot_scale * math.exp(-(distance - acfg.edge_shot_offset) / acfg.edge_shot_decay)
    else:
        probability = acfg.long_shot_scale * math.exp(-distance / acfg.long_shot_decay)

    probability *= math.exp(-(carrier.y**2) / acfg.shot_angle_variance)

    report = pressure(carrier, snapshot.opponents, cfg)
    if report.under_high_pressure:
        probability *= acfg.shot_high_pressure_factor
    elif report.score > acfg.shot_pressure_threshold:
        probability *= acfg.shot_pressure_factor

    low, high = acfg.shot_bounds
    return min(high, max(low, probability))


def carry_probability(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> float:
    """Likelihood that the carrier keeps running with the ball.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Probability clamped to the configured carry bounds.
    """
    cfg = resolve_config(config)
    acfg = cfg.actions
    speed = carrier.speed

    if speed > acfg.carry_driving_speed:
        probability = acfg.carry_driving
    elif speed > acfg.carry_moving_speed:
        probability = acfg.carry_moving
    else:
        probability = acfg.carry_base

    if speed > acfg.heading_min_speed:
        dir_x, dir_y = carrier.vx / speed, carrier.vy / speed
    else:
        dir_x, dir_y = (1.0 if snapshot.attacking_right else -1.0), 0.0
    ahead_x = carrier.x + dir_x * acfg.look_ahead
    ahead_y = carrier.y + dir_y * acfg.look_ahead
    space = control_at(ahead_x, ahead_y, snapshot.team, snapshot.opponents, snapshot.ball, cfg)
    probability *= acfg.carry_space_offset + space

    report = pressure(carrier, snapshot.opponents, cfg)
    if report.under_high_pressure:
        probability *= acfg.carry_high_pressure_factor
    elif report.score > acfg.carry_pressure_threshold:
        probability *= acfg.carry_pressure_factor

    along = carrier.x if snapshot.attacking_right else -carrier.x
    if along < acfg.defensive_third_x:
        probability *= acfg.defensive_third_factor

    low, high = acfg.carry_bounds
    return min(high, max(low, probability))


def pass_probability(p_shoot: float, p_carry: float, config: Optional[EngineConfig] = None) -> float:
    """Residual likelihood of passing before normalisation.

    Parameters
    ----------
    p_shoot : float
        Shot probability.
    p_carry : float
        Carry probability.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        ``max(pass_floor, 1 - p_shoot - p_carry)``.
    """
    floor = resolve_config(config).actions.pass_floor
    return max(floor, 1.0 - p_shoot - p_carry)


def action_likelihood(
    carrier: Mover,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> ActionLikelihood:
    """Estimate shoot, carry and pass probabilities for the carrier.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    ActionLikelihood
        Probabilities renormalised to sum to one.
    """
    cfg = resolve_config(config)
    p_shoot = shot_probability(carrier, snapshot, cfg)
    p_carry = carry_probability(carrier, snapshot, cfg)
    p_pass = pass_probability(p_shoot, p_carry, cfg)

    total = p_shoot + p_carry + p_pass
    p_shoot /= total
    p_carry /= total
    return ActionLikelihood(p_shoot, p_carry, 1.0 - p_shoot - p_carry)


def most_likely_action(likelihood: ActionLikelihood) -> str:
    """Return the name of the most probable action.

    Parameters
    ----------
    likelihood : ActionLikelihood
        Action probabilities.

    Returns
    -------
    str
        ``"pass"``, ``"carry"`` or ``"shoot"``; ties favour that order.
    """
    ranked = (("pass", likelihood.p_pass), ("carry", likelihood.p_carry), ("shoot", likelihood.p_shoot))
    return max(ranked, key=lambda item: item[1])[0]
