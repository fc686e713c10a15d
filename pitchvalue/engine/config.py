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
"""Central configuration for valuation model tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(slots=True)
class PitchConfig:
    """Physical dimensions and penalty box measurements for the pitch.

    Parameters
    ----------
    length : float, default=105.0
        Goal-line to goal-line length in metres.
    width : float, default=68.0
        Touchline to touchline width in metres.
    goal_width : float, default=7.32
        Width of the goal mouth.
    penalty_area_width : float, default=40.32
        Width of the penalty box.
    penalty_area_depth : float, default=16.5
        Depth of the penalty box extending from the goal line.
    goal_area_width : float, default=18.32
        Width of the six-yard box.
    goal_area_depth : float, default=5.5
        Depth of the six-yard box from the goal line.
    """

    length: float = 105.0
    width: float = 68.0
    goal_width: float = 7.32
    penalty_area_width: float = 40.32
    penalty_area_depth: float = 16.5
    goal_area_width: float = 18.32
    goal_area_depth: float = 5.5


@dataclass(slots=True)
class KinematicsConfig:
    """Motion model used to estimate how quickly a mover reaches a point.

    Parameters
    ----------
    max_speed : float, default=5.5
        Base top speed in metres per second before the role factor is applied.
    acceleration : float, default=3.5
        Constant acceleration in metres per second squared.
    reaction_time : float, default=0.7
        Delay in seconds before a mover starts accelerating.
    ball_speed : float, default=15.0
        Average ball travel speed for passes in metres per second.
    arrival_radius : float, default=0.5
        Distance under which a mover is treated as already at the target.
    default_role_factor : float, default=0.95
        Speed multiplier used when a role is missing from ``role_speed_factors``.
    role_speed_factors : Dict[str, float]
        Top-speed multipliers keyed by role code.
    """

    max_speed: float = 5.5
    acceleration: float = 3.5
    reaction_time: float = 0.7
    ball_speed: float = 15.0
    arrival_radius: float = 0.5
    default_role_factor: float = 0.95
    role_speed_factors: Dict[str, float] = field(
        default_factory=lambda: {
            "GK": 0.85,
            "CB": 0.90,
            "LCB": 0.90,
            "RCB": 0.90,
            "LB": 0.95,
            "RB": 0.95,
            "CM": 0.92,
            "CDM": 0.90,
            "CAM": 0.93,
            "AM": 0.93,
            "LM": 0.98,
            "RM": 0.98,
            "LW": 1.0,
            "RW": 1.0,
            "CF": 0.95,
            "ST": 0.95,
        }
    )

    def __post_init__(self) -> None:
        """Reject motion constants that would make arrival times undefined."""
        for name in ("max_speed", "acceleration", "ball_speed"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.reaction_time < 0:
            raise ValueError("reaction_time must not be negative")

    def speed_factor(self, role: Optional[str]) -> float:
        """Return the top-speed multiplier for ``role``.

        Parameters
        ----------
        role : str | None
            Role code such as ``"CB"``; unknown or missing roles use the default factor.

        Returns
        -------
        float
            Multiplier applied to ``max_speed``.
        """
        if role is None:
            return self.default_role_factor
        return self.role_speed_factors.get(role.upper(), self.default_role_factor)


@dataclass(slots=True)
class GridConfig:
    """Default cell sizes for generated surfaces.

    Parameters
    ----------
    static_resolution : float, default=2.0
        Metres per cell when the picture is paused.
    playback_resolution : float, default=4.0
        Coarser metres per cell used during continuous playback.
    """

    static_resolution: float = 2.0
    playback_resolution: float = 4.0


@dataclass(slots=True)
class ControlConfig:
    """Parameters turning arrival-time advantages into control probabilities.

    Parameters
    ----------
    steepness : float, default=4.0
        Logistic steepness applied to each mover's time advantage.
    neutral : float, default=0.5
        Control reported when neither side exerts any influence.
    """

    steepness: float = 4.0
    neutral: float = 0.5


@dataclass(slots=True)
class ValueConfig:
    """Shape of the progression potential and shot quality surfaces.

    Parameters
    ----------
    progression_bands : Tuple[Tuple[float, float, float, float], ...]
        ``(upper, base, start, slope)`` rows; a normalised position ``n`` below
        ``upper`` scores ``base + (n - start) * slope``.
    central_penalty : float, default=0.25
        Fraction of value lost at the touchline relative to the centre line.
    shot_range : float, default=30.0
        Distance beyond which shot quality collapses to ``shot_floor``.
    shot_floor : float, default=0.01
        Baseline shot quality for long-range positions.
    shot_distance_decay : float, default=12.0
        Exponential decay constant on distance to goal centre.
    shot_angle_variance : float, default=150.0
        Variance of the lateral angle penalty.
    shot_cap : float, default=0.8
        Upper bound on shot quality.
    """

    progression_bands: Tuple[Tuple[float, float, float, float], ...] = (
        (0.15, 0.05, 0.0, 0.3),
        (0.33, 0.10, 0.15, 0.5),
        (0.50, 0.20, 0.33, 1.2),
        (0.66, 0.40, 0.50, 1.5),
        (0.85, 0.65, 0.66, 1.2),
        (float("inf"), 0.90, 0.85, 0.6),
    )
    central_penalty: float = 0.25
    shot_range: float = 30.0
    shot_floor: float = 0.01
    shot_distance_decay: float = 12.0
    shot_angle_variance: float = 150.0
    shot_cap: float = 0.8


@dataclass(slots=True)
class PassingConfig:
    """Interception, turnover, and direction weights for pass evaluation.

    Parameters
    ----------
    interception_steepness : float, default=5.0
        Logistic steepness on the ball-versus-defender time difference.
    perpendicular_decay : float, default=3.0
        Distance scale attenuating defenders far from the passing line.
    distance_risk_weight : float, default=0.1
        Weight of the generic long-pass risk term.
    distance_risk_scale : float, default=40.0
        Distance scale of the long-pass risk term.
    max_interception : float, default=0.95
        Upper bound on interception probability.
    interception_grace : float, default=0.3
        Seconds a defender may arrive after the ball and still intercept.
    strong_advance : float, default=10.0
        Net forward metres separating strong from mild direction bands.
    forward_base : float, default=1.3
        Direction factor floor for strongly forward passes.
    forward_bonus_cap : float, default=0.2
        Extra factor available to strongly forward passes.
    forward_scale : float, default=50.0
        Metres of advance per unit of forward bonus.
    backward_scale : float, default=30.0
        Metres of retreat per unit of penalty for mildly backward passes.
    strong_backward_base : float, default=0.7
        Starting factor for strongly backward passes.
    strong_backward_scale : float, default=50.0
        Metres of retreat per unit of penalty for strongly backward passes.
    backward_floor : float, default=0.3
        Lowest direction factor.
    high_risk : float, default=0.5
        Interception probability above which a pass is high risk.
    medium_risk : float, default=0.25
        Interception probability above which a pass is medium risk.
    lateral_ratio : float, default=0.5
        Ratio of forward to lateral displacement separating pass directions.
    """

    interception_steepness: float = 5.0
    perpendicular_decay: float = 3.0
    distance_risk_weight: float = 0.1
    distance_risk_scale: float = 40.0
    max_interception: float = 0.95
    interception_grace: float = 0.3
    strong_advance: float = 10.0
    forward_base: float = 1.3
    forward_bonus_cap: float = 0.2
    forward_scale: float = 50.0
    backward_scale: float = 30.0
    strong_backward_base: float = 0.7
    strong_backward_scale: float = 50.0
    backward_floor: float = 0.3
    high_risk: float = 0.5
    medium_risk: float = 0.25
    lateral_ratio: float = 0.5


@dataclass(slots=True)
class CarryConfig:
    """Pressure bands and turnover risk applied to ball carries.

    Parameters
    ----------
    horizon : float, default=0.25
        Evaluation interval in seconds for a single carry step.
    high_pressure_radius : float, default=1.5
        Distance under which an opponent applies near-maximal pressure.
    pressure_radius : float, default=3.0
        Distance under which an opponent applies moderate pressure.
    outer_pressure_radius : float, default=6.0
        Distance beyond which pressure is negligible.
    base_turnover_rate : float, default=0.3
        Turnover probability per interval under full pressure.
    fast_speed : float, default=6.0
        Speed above which control is harder.
    fast_factor : float, default=1.1
        Turnover multiplier for fast carriers.
    slow_speed : float, default=2.0
        Speed under which the carrier is easy to press.
    slow_factor : float, default=1.2
        Turnover multiplier for slow carriers.
    heading_min_speed : float, default=0.5
        Minimum speed for the heading adjustment to apply.
    heading_alignment : float, default=0.5
        Cosine threshold classifying motion toward or away from the nearest opponent.
    toward_factor : float, default=1.3
        Turnover multiplier when running at the nearest opponent.
    away_factor : float, default=0.8
        Turnover multiplier when running away from the nearest opponent.
    max_turnover : float, default=0.95
        Upper bound on the compounded turnover probability.
    """

    horizon: float = 0.25
    high_pressure_radius: float = 1.5
    pressure_radius: float = 3.0
    outer_pressure_radius: float = 6.0
    base_turnover_rate: float = 0.3
    fast_speed: float = 6.0
    fast_factor: float = 1.1
    slow_speed: float = 2.0
    slow_factor: float = 1.2
    heading_min_speed: float = 0.5
    heading_alignment: float = 0.5
    toward_factor: float = 1.3
    away_factor: float = 0.8
    max_turnover: float = 0.95


@dataclass(slots=True)
class FormationConfig:
    """Clustering settings for defensive pressure lines.

    Parameters
    ----------
    max_iterations : int, default=50
        Iteration cap for the one-dimensional clustering.
    convergence : float, default=0.5
        Largest centroid movement in metres considered converged.
    zone_multipliers : Tuple[float, float, float, float]
        Value multipliers for zones one to four.
    """

    max_iterations: int = 50
    convergence: float = 0.5
    zone_multipliers: Tuple[float, float, float, float] = (0.6, 0.9, 1.2, 1.5)


@dataclass(slots=True)
class ActionConfig:
    """Heuristic weights for shoot, carry, and pass likelihoods.

    Parameters
    ----------
    six_yard_shot : float, default=0.7
        Shot probability inside the six-yard box.
    box_shot_scale : float, default=0.5
        Peak shot probability inside the penalty box.
    box_shot_offset : float, default=11.0
        Distance at which the box curve peaks.
    box_shot_decay : float, default=10.0
        Decay constant inside the box.
    edge_range : float, default=25.0
        Distance under which edge-of-box shots remain plausible.
    edge_shot_scale : float, default=0.15
        Peak probability for edge-of-box shots.
    edge_shot_offset : float, default=16.5
        Distance at which the edge curve peaks.
    edge_shot_decay : float, default=8.0
        Decay constant outside the box.
    long_shot_scale : float, default=0.02
        Peak probability for speculative long shots.
    long_shot_decay : float, default=40.0
        Decay constant for long shots.
    shot_angle_variance : float, default=400.0
        Variance of the central-angle factor.
    shot_high_pressure_factor : float, default=0.6
        Multiplier under high pressure.
    shot_pressure_factor : float, default=0.8
        Multiplier when the pressure score exceeds ``shot_pressure_threshold``.
    shot_pressure_threshold : float, default=0.5
        Pressure score above which shots are discouraged.
    shot_bounds : Tuple[float, float], default=(0.01, 0.9)
        Clamp applied to the shot probability.
    carry_base : float, default=0.3
        Carry probability for a stationary carrier.
    carry_moving : float, default=0.4
        Carry probability above ``carry_moving_speed``.
    carry_moving_speed : float, default=2.0
        Speed marking a carrier already on the move.
    carry_driving : float, default=0.5
        Carry probability above ``carry_driving_speed``.
    carry_driving_speed : float, default=4.0
        Speed marking a carrier already driving forward.
    look_ahead : float, default=5.0
        Distance in metres to the control sample ahead of the carrier.
    heading_min_speed : float, default=0.5
        Speed below which the attack direction replaces the velocity heading.
    carry_space_offset : float, default=0.5
        Offset added to the look-ahead control before scaling.
    carry_high_pressure_factor : float, default=0.4
        Multiplier under high pressure.
    carry_pressure_factor : float, default=0.6
        Multiplier when the pressure score exceeds ``carry_pressure_threshold``.
    carry_pressure_threshold : float, default=0.6
        Pressure score above which carrying is discouraged.
    defensive_third_x : float, default=-20.0
        Along-axis coordinate behind which carrying is discouraged.
    defensive_third_factor : float, default=0.7
        Multiplier applied behind ``defensive_third_x``.
    carry_bounds : Tuple[float, float], default=(0.1, 0.8)
        Clamp applied to the carry probability.
    pass_floor : float, default=0.15
        Minimum residual pass probability before normalisation.
    """

    six_yard_shot: float = 0.7
    box_shot_scale: float = 0.5
    box_shot_offset: float = 11.0
    box_shot_decay: float = 10.0
    edge_range: float = 25.0
    edge_shot_scale: float = 0.15
    edge_shot_offset: float = 16.5
    edge_shot_decay: float = 8.0
    long_shot_scale: float = 0.02
    long_shot_decay: float = 40.0
    shot_angle_variance: float = 400.0
    shot_high_pressure_factor: float = 0.6
    shot_pressure_factor: float = 0.8
    shot_pressure_threshold: float = 0.5
    shot_bounds: Tuple[float, float] = (0.01, 0.9)
    carry_base: float = 0.3
    carry_moving: float = 0.4
    carry_moving_speed: float = 2.0
    carry_driving: float = 0.5
    carry_driving_speed: float = 4.0
    look_ahead: float = 5.0
    heading_min_speed: float = 0.5
    carry_space_offset: float = 0.5
    carry_high_pressure_factor: float = 0.4
    carry_pressure_factor: float = 0.6
    carry_pressure_threshold: float = 0.6
    defensive_third_x: float = -20.0
    defensive_third_factor: float = 0.7
    carry_bounds: Tuple[float, float] = (0.1, 0.8)
    pass_floor: float = 0.15


@dataclass(slots=True)
class AnalysisConfig:
    """Settings for whole-frame analysis and value-added grading.

    Parameters
    ----------
    carrier_radius : float, default=3.0
        Maximum distance between ball and mover for automatic carrier detection.
    reported_passes : int, default=5
        Number of ranked pass options kept in a frame summary.
    assessment_thresholds : Tuple[float, float, float, float]
        Value-added cut points for excellent, good, neutral, and poor grades.
    """

    carrier_radius: float = 3.0
    reported_passes: int = 5
    assessment_thresholds: Tuple[float, float, float, float] = (0.05, 0.02, -0.02, -0.05)


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all valuation tuning structures.

    Parameters
    ----------
    pitch : PitchConfig, default=PitchConfig()
        Pitch dimension configuration.
    kinematics : KinematicsConfig, default=KinematicsConfig()
        Mover and ball motion constants.
    grid : GridConfig, default=GridConfig()
        Default surface resolutions.
    control : ControlConfig, default=ControlConfig()
        Spatial control aggregation settings.
    value : ValueConfig, default=ValueConfig()
        Progression and shot quality surfaces.
    passing : PassingConfig, default=PassingConfig()
        Pass evaluation weights.
    carry : CarryConfig, default=CarryConfig()
        Carry evaluation weights.
    formation : FormationConfig, default=FormationConfig()
        Pressure line clustering settings.
    actions : ActionConfig, default=ActionConfig()
        Action likelihood heuristics.
    analysis : AnalysisConfig, default=AnalysisConfig()
        Whole-frame analysis settings.
    """

    pitch: PitchConfig = field(default_factory=PitchConfig)
    kinematics: KinematicsConfig = field(default_factory=KinematicsConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    control: ControlConfig = field(default_factory=ControlConfig)
    value: ValueConfig = field(default_factory=ValueConfig)
    passing: PassingConfig = field(default_factory=PassingConfig)
    carry: CarryConfig = field(default_factory=CarryConfig)
    formation: FormationConfig = field(default_factory=FormationConfig)
    actions: ActionConfig = field(default_factory=ActionConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the default engine configuration."""


def resolve_config(config: Optional[EngineConfig] = None) -> EngineConfig:
    """Return ``config`` or the module default when none is supplied.

    Parameters
    ----------
    config : EngineConfig | None
        Caller-supplied configuration override.

    Returns
    -------
    EngineConfig
        Configuration to use for the current computation.
    """
    return config if config is not None else ENGINE_CONFIG
