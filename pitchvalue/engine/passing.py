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
"""Pass evaluation: interception risk, turnover cost and ranked options.

A pass is scored as a gamble. With the success probability the side gains the
receiver's value, adjusted for how far forward the ball travelled; otherwise
the opponent wins the ball at the most likely interception point and the side
loses whatever the opponent gains there.
"""
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from pitchvalue.models.snapshot import Mover, MoverId, PossessionSnapshot

from .config import EngineConfig, PassingConfig, resolve_config
from .control import logistic
from .grid import ValueField
from .kinematics import time_to_intercept
from .value import value_at, value_at_field


@dataclass(frozen=True)
class LaneThreat:
    """An opponent whose projection falls on the passing segment.

    Parameters
    ----------
    opponent : Mover
        Defender being considered.
    x : float
        Along-pitch coordinate of the projection onto the segment.
    y : float
        Across-pitch coordinate of the projection onto the segment.
    perpendicular : float
        Distance from the defender to the passing line.
    ball_time : float
        Seconds the ball needs to reach the projection.
    opponent_time : float
        Seconds the defender needs to reach the projection.
    """

    opponent: Mover
    x: float
    y: float
    perpendicular: float
    ball_time: float
    opponent_time: float


@dataclass(frozen=True)
class InterceptionPoint:
    """Most likely place a pass is cut out.

    Parameters
    ----------
    x : float
        Along-pitch coordinate of the interception.
    y : float
        Across-pitch coordinate of the interception.
    interceptor_id : int | str | None
        Identity of the intercepting defender, ``None`` without defenders.
    on_lane : bool
        ``True`` when a defender can reach the lane in time, ``False`` for the
        fallback at the receiver.
    """

    x: float
    y: float
    interceptor_id: Optional[MoverId]
    on_lane: bool


@dataclass(frozen=True)
class TurnoverEstimate:
    """Cost of losing the ball on a pass.

    Parameters
    ----------
    value : float
        Possession value for the passing side after the turnover.
    x : float
        Along-pitch coordinate where possession is lost.
    y : float
        Across-pitch coordinate where possession is lost.
    interceptor_id : int | str | None
        Defender credited with the interception.
    """

    value: float
    x: float
    y: float
    interceptor_id: Optional[MoverId]


@dataclass(frozen=True)
class PassOption:
    """Evaluated pass from the carrier to one teammate.

    Parameters
    ----------
    passer_id : int | str
        Identity of the passer.
    receiver_id : int | str
        Identity of the intended receiver.
    receiver_x : float
        Along-pitch coordinate of the receiver.
    receiver_y : float
        Across-pitch coordinate of the receiver.
    interception_probability : float
        Chance the pass is cut out.
    success_probability : float
        Chance the pass arrives.
    receiver_value : float
        Possession value at the receiver with the ball there.
    direction_factor : float
        Multiplier for forward or backward travel.
    adjusted_value : float
        ``receiver_value`` times ``direction_factor``.
    turnover : TurnoverEstimate
        Cost of the pass failing.
    expected_value : float
        Success-weighted blend of adjusted and turnover values.
    current_value : float
        Possession value at the passer.
    value_added : float
        ``expected_value - current_value``.
    risk : str
        ``"high"``, ``"medium"`` or ``"low"``.
    direction : str
        ``"forward"``, ``"lateral"`` or ``"backward"``.
    """

    passer_id: MoverId
    receiver_id: MoverId
    receiver_x: float
    receiver_y: float
    interception_probability: float
    success_probability: float
    receiver_value: float
    direction_factor: float
    adjusted_value: float
    turnover: TurnoverEstimate
    expected_value: float
    current_value: float
    value_added: float
    risk: str
    direction: str

    @property
    def turnover_value(self) -> float:
        """Possession value if the pass is intercepted."""
        return self.turnover.value


def _lane_threats(
    passer: Mover,
    receiver: Mover,
    opponents: Sequence[Mover],
    config: EngineConfig,
) -> Iterator[LaneThreat]:
    """Yield every opponent whose projection lies on the passing segment.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    opponents : Sequence[Mover]
        Defenders to scan.
    config : EngineConfig
        Active configuration.

    Returns
    -------
    Iterator[LaneThreat]
        Geometry and timing for each defender on the lane.
    """
    dx = receiver.x - passer.x
    dy = receiver.y - passer.y
    length = math.hypot(dx, dy)
    if length == 0:
        return
    ux, uy = dx / length, dy / length

    for opponent in opponents:
        along = (opponent.x - passer.x) * ux + (opponent.y - passer.y) * uy
        if along < 0 or along > length:
            continue
        px = passer.x + ux * along
        py = passer.y + uy * along
        yield LaneThreat(
            opponent=opponent,
            x=px,
            y=py,
            perpendicular=math.hypot(opponent.x - px, opponent.y - py),
            ball_time=along / config.kinematics.ball_speed,
            opponent_time=time_to_intercept(opponent, px, py, config),
        )


def interception_probability(
    passer: Mover,
    receiver: Mover,
    opponents: Sequence[Mover],
    config: Optional[EngineConfig] = None,
) -> float:
    """Estimate the chance a pass is cut out.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    opponents : Sequence[Mover]
        Defenders who might intercept.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Probability in ``[0, max_interception]``.
    """
    cfg = resolve_config(config)
    pcfg = cfg.passing

    danger = 0.0
    for threat in _lane_threats(passer, receiver, opponents, cfg):
        reach = logistic(pcfg.interception_steepness * (threat.ball_time - threat.opponent_time))
        danger = max(danger, reach * math.exp(-threat.perpendicular / pcfg.perpendicular_decay))

    distance = math.hypot(receiver.x - passer.x, receiver.y - passer.y)
    distance_risk = pcfg.distance_risk_weight * (1.0 - math.exp(-distance / pcfg.distance_risk_scale))
    return min(pcfg.max_interception, danger + distance_risk)


def find_interception_point(
    passer: Mover,
    receiver: Mover,
    opponents: Sequence[Mover],
    config: Optional[EngineConfig] = None,
) -> InterceptionPoint:
    """Locate where the ball is most likely to be won back.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    opponents : Sequence[Mover]
        Defenders who might intercept.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    InterceptionPoint
        Earliest feasible interception on the lane, or the receiver's position
        credited to the defender nearest the receiver.
    """
    cfg = resolve_config(config)
    grace = cfg.passing.interception_grace

    best: Optional[LaneThreat] = None
    for threat in _lane_threats(passer, receiver, opponents, cfg):
        if threat.opponent_time > threat.ball_time + grace:
            continue
        if best is None or threat.opponent_time < best.opponent_time:
            best = threat

    if best is not None:
        return InterceptionPoint(best.x, best.y, best.opponent.mover_id, True)

    nearest_id: Optional[MoverId] = None
    nearest_distance = math.inf
    for opponent in opponents:
        distance = opponent.distance_to(receiver.x, receiver.y)
        if distance < nearest_distance:
            nearest_distance = distance
            nearest_id = opponent.mover_id
    return InterceptionPoint(receiver.x, receiver.y, nearest_id, False)


def turnover_value(
    passer: Mover,
    receiver: Mover,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> TurnoverEstimate:
    """Value the passing side is left with if the pass is intercepted.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    TurnoverEstimate
        Negated opponent value at the interception point.
    """
    cfg = resolve_config(config)
    point = find_interception_point(passer, receiver, snapshot.opponents, cfg)
    swapped = snapshot.role_swapped(point.x, point.y)
    opponent_gain = value_at(point.x, point.y, swapped, cfg)
    return TurnoverEstimate(-opponent_gain, point.x, point.y, point.interceptor_id)


def direction_factor(advance: float, config: Optional[EngineConfig] = None) -> float:
    """Multiplier rewarding forward passes and penalising backward ones.

    Parameters
    ----------
    advance : float
        Net metres gained toward the attacked goal; negative for backward passes.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Multiplier between ``backward_floor`` and ``forward_base + forward_bonus_cap``.
    """
    pcfg: PassingConfig = resolve_config(config).passing
    if advance > pcfg.strong_advance:
        return pcfg.forward_base + min(pcfg.forward_bonus_cap, advance / pcfg.forward_scale)
    if advance > 0:
        return 1.0 + advance / pcfg.forward_scale
    if advance > -pcfg.strong_advance:
        return 1.0 + advance / pcfg.backward_scale
    return max(pcfg.backward_floor, pcfg.strong_backward_base + advance / pcfg.strong_backward_scale)


def pass_direction_label(
    passer: Mover,
    receiver: Mover,
    attacking_right: bool,
    config: Optional[EngineConfig] = None,
) -> str:
    """Classify a pass as forward, lateral or backward.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    attacking_right : bool
        Whether the passing side attacks toward positive ``x``.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    str
        ``"forward"``, ``"lateral"`` or ``"backward"``.
    """
    ratio = resolve_config(config).passing.lateral_ratio
    advance = receiver.x - passer.x if attacking_right else passer.x - receiver.x
    lateral = abs(receiver.y - passer.y)
    if advance > ratio * lateral:
        return "forward"
    if advance < -ratio * lateral:
        return "backward"
    return "lateral"


def risk_tier(probability: float, config: Optional[EngineConfig] = None) -> str:
    """Bucket an interception probability.

    Parameters
    ----------
    probability : float
        Interception probability.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    str
        ``"high"``, ``"medium"`` or ``"low"``.
    """
    pcfg = resolve_config(config).passing
    if probability > pcfg.high_risk:
        return "high"
    if probability > pcfg.medium_risk:
        return "medium"
    return "low"


def _build_option(
    passer: Mover,
    receiver: Mover,
    snapshot: PossessionSnapshot,
    current_value: float,
    receiver_value: float,
    config: EngineConfig,
) -> PassOption:
    """Assemble a pass option once the two endpoint values are known.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    snapshot : PossessionSnapshot
        Instant being valued.
    current_value : float
        Possession value at the passer.
    receiver_value : float
        Possession value at the receiver with the ball there.
    config : EngineConfig
        Active configuration.

    Returns
    -------
    PassOption
        Fully populated option.
    """
    p_intercept = interception_probability(passer, receiver, snapshot.opponents, config)
    success = 1.0 - p_intercept
    advance = receiver.x - passer.x if snapshot.attacking_right else passer.x - receiver.x
    factor = direction_factor(advance, config)
    adjusted = receiver_value * factor
    turnover = turnover_value(passer, receiver, snapshot, config)
    expected = success * adjusted + (1.0 - success) * turnover.value

    return PassOption(
        passer_id=passer.mover_id,
        receiver_id=receiver.mover_id,
        receiver_x=receiver.x,
        receiver_y=receiver.y,
        interception_probability=p_intercept,
        success_probability=success,
        receiver_value=receiver_value,
        direction_factor=factor,
        adjusted_value=adjusted,
        turnover=turnover,
        expected_value=expected,
        current_value=current_value,
        value_added=expected - current_value,
        risk=risk_tier(p_intercept, config),
        direction=pass_direction_label(passer, receiver, snapshot.attacking_right, config),
    )


def evaluate_pass(
    passer: Mover,
    receiver: Mover,
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> PassOption:
    """Evaluate a pass computing every value from scratch.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    PassOption
        Evaluated option.
    """
    cfg = resolve_config(config)
    current = value_at(passer.x, passer.y, snapshot, cfg)
    at_receiver = snapshot.with_ball_at(receiver.x, receiver.y)
    receiver_value = value_at(receiver.x, receiver.y, at_receiver, cfg)
    return _build_option(passer, receiver, snapshot, current, receiver_value, cfg)


def evaluate_pass_on_field(
    passer: Mover,
    receiver: Mover,
    snapshot: PossessionSnapshot,
    value_field: ValueField,
    config: Optional[EngineConfig] = None,
) -> PassOption:
    """Evaluate a pass reading endpoint values from a prebuilt value field.

    Parameters
    ----------
    passer : Mover
        Mover playing the ball.
    receiver : Mover
        Intended target.
    snapshot : PossessionSnapshot
        Instant being valued.
    value_field : ValueField
        Value surface previously built for ``snapshot``.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    PassOption
        Evaluated option.
    """
    cfg = resolve_config(config)
    current = value_at_field(value_field, passer.x, passer.y)
    receiver_value = value_at_field(value_field, receiver.x, receiver.y)
    return _build_option(passer, receiver, snapshot, current, receiver_value, cfg)


def _sorted_options(options: List[PassOption]) -> List[PassOption]:
    """Order options by value added, best first, keeping input order on ties.

    Parameters
    ----------
    options : List[PassOption]
        Options in teammate order.

    Returns
    -------
    List[PassOption]
        New list sorted descending by ``value_added``.
    """
    return sorted(options, key=lambda option: option.value_added, reverse=True)


def _receivers(carrier: Mover, teammates: Sequence[Mover]) -> Tuple[Mover, ...]:
    """Drop the carrier from a teammate list if it was included.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    teammates : Sequence[Mover]
        Candidate receivers.

    Returns
    -------
    Tuple[Mover, ...]
        Candidates other than the carrier.
    """
    return tuple(m for m in teammates if m.mover_id != carrier.mover_id)


def rank_options(
    carrier: Mover,
    teammates: Sequence[Mover],
    snapshot: PossessionSnapshot,
    config: Optional[EngineConfig] = None,
) -> List[PassOption]:
    """Evaluate every teammate from scratch and rank the passes.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    teammates : Sequence[Mover]
        Candidate receivers.
    snapshot : PossessionSnapshot
        Instant being valued.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    List[PassOption]
        Options sorted descending by value added; empty without teammates.
    """
    cfg = resolve_config(config)
    options = [evaluate_pass(carrier, mate, snapshot, cfg) for mate in _receivers(carrier, teammates)]
    return _sorted_options(options)


def rank_options_on_field(
    carrier: Mover,
    teammates: Sequence[Mover],
    snapshot: PossessionSnapshot,
    value_field: ValueField,
    config: Optional[EngineConfig] = None,
) -> List[PassOption]:
    """Rank passes reading endpoint values from a prebuilt value field.

    Parameters
    ----------
    carrier : Mover
        Mover on the ball.
    teammates : Sequence[Mover]
        Candidate receivers.
    snapshot : PossessionSnapshot
        Instant being valued.
    value_field : ValueField
        Value surface previously built for ``snapshot``.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    List[PassOption]
        Options sorted descending by value added; empty without teammates.
    """
    cfg = resolve_config(config)
    options = [
        evaluate_pass_on_field(carrier, mate, snapshot, value_field, cfg)
        for mate in _receivers(carrier, teammates)
    ]
    return _sorted_options(options)
