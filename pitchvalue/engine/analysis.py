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
"""Whole-frame analysis chaining every valuation component.

For one instant the analysis finds the ball-carrier, builds the value field
once, and reuses it for the pass and carry evaluations so a frame costs a
single grid computation plus per-option turnover checks.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from pitchvalue.models.snapshot import MoverId, PossessionSnapshot
from pitchvalue.utils.debug import AnalysisDebugger
from pitchvalue.utils.frames import find_ball_carrier

from .actions import ActionLikelihood, action_likelihood, most_likely_action
from .carry import CarryComparison, CarryEvaluation, PressureReport, compare_with_passes, evaluate_carry_on_field
from .config import EngineConfig, resolve_config
from .formation import FormationLines, LineBreak, ZoneInfo, detect_lines, line_break_analysis, zone_of
from .grid import ValueField
from .passing import PassOption, rank_options_on_field
from .value import DecomposedValue, decomposed_value, generate_value_field, shot_quality, value_at_field


@dataclass(frozen=True)
class FrameAnalysis:
    """Everything the engine reports about one instant.

    Parameters
    ----------
    has_carrier : bool
        Whether a ball-carrier was identified.
    carrier_id : int | str | None
        Identity of the carrier.
    current_value : float
        Possession value at the carrier.
    value_field : ValueField | None
        Value surface for the instant.
    lines : FormationLines | None
        Defending side's pressure lines.
    carrier_zone : ZoneInfo | None
        Zone the carrier occupies.
    pressure : PressureReport | None
        Pressure on the carrier.
    actions : ActionLikelihood | None
        Shoot, carry and pass probabilities.
    pass_options : Tuple[PassOption, ...]
        Best-ranked passes, best first.
    line_breaks : Dict[int | str, LineBreak]
        Line-break analysis keyed by receiver identity.
    carry : CarryEvaluation | None
        Carry evaluation for the carrier.
    shot_value : float
        Shot quality from the carrier's position.
    decomposed : DecomposedValue | None
        Probability-weighted value split by action.
    comparison : CarryComparison | None
        Carry versus best pass.
    best_action_value : float
        Highest value among the available actions.
    worst_action_value : float
        Lowest value among the available actions.
    most_likely : str | None
        Name of the most probable action.
    """

    has_carrier: bool
    carrier_id: Optional[MoverId] = None
    current_value: float = 0.0
    value_field: Optional[ValueField] = None
    lines: Optional[FormationLines] = None
    carrier_zone: Optional[ZoneInfo] = None
    pressure: Optional[PressureReport] = None
    actions: Optional[ActionLikelihood] = None
    pass_options: Tuple[PassOption, ...] = ()
    line_breaks: Dict[MoverId, LineBreak] = field(default_factory=dict)
    carry: Optional[CarryEvaluation] = None
    shot_value: float = 0.0
    decomposed: Optional[DecomposedValue] = None
    comparison: Optional[CarryComparison] = None
    best_action_value: float = 0.0
    worst_action_value: float = 0.0
    most_likely: Optional[str] = None


@dataclass(frozen=True)
class SequencePoint:
    """One entry of a running possession value ticker.

    Parameters
    ----------
    index : int
        Position of the snapshot in the sequence.
    carrier_id : int | str | None
        Carrier identified in the snapshot.
    value : float
        Possession value at the carrier, ``0`` without one.
    delta : float
        Change from the previous entry.
    assessment : str
        Grade of ``delta`` from :func:`value_added_assessment`.
    decomposed_total : float, optional
        Action-weighted value of the frame, ``0`` without a carrier.
    best_action_value : float, optional
        Value of the best available action.
    worst_action_value : float, optional
        Value of the worst available action.
    zone : str | None, optional
        Zone code of the carrier relative to the defensive lines.
    """

    index: int
    carrier_id: Optional[MoverId]
    value: float
    delta: float
    assessment: str
    decomposed_total: float = 0.0
    best_action_value: float = 0.0
    worst_action_value: float = 0.0
    zone: Optional[str] = None


def value_added_assessment(before: float, after: float, config: Optional[EngineConfig] = None) -> str:
    """Grade a change in possession value.

    Parameters
    ----------
    before : float
        Value before the action.
    after : float
        Value after the action.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    str
        ``"excellent"``, ``"good"``, ``"neutral"``, ``"poor"`` or ``"bad"``.
    """
    excellent, good, neutral, poor = resolve_config(config).analysis.assessment_thresholds
    delta = after - before
    if delta > excellent:
        return "excellent"
    if delta > good:
        return "good"
    if delta > neutral:
        return "neutral"
    if delta > poor:
        return "poor"
    return "bad"


def analyze_frame(
    snapshot: PossessionSnapshot,
    carrier_id: Optional[MoverId] = None,
    resolution: Optional[float] = None,
    config: Optional[EngineConfig] = None,
    debugger: Optional[AnalysisDebugger] = None,
) -> FrameAnalysis:
    """Run every valuation component for one instant.

    Parameters
    ----------
    snapshot : PossessionSnapshot
        Instant being analysed.
    carrier_id : int | str | None
        Identity of the carrier; detected from the ball position when omitted.
    resolution : float | None
        Value field cell size; defaults to the static resolution.
    config : EngineConfig | None
        Configuration override.
    debugger : AnalysisDebugger | None
        Optional session log receiving a trace of the analysis.

    Returns
    -------
    FrameAnalysis
        Combined result; ``has_carrier`` is ``False`` when nobody is on the ball.
    """
    cfg = resolve_config(config)
    acfg = cfg.analysis

    if carrier_id is None:
        carrier = find_ball_carrier(snapshot, acfg.carrier_radius)
    else:
        carrier = next((m for m in snapshot.team if m.mover_id == carrier_id), None)

    if carrier is None:
        if debugger is not None:
            debugger.log_snapshot(snapshot, None, 0.0)
        return FrameAnalysis(has_carrier=False)

    value_field = generate_value_field(snapshot, resolution=resolution, config=cfg)
    current = value_at_field(value_field, carrier.x, carrier.y)
    attacking_right = snapshot.attacking_right

    lines = detect_lines(snapshot.opponents, attacking_right, cfg)
    carrier_zone = zone_of(carrier.x, carrier.y, lines, attacking_right)
    likelihood = action_likelihood(carrier, snapshot, cfg)

    ranked = rank_options_on_field(carrier, snapshot.teammates_of(carrier.mover_id), snapshot, value_field, cfg)
    reported = tuple(ranked[: acfg.reported_passes])
    line_breaks = {
        option.receiver_id: line_break_analysis(
            (carrier.x, carrier.y), (option.receiver_x, option.receiver_y), lines, attacking_right
        )
        for option in reported
    }

    carry = evaluate_carry_on_field(carrier, snapshot, value_field, config=cfg)
    shot_value = shot_quality(carrier.x, carrier.y, attacking_right, config=cfg)
    best_pass_value = ranked[0].expected_value if ranked else 0.0
    decomposed = decomposed_value(
        likelihood.p_pass,
        best_pass_value,
        likelihood.p_carry,
        carry.carry_value,
        likelihood.p_shoot,
        shot_value,
    )
    comparison = compare_with_passes(carry, ranked)

    action_values = [carry.carry_value, shot_value]
    if ranked:
        action_values.append(best_pass_value)

    if debugger is not None:
        debugger.log_snapshot(snapshot, carrier.mover_id, current)
        debugger.log_actions(carrier.mover_id, likelihood)
        debugger.log_pass_options(carrier.mover_id, reported)
        debugger.log_carry(carry)

    return FrameAnalysis(
        has_carrier=True,
        carrier_id=carrier.mover_id,
        current_value=current,
        value_field=value_field,
        lines=lines,
        carrier_zone=carrier_zone,
        pressure=carry.pressure,
        actions=likelihood,
        pass_options=reported,
        line_breaks=line_breaks,
        carry=carry,
        shot_value=shot_value,
        decomposed=decomposed,
        comparison=comparison,
        best_action_value=max(action_values),
        worst_action_value=min(action_values),
        most_likely=most_likely_action(likelihood),
    )


def analyze_sequence(
    snapshots: Iterable[PossessionSnapshot],
    resolution: Optional[float] = None,
    config: Optional[EngineConfig] = None,
    debugger: Optional[AnalysisDebugger] = None,
) -> List[SequencePoint]:
    """Track possession value across consecutive snapshots.

    Parameters
    ----------
    snapshots : Iterable[PossessionSnapshot]
        Instants in playback order.
    resolution : float | None
        Value field cell size; defaults to the coarser playback resolution.
    config : EngineConfig | None
        Configuration override.
    debugger : AnalysisDebugger | None
        Optional session log receiving a trace of each frame.

    Returns
    -------
    List[SequencePoint]
        One point per snapshot with the change since the previous one.
    """
    cfg = resolve_config(config)
    if resolution is None:
        resolution = cfg.grid.playback_resolution

    points: List[SequencePoint] = []
    previous: Optional[float] = None
    for index, snapshot in enumerate(snapshots):
        frame = analyze_frame(snapshot, resolution=resolution, config=cfg, debugger=debugger)
        value = frame.current_value
        if previous is None:
            delta = 0.0
            assessment = "neutral"
        else:
            delta = value - previous
            assessment = value_added_assessment(previous, value, cfg)
        points.append(
            SequencePoint(
                index,
                frame.carrier_id,
                value,
                delta,
                assessment,
                decomposed_total=frame.decomposed.total if frame.decomposed is not None else 0.0,
                best_action_value=frame.best_action_value,
                worst_action_value=frame.worst_action_value,
                zone=frame.carrier_zone.code if frame.carrier_zone is not None else None,
            )
        )
        previous = value
    return points
