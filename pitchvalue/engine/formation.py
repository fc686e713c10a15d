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
"""Defensive pressure lines and the zones between them.

Lines are expressed along the attack axis of the side in possession, so the
first line is the one closest to that side's own goal (usually the opposing
forwards) and the third line is the back line.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pitchvalue.models.snapshot import Mover, MoverId

from .config import EngineConfig, resolve_config

LINE_COUNT = 3

ZONE_LABELS: Tuple[Tuple[str, str, str], ...] = (
    ("Z1", "Behind First Line", "build-up"),
    ("Z2", "Between First and Second Line", "progression"),
    ("Z3", "Between Second and Third Line", "pre-finalization"),
    ("Z4", "Beyond Third Line", "finalization"),
)


@dataclass(frozen=True)
class FormationLines:
    """Three pressure lines along the attack axis plus line membership.

    Parameters
    ----------
    first : float
        Along-axis position of the first line.
    second : float
        Along-axis position of the second line.
    third : float
        Along-axis position of the third line.
    assignments : Dict[int | str, int]
        Defender identity to line number (1 to 3).
    attacking_right : bool
        Attack direction the along-axis positions refer to.
    """

    first: float
    second: float
    third: float
    assignments: Dict[MoverId, int] = field(default_factory=dict)
    attacking_right: bool = True

    @property
    def positions(self) -> Tuple[float, float, float]:
        """Along-axis line positions, first to third."""
        return (self.first, self.second, self.third)

    def pitch_positions(self) -> Tuple[float, float, float]:
        """Return the line positions as pitch ``x`` coordinates.

        Returns
        -------
        Tuple[float, float, float]
            Line positions mirrored back when attacking toward negative ``x``.
        """
        sign = 1.0 if self.attacking_right else -1.0
        return (sign * self.first, sign * self.second, sign * self.third)


@dataclass(frozen=True)
class ZoneInfo:
    """Where a point sits relative to the pressure lines.

    Parameters
    ----------
    index : int
        Zone number from 1 (behind the first line) to 4 (beyond the third).
    code : str
        Short label ``"Z1"`` to ``"Z4"``.
    name : str
        Descriptive zone name.
    phase : str
        Phase of play associated with the zone.
    x : float
        Along-pitch coordinate of the point.
    y : float
        Across-pitch coordinate of the point.
    nearest_line_distance : float
        Distance along the attack axis to the closest line.
    """

    index: int
    code: str
    name: str
    phase: str
    x: float
    y: float
    nearest_line_distance: float


@dataclass(frozen=True)
class LineBreak:
    """Zone change produced by moving the ball between two points.

    Parameters
    ----------
    origin : ZoneInfo
        Zone of the starting point.
    destination : ZoneInfo
        Zone of the end point.
    direction : str
        ``"forward"``, ``"backward"`` or ``"lateral"``.
    lines_crossed : int
        Number of lines crossed in either direction.
    """

    origin: ZoneInfo
    destination: ZoneInfo
    direction: str
    lines_crossed: int

    @property
    def breaks_lines(self) -> bool:
        """Whether the ball moved past at least one line going forward."""
        return self.direction == "forward"


def cluster_1d(
    positions: Iterable[float],
    k: int = 3,
    max_iterations: int = 50,
    tolerance: float = 0.5,
) -> List[float]:
    """Group scalar positions around ``k`` centroids.

    Centroids start evenly spread over the range of the data. Each round
    assigns every position to its nearest centroid and moves each centroid to
    the mean of its members; a centroid without members stays put.

    Parameters
    ----------
    positions : Iterable[float]
        Scalar values to cluster.
    k : int, optional
        Number of clusters.
    max_iterations : int, optional
        Iteration cap.
    tolerance : float, optional
        Stop once no centroid moves further than this.

    Returns
    -------
    List[float]
        Centroids in ascending order, or the sorted input when it holds fewer
        than ``k`` values.
    """
    if k <= 0:
        raise ValueError(f"k must be positive, got {k}")
    values = sorted(float(p) for p in positions)
    if len(values) < k:
        return values

    low, high = values[0], values[-1]
    span = high - low
    centroids = [low + span * (i + 0.5) / k for i in range(k)]

    for _ in range(max_iterations):
        members: List[List[float]] = [[] for _ in range(k)]
        for value in values:
            nearest = min(range(k), key=lambda i: abs(value - centroids[i]))
            members[nearest].append(value)

        updated = [sum(group) / len(group) if group else centroids[i] for i, group in enumerate(members)]
        shift = max(abs(new - old) for new, old in zip(updated, centroids))
        centroids = updated
        if shift < tolerance:
            break

    return sorted(centroids)


def detect_lines(
    defenders: Sequence[Mover],
    attacking_right: bool,
    config: Optional[EngineConfig] = None,
) -> FormationLines:
    """Cluster the defending side into three pressure lines.

    Parameters
    ----------
    defenders : Sequence[Mover]
        Movers of the side without the ball.
    attacking_right : bool
        Whether the side in possession attacks toward positive ``x``.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    FormationLines
        Ascending along-axis lines and each defender's nearest line.
    """
    fcfg = resolve_config(config).formation
    if not defenders:
        return FormationLines(0.0, 0.0, 0.0, {}, attacking_right)

    along = [d.x if attacking_right else -d.x for d in defenders]
    centroids = cluster_1d(along, LINE_COUNT, fcfg.max_iterations, fcfg.convergence)
    while len(centroids) < LINE_COUNT:
        centroids.append(centroids[-1])

    assignments: Dict[MoverId, int] = {}
    for defender, position in zip(defenders, along):
        nearest = min(range(LINE_COUNT), key=lambda i: abs(position - centroids[i]))
        assignments[defender.mover_id] = nearest + 1

    return FormationLines(centroids[0], centroids[1], centroids[2], assignments, attacking_right)


def zone_of(x: float, y: float, lines: FormationLines, attacking_right: bool) -> ZoneInfo:
    """Classify a point into one of the four zones around the lines.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate.
    lines : FormationLines
        Pressure lines to compare against.
    attacking_right : bool
        Whether the side in possession attacks toward positive ``x``.

    Returns
    -------
    ZoneInfo
        Zone index, labels and distance to the closest line.
    """
    along = x if attacking_right else -x
    index = LINE_COUNT + 1
    for position, line in enumerate(lines.positions, start=1):
        if along < line:
            index = position
            break

    code, name, phase = ZONE_LABELS[index - 1]
    nearest = min(abs(along - line) for line in lines.positions)
    return ZoneInfo(index, code, name, phase, x, y, nearest)


def zone_multiplier(zone: int, config: Optional[EngineConfig] = None) -> float:
    """Return the value weighting for a zone.

    Parameters
    ----------
    zone : int
        Zone index from 1 to 4.
    config : EngineConfig | None
        Configuration override.

    Returns
    -------
    float
        Multiplier growing toward the finalization zone.
    """
    multipliers = resolve_config(config).formation.zone_multipliers
    if not 1 <= zone <= len(multipliers):
        raise ValueError(f"Unknown zone index: {zone}")
    return multipliers[zone - 1]


def line_break_analysis(
    origin: Tuple[float, float],
    destination: Tuple[float, float],
    lines: FormationLines,
    attacking_right: bool,
) -> LineBreak:
    """Describe how a ball movement relates to the pressure lines.

    Parameters
    ----------
    origin : Tuple[float, float]
        ``(x, y)`` where the ball starts.
    destination : Tuple[float, float]
        ``(x, y)`` where the ball ends.
    lines : FormationLines
        Pressure lines to compare against.
    attacking_right : bool
        Whether the side in possession attacks toward positive ``x``.

    Returns
    -------
    LineBreak
        Zones of both points, direction and lines crossed.
    """
    start = zone_of(origin[0], origin[1], lines, attacking_right)
    end = zone_of(destination[0], destination[1], lines, attacking_right)
    change = end.index - start.index
    if change > 0:
        direction = "forward"
    elif change < 0:
        direction = "backward"
    else:
        direction = "lateral"
    return LineBreak(start, end, direction, abs(change))
