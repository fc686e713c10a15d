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
"""Utilities for constructing possession snapshots from plain data.

Tracking providers each have their own record layout; by the time data reaches
this module it is expected to be a mapping with ``team``, ``opponents`` and
``ball`` sections in metres on a pitch centred at the origin. Optional fields
default to zero so sparse frames remain usable.
"""
import json
from dataclasses import replace
from pathlib import Path
from typing import Dict, Optional, Union

from pitchvalue.models.snapshot import BallPosition, Mover, MoverId, PossessionSnapshot


def mover_from_dict(d: dict) -> Mover:
    """Build a ``Mover`` from a plain dictionary payload.

    Parameters
    ----------
    d
        A mapping with ``id``, ``x`` and ``y`` plus optional ``role`` (or
        legacy ``position``), ``vx`` and ``vy``.

    Returns
    -------
    Mover
        Mover with missing velocities set to zero.
    """
    return Mover(
        mover_id=d["id"],
        role=d.get("role") or d.get("position"),
        x=float(d["x"]),
        y=float(d["y"]),
        vx=float(d.get("vx", 0.0) or 0.0),
        vy=float(d.get("vy", 0.0) or 0.0),
    )


def snapshot_from_dict(payload: dict) -> PossessionSnapshot:
    """Build a ``PossessionSnapshot`` from a plain dictionary payload.

    Parameters
    ----------
    payload : dict
        Mapping with ``team`` and ``opponents`` mover lists, a ``ball`` mapping
        and an optional ``attacking_right`` flag.

    Returns
    -------
    PossessionSnapshot
        Snapshot ready for analysis.
    """
    for key in ("team", "opponents", "ball"):
        if key not in payload:
            raise KeyError(f"Snapshot payload missing '{key}' section")

    ball = payload["ball"]
    return PossessionSnapshot(
        team=tuple(mover_from_dict(m) for m in payload["team"]),
        opponents=tuple(mover_from_dict(m) for m in payload["opponents"]),
        ball=BallPosition(float(ball["x"]), float(ball["y"]), float(ball.get("z", 0.0) or 0.0)),
        attacking_right=bool(payload.get("attacking_right", True)),
    )


def load_snapshot_from_json(path: Union[str, Path]) -> PossessionSnapshot:
    """Load a snapshot stored as JSON.

    Parameters
    ----------
    path : str | Path
        File containing one snapshot payload.

    Returns
    -------
    PossessionSnapshot
        Snapshot described by the file.
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    return snapshot_from_dict(data)


def derive_velocities(
    previous: PossessionSnapshot,
    current: PossessionSnapshot,
    fps: float = 25.0,
) -> PossessionSnapshot:
    """Fill mover velocities from the displacement since the previous frame.

    Movers are matched by identity. Movers absent from ``previous`` keep the
    velocity they already carry.

    Parameters
    ----------
    previous : PossessionSnapshot
        Earlier frame.
    current : PossessionSnapshot
        Frame whose velocities should be filled.
    fps : float, optional
        Frames per second of the source data.

    Returns
    -------
    PossessionSnapshot
        Copy of ``current`` with finite-difference velocities.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    earlier: Dict[MoverId, Mover] = {m.mover_id: m for m in previous.all_movers()}

    def _with_velocity(mover: Mover) -> Mover:
        before = earlier.get(mover.mover_id)
        if before is None:
            return mover
        return replace(mover, vx=(mover.x - before.x) * fps, vy=(mover.y - before.y) * fps)

    return replace(
        current,
        team=tuple(_with_velocity(m) for m in current.team),
        opponents=tuple(_with_velocity(m) for m in current.opponents),
    )


def find_ball_carrier(snapshot: PossessionSnapshot, max_distance: float = 3.0) -> Optional[Mover]:
    """Return the possessing mover closest to the ball, if close enough.

    Parameters
    ----------
    snapshot : PossessionSnapshot
        Instant to inspect.
    max_distance : float, optional
        Ball distance a mover must be strictly closer than to count as the carrier.

    Returns
    -------
    Mover | None
        Nearest possessing mover closer than ``max_distance``; earlier movers win ties.
    """
    carrier: Optional[Mover] = None
    best = max_distance
    for mover in snapshot.team:
        distance = mover.distance_to(snapshot.ball.x, snapshot.ball.y)
        if distance < best:
            carrier = mover
            best = distance
    return carrier
