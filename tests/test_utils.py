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
"""Tests for utility modules (frames, generator, debug)."""

import json

import pytest

from pitchvalue.models.snapshot import BallPosition, Mover, PossessionSnapshot
from pitchvalue.utils.debug import AnalysisDebugger
from pitchvalue.utils.frames import (
    derive_velocities,
    find_ball_carrier,
    load_snapshot_from_json,
    mover_from_dict,
    snapshot_from_dict,
)
from pitchvalue.utils.generator import ATTACKING_SHAPES, DEFENDING_SHAPES, generate_snapshot

PAYLOAD = {
    "team": [
        {"id": 1, "role": "CM", "x": 0.0, "y": 0.0, "vx": 1.5, "vy": -0.5},
        {"id": 2, "position": "ST", "x": 18.0, "y": 4.0},
    ],
    "opponents": [{"id": 101, "role": "CB", "x": 25.0, "y": 0.0, "vx": None}],
    "ball": {"x": 0.5, "y": 0.0},
    "attacking_right": False,
}


class TestFrames:
    """Tests for building snapshots from plain data."""

    def test_mover_from_dict(self) -> None:
        """Accept legacy position keys and default missing velocities."""
        mover = mover_from_dict({"id": 9, "position": "LW", "x": "3", "y": 2})
        assert mover.role == "LW"
        assert mover.x == 3.0
        assert mover.vx == 0.0
        assert mover.vy == 0.0

    def test_snapshot_from_dict(self) -> None:
        """Build every section of the snapshot."""
        snapshot = snapshot_from_dict(PAYLOAD)
        assert [m.mover_id for m in snapshot.team] == [1, 2]
        assert snapshot.team[0].vx == 1.5
        assert snapshot.team[1].role == "ST"
        assert snapshot.opponents[0].vx == 0.0
        assert snapshot.ball == BallPosition(0.5, 0.0)
        assert not snapshot.attacking_right

    def test_missing_section(self) -> None:
        """Raise KeyError when a required section is absent."""
        payload = {key: value for key, value in PAYLOAD.items() if key != "ball"}
        with pytest.raises(KeyError):
            snapshot_from_dict(payload)

    def test_load_snapshot_from_json(self, tmp_path) -> None:
        """Read a snapshot payload from disk."""
        path = tmp_path / "frame.json"
        path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
        snapshot = load_snapshot_from_json(path)
        assert snapshot == snapshot_from_dict(PAYLOAD)

    def test_derive_velocities(self) -> None:
        """Difference positions between frames and keep unmatched velocities."""
        before = PossessionSnapshot([Mover(1, "CM", 0.0, 0.0)], [Mover(101, "CB", 10.0, 0.0)], BallPosition(0.0, 0.0))
        after = PossessionSnapshot(
            [Mover(1, "CM", 0.2, -0.1), Mover(3, "ST", 5.0, 5.0, vx=2.0)],
            [Mover(101, "CB", 9.9, 0.0)],
            BallPosition(0.2, -0.1),
        )
        result = derive_velocities(before, after, fps=10.0)
        assert result.team[0].vx == pytest.approx(2.0)
        assert result.team[0].vy == pytest.approx(-1.0)
        assert result.team[1].vx == 2.0
        assert result.opponents[0].vx == pytest.approx(-1.0)

    def test_derive_velocities_rejects_bad_fps(self) -> None:
        """Refuse a non-positive frame rate."""
        snapshot = snapshot_from_dict(PAYLOAD)
        with pytest.raises(ValueError):
            derive_velocities(snapshot, snapshot, fps=0.0)

    def test_find_ball_carrier(self) -> None:
        """Pick the nearest possessing mover within range."""
        snapshot = snapshot_from_dict(PAYLOAD)
        assert find_ball_carrier(snapshot).mover_id == 1
        assert find_ball_carrier(snapshot.with_ball_at(40.0, 0.0)) is None

    def test_carrier_radius_is_exclusive(self) -> None:
        """Reject a mover exactly at the radius and accept one just inside."""
        ball = BallPosition(0.0, 0.0)
        at_edge = PossessionSnapshot([Mover(1, "CM", 3.0, 0.0)], [], ball)
        inside = PossessionSnapshot([Mover(1, "CM", 3.0, 0.0), Mover(2, "ST", 0.0, 2.9)], [], ball)
        assert find_ball_carrier(at_edge) is None
        assert find_ball_carrier(inside).mover_id == 2

    def test_carrier_tie_keeps_first(self) -> None:
        """Keep the earlier mover when two are equally close."""
        snapshot = PossessionSnapshot(
            [Mover(1, "CM", 1.0, 0.0), Mover(2, "ST", -1.0, 0.0)], [], BallPosition(0.0, 0.0)
        )
        assert find_ball_carrier(snapshot).mover_id == 1


class TestGenerator:
    """Tests for generated demo snapshots."""

    @pytest.mark.parametrize("formation", sorted(ATTACKING_SHAPES))
    def test_full_sides(self, formation: str) -> None:
        """Field eleven movers a side with distinct identities."""
        snapshot = generate_snapshot(team_formation=formation)
        assert len(snapshot.team) == 11
        assert len(snapshot.opponents) == 11
        assert [m.mover_id for m in snapshot.team] == list(range(1, 12))
        assert [m.mover_id for m in snapshot.opponents] == list(range(101, 112))

    def test_ball_at_carrier(self) -> None:
        """Place the ball at the requested carrier."""
        snapshot = generate_snapshot(carrier_role="st")
        striker = next(m for m in snapshot.team if m.role == "ST")
        assert (snapshot.ball.x, snapshot.ball.y) == (striker.x, striker.y)

    def test_mirrors_when_attacking_left(self) -> None:
        """Flip x coordinates for a side attacking toward negative x."""
        right = generate_snapshot(attacking_right=True)
        left = generate_snapshot(attacking_right=False)
        assert not left.attacking_right
        for a, b in zip(right.all_movers(), left.all_movers()):
            assert b.x == -a.x
            assert b.y == a.y

    def test_seeded_jitter_is_reproducible(self) -> None:
        """Repeat the same jitter for the same seed."""
        first = generate_snapshot(seed=11, jitter=2.0)
        second = generate_snapshot(seed=11, jitter=2.0)
        assert first == second
        assert first != generate_snapshot(seed=12, jitter=2.0)

    def test_rejects_unknown_inputs(self) -> None:
        """Raise ValueError for unknown formations or carriers."""
        with pytest.raises(ValueError):
            generate_snapshot(team_formation="2-3-5")
        with pytest.raises(ValueError):
            generate_snapshot(opponent_formation="5-5-0")
        with pytest.raises(ValueError):
            generate_snapshot(carrier_role="GOALPOACHER")

    def test_defending_shapes_are_complete(self) -> None:
        """Provide eleven defenders in every defending template."""
        assert all(len(shape) == 11 for shape in DEFENDING_SHAPES.values())


class TestAnalysisDebugger:
    """Tests for the analysis trace writer."""

    def test_writes_session_file(self, tmp_path) -> None:
        """Create a session file and record entries with line numbers."""
        debugger = AnalysisDebugger(tmp_path / "logs")
        debugger.log_snapshot(generate_snapshot(), 7, 0.125)
        debugger.log_error("Lookup", "missing mover")
        debugger.close()

        assert debugger.log_path.parent == tmp_path / "logs"
        assert debugger.log_path.name.startswith("analysis_debug_")
        text = debugger.log_path.read_text(encoding="utf-8")
        assert "SNAPSHOT" in text
        assert "Carrier: 7" in text
        assert "ERROR: Type: Lookup | Details: missing mover" in text

    def test_recent_events(self, tmp_path) -> None:
        """Return the latest entries up to the limit."""
        debugger = AnalysisDebugger(tmp_path)
        for index in range(5):
            debugger.log_error("Step", str(index))
        events = debugger.get_recent_events(limit=2)
        debugger.close()
        assert len(events) == 2
        assert events[0].startswith("00004 ")
        assert events[1].endswith("Details: 4")

    def test_empty_pass_list(self, tmp_path) -> None:
        """Note when the carrier has nobody to pass to."""
        debugger = AnalysisDebugger(tmp_path)
        debugger.log_pass_options(1, [])
        debugger.close()
        assert "No receivers" in debugger.get_recent_events()[-1]

    def test_survives_closed_file(self, tmp_path) -> None:
        """Keep recording in memory after the file is closed underneath."""
        debugger = AnalysisDebugger(tmp_path)
        debugger.log_file.close()
        debugger.log_error("Step", "after close")
        events = debugger.get_recent_events()
        assert any("after close" in event for event in events)
        assert any("Log file detached" in event for event in events)
        assert debugger.log_file is None
