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
"""Entry point for analysing a single possession snapshot and the optional viewer."""
import argparse
import json
from pathlib import Path
from typing import List, Optional

from pitchvalue.engine.analysis import FrameAnalysis, analyze_frame
from pitchvalue.models.snapshot import PossessionSnapshot
from pitchvalue.utils.debug import AnalysisDebugger
from pitchvalue.utils.frames import load_snapshot_from_json  # For loading saved frames
from pitchvalue.utils.generator import generate_snapshot  # Fallback if no frame file


def print_analysis(analysis: FrameAnalysis) -> None:
    """Print a readable summary of a frame analysis.

    Parameters
    ----------
    analysis : FrameAnalysis
        Result produced by :func:`analyze_frame`.
    """
    if not analysis.has_carrier:
        print("No ball-carrier found near the ball.")
        return

    print(f"Carrier: {analysis.carrier_id}")
    print(f"Current value: {analysis.current_value:+.3f}")
    if analysis.carrier_zone is not None:
        zone = analysis.carrier_zone
        print(f"Zone: {zone.code} ({zone.name}, {zone.phase})")
    if analysis.pressure is not None:
        print(f"Pressure: {analysis.pressure.score:.2f}")
    if analysis.actions is not None:
        probs = ", ".join(f"{name} {p:.2f}" for name, p in analysis.actions.as_dict().items())
        print(f"Action likelihood: {probs} (most likely: {analysis.most_likely})")

    print("\nTop passes:")
    if not analysis.pass_options:
        print("  none")
    for rank, option in enumerate(analysis.pass_options, start=1):
        crossing = analysis.line_breaks.get(option.receiver_id)
        lines = f", {crossing.lines_crossed} line(s) {crossing.direction}" if crossing else ""
        print(
            f"  {rank}. -> {option.receiver_id}: expected {option.expected_value:+.3f}, "
            f"added {option.value_added:+.3f}, risk {option.risk}{lines}"
        )

    if analysis.carry is not None:
        print(f"\nCarry value: {analysis.carry.carry_value:+.3f} (turnover {analysis.carry.turnover_probability:.2f})")
    print(f"Shot value: {analysis.shot_value:.3f}")
    if analysis.decomposed is not None:
        print(f"Decomposed value: {analysis.decomposed.total:+.3f}")
    if analysis.comparison is not None:
        print(f"Recommended: {analysis.comparison.recommended}")


def load_snapshot(path: Optional[str], formation: str, opponent_formation: str) -> PossessionSnapshot:
    """Load a snapshot from disk, falling back to a generated one.

    Parameters
    ----------
    path : str | None
        JSON frame file; generated data is used when missing or unreadable.
    formation : str
        Formation of the side in possession for generated data.
    opponent_formation : str
        Formation of the defending side for generated data.

    Returns
    -------
    PossessionSnapshot
        Snapshot to analyse.
    """
    if path is not None and Path(path).exists():
        try:
            return load_snapshot_from_json(path)
        except (OSError, KeyError, ValueError, json.JSONDecodeError) as e:
            print(f"Error loading snapshot from {path}: {e}")
            print("Falling back to a generated snapshot...")
    elif path is not None:
        print(f"No frame file found at {path}")
        print("Using a generated snapshot...")
    return generate_snapshot(formation, opponent_formation)


def main(argv: Optional[List[str]] = None) -> None:
    """Analyse one snapshot, print the summary and open the viewer.

    Parameters
    ----------
    argv : List[str] | None
        Command-line arguments; ``sys.argv`` is used when omitted.
    """
    parser = argparse.ArgumentParser(description="Value a possession snapshot")
    parser.add_argument("--frame", default="data/snapshot.json", help="JSON snapshot to analyse")
    parser.add_argument("--formation", default="4-3-3", help="Generated side in possession")
    parser.add_argument("--opponents", default="4-4-2", help="Generated defending side")
    parser.add_argument("--resolution", type=float, default=None, help="Value grid cell size in metres")
    parser.add_argument("--debug-dir", default=None, help="Write an analysis trace to this directory")
    parser.add_argument("--no-viewer", action="store_true", help="Skip the pygame viewer")
    args = parser.parse_args(argv)

    snapshot = load_snapshot(args.frame, args.formation, args.opponents)

    debugger = AnalysisDebugger(args.debug_dir) if args.debug_dir else None
    try:
        analysis = analyze_frame(snapshot, resolution=args.resolution, debugger=debugger)
    finally:
        if debugger is not None:
            debugger.close()

    print_analysis(analysis)

    if not args.no_viewer:
        from pitchvalue.visualizer.visualizer import start_visualizer

        start_visualizer(snapshot, resolution=args.resolution)


if __name__ == "__main__":
    main()
