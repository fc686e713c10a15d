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
"""Structured logging utilities used to trace possession analyses."""
from __future__ import annotations

import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Deque, List, Optional, Sequence, TextIO, Tuple, Union

if TYPE_CHECKING:
    from pitchvalue.engine.actions import ActionLikelihood
    from pitchvalue.engine.carry import CarryEvaluation
    from pitchvalue.engine.passing import PassOption
    from pitchvalue.models.snapshot import PossessionSnapshot


class AnalysisDebugger:
    """Helper object that streams structured analysis telemetry to disk.

    Parameters
    ----------
    output_dir : str | Path, default="debug_logs"
        Directory where new session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: Union[str, Path] = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str | Path
            Filesystem directory where log files are created.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        self.log_path = self.output_dir / f"analysis_debug_{self.session_start}.txt"
        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Analysis Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_snapshot(
        self,
        snapshot: PossessionSnapshot,
        carrier_id: Optional[Union[int, str]],
        value: float,
    ) -> None:
        """Log the instant being analysed.

        Parameters
        ----------
        snapshot : PossessionSnapshot
            Instant being analysed.
        carrier_id : int | str | None
            Identified ball-carrier, if any.
        value : float
            Possession value at the carrier.
        """
        direction = "right" if snapshot.attacking_right else "left"
        carrier_str = f"Carrier: {carrier_id}" if carrier_id is not None else "Carrier: none"
        self._write_log(
            "SNAPSHOT",
            f"Ball: ({snapshot.ball.x:.1f}, {snapshot.ball.y:.1f}) | "
            f"Team: {len(snapshot.team)} | Opponents: {len(snapshot.opponents)} | "
            f"Attacking: {direction} | {carrier_str} | Value: {value:+.3f}",
        )

    def log_pass_options(self, carrier_id: Union[int, str], options: Sequence[PassOption]) -> None:
        """Log ranked pass options, one line each.

        Parameters
        ----------
        carrier_id : int | str
            Identity of the passer.
        options : Sequence[PassOption]
            Options in ranked order.
        """
        if not options:
            self._write_log("PASS_OPTIONS", f"Carrier {carrier_id} | No receivers")
            return
        for rank, option in enumerate(options, start=1):
            self._write_log(
                "PASS_OPTION",
                f"#{rank} {carrier_id} -> {option.receiver_id} | "
                f"Success: {option.success_probability:.2f} | "
                f"Expected: {option.expected_value:+.3f} | "
                f"Added: {option.value_added:+.3f} | "
                f"Risk: {option.risk} | Direction: {option.direction}",
            )

    def log_carry(self, carry: CarryEvaluation) -> None:
        """Log a carry evaluation.

        Parameters
        ----------
        carry : CarryEvaluation
            Evaluated carry.
        """
        self._write_log(
            "CARRY",
            f"Carrier {carry.carrier_id} | "
            f"To: ({carry.projected_x:.1f}, {carry.projected_y:.1f}) | "
            f"Turnover: {carry.turnover_probability:.2f} | "
            f"Pressure: {carry.pressure.score:.2f} | "
            f"Value: {carry.carry_value:+.3f}",
        )

    def log_actions(self, carrier_id: Union[int, str], likelihood: ActionLikelihood) -> None:
        """Log the action likelihood for the carrier.

        Parameters
        ----------
        carrier_id : int | str
            Identity of the carrier.
        likelihood : ActionLikelihood
            Shoot, carry and pass probabilities.
        """
        self._write_log(
            "ACTIONS",
            f"Carrier {carrier_id} | "
            f"Shoot: {likelihood.p_shoot:.2f} | "
            f"Carry: {likelihood.p_carry:.2f} | "
            f"Pass: {likelihood.p_pass:.2f}",
        )

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        A failed write detaches the file and keeps the entry in memory so the
        analysis that produced it carries on.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                try:
                    self.log_file.write(f"{log_entry}\n")
                    self.log_file.flush()
                except (OSError, ValueError) as exc:
                    self.log_file = None
                    self._recent_events.append((line_no, f"[{timestamp}] ERROR: Log file detached: {exc}"))

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
