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
"""Spatial control and possession value models for football."""
from __future__ import annotations

from .engine.analysis import FrameAnalysis, analyze_frame, analyze_sequence, value_added_assessment
from .engine.config import ENGINE_CONFIG, EngineConfig
from .engine.control import control_at, generate_control_field
from .engine.kinematics import time_to_intercept
from .engine.passing import evaluate_pass, rank_options
from .engine.value import generate_value_field, value_at
from .models.snapshot import BallPosition, Mover, PossessionSnapshot

__version__ = "0.1.0"

__all__ = [
    "BallPosition",
    "ENGINE_CONFIG",
    "EngineConfig",
    "FrameAnalysis",
    "Mover",
    "PossessionSnapshot",
    "analyze_frame",
    "analyze_sequence",
    "control_at",
    "evaluate_pass",
    "generate_control_field",
    "generate_value_field",
    "rank_options",
    "time_to_intercept",
    "value_added_assessment",
    "value_at",
]
