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
"""Pygame viewer for possession value surfaces and pass options."""
from typing import Optional, Tuple

try:
    import pygame
except Exception:
    pygame = None

from pitchvalue.engine.analysis import FrameAnalysis, analyze_frame
from pitchvalue.engine.config import EngineConfig, resolve_config
from pitchvalue.engine.physics import Pitch
from pitchvalue.models.snapshot import PossessionSnapshot

Colour = Tuple[int, int, int]


def value_colour(value: float) -> Colour:
    """Map a possession value to a diverging blue-white-red colour.

    Parameters
    ----------
    value : float
        Possession value in ``[-1, 1]``; values outside are clamped.

    Returns
    -------
    Colour
        ``(r, g, b)``: blue for the opponent, white when neutral, red for the
        side in possession.
    """
    t = max(0.0, min(1.0, (value + 1.0) / 2.0))
    if t < 0.5:
        s = t * 2.0
        return (int(50 + s * 205 + 0.5), int(100 + s * 155 + 0.5), int(200 + s * 55 + 0.5))
    s = (t - 0.5) * 2.0
    return (255, int(255 - s * 180 + 0.5), int(255 - s * 200 + 0.5))


def value_alpha(value: float) -> float:
    """Opacity for a heatmap cell, stronger for larger magnitudes.

    Parameters
    ----------
    value : float
        Possession value in ``[-1, 1]``.

    Returns
    -------
    float
        Alpha between ``0.2`` and ``0.7``.
    """
    return 0.2 + min(1.0, abs(value)) * 0.5


def pass_arrow_colour(value_added: float) -> Colour:
    """Colour a pass arrow by the value it adds.

    Parameters
    ----------
    value_added : float
        Value added by the pass.

    Returns
    -------
    Colour
        Green for gains, amber for roughly neutral passes, red for losses.
    """
    if value_added > 0.02:
        return (34, 197, 94)
    if value_added < -0.02:
        return (239, 68, 68)
    return (251, 191, 36)


def world_to_screen(
    x: float,
    y: float,
    pitch: Pitch,
    rect: Tuple[int, int, int, int],
) -> Tuple[int, int]:
    """Project pitch coordinates into a screen rectangle.

    Parameters
    ----------
    x : float
        Along-pitch coordinate.
    y : float
        Across-pitch coordinate; positive ``y`` is drawn toward the top.
    pitch : Pitch
        Pitch whose dimensions span the rectangle.
    rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the drawing area in pixels.

    Returns
    -------
    Tuple[int, int]
        Pixel coordinates.
    """
    left, top, width, height = rect
    sx = int((x + pitch.half_length) / pitch.length * width) + left
    sy = int((pitch.half_width - y) / pitch.width * height) + top
    return sx, sy


def _draw_pitch(screen, pitch: Pitch, rect: Tuple[int, int, int, int]) -> None:
    """Draw touchlines, halfway line, centre circle and penalty boxes.

    Parameters
    ----------
    screen : pygame.Surface
        Target surface.
    pitch : Pitch
        Pitch geometry.
    rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the pitch in pixels.
    """
    line = (245, 245, 245)
    left, top, width, height = rect
    pygame.draw.rect(screen, line, rect, 3)
    pygame.draw.line(screen, line, (left + width // 2, top), (left + width // 2, top + height), 2)
    radius = int(9.15 / pitch.length * width)
    pygame.draw.circle(screen, line, (left + width // 2, top + height // 2), radius, 2)

    box_w = int(pitch.penalty_area_depth / pitch.length * width)
    box_h = int(pitch.penalty_area_width / pitch.width * height)
    box_y = top + (height - box_h) // 2
    pygame.draw.rect(screen, line, (left, box_y, box_w, box_h), 2)
    pygame.draw.rect(screen, line, (left + width - box_w, box_y, box_w, box_h), 2)


def _draw_heatmap(screen, analysis: FrameAnalysis, pitch: Pitch, rect: Tuple[int, int, int, int]) -> None:
    """Blend the value surface over the pitch.

    Parameters
    ----------
    screen : pygame.Surface
        Target surface.
    analysis : FrameAnalysis
        Analysis holding the value field.
    pitch : Pitch
        Pitch geometry.
    rect : Tuple[int, int, int, int]
        ``(left, top, width, height)`` of the pitch in pixels.
    """
    field = analysis.value_field
    if field is None:
        return
    overlay = pygame.Surface((rect[2], rect[3]), pygame.SRCALPHA)
    cell_w = max(1, int(field.resolution / pitch.length * rect[2]) + 1)
    cell_h = max(1, int(field.resolution / pitch.width * rect[3]) + 1)
    local = (0, 0, rect[2], rect[3])
    half = field.resolution / 2
    for row in range(field.rows):
        for col in range(field.cols):
            value = float(field.values[row, col])
            x, y = field.cell_centre(row, col)
            sx, sy = world_to_screen(x - half, y + half, pitch, local)
            colour = (*value_colour(value), int(value_alpha(value) * 255))
            overlay.fill(colour, (sx, sy, cell_w, cell_h))
    screen.blit(overlay, (rect[0], rect[1]))


def start_visualizer(
    snapshot: PossessionSnapshot,
    screen_size: Tuple[int, int] = (1050, 680),
    fps: int = 30,
    resolution: Optional[float] = None,
    config: Optional[EngineConfig] = None,
) -> None:
    """Show the value heatmap, movers and best passes for one snapshot.

    The window stays open until it is closed or ``q`` is pressed. If `pygame`
    is not installed the function returns immediately.

    Parameters
    ----------
    snapshot : PossessionSnapshot
        Instant to display.
    screen_size : Tuple[int, int]
        Initial window size in pixels.
    fps : int
        Redraw rate.
    resolution : float | None
        Value field cell size in metres.
    config : EngineConfig | None
        Configuration override.
    """
    if pygame is None:
        return

    cfg = resolve_config(config)
    pitch = Pitch.from_config(cfg)
    analysis = analyze_frame(snapshot, resolution=resolution, config=cfg)

    pygame.init()
    screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)
    pygame.display.set_caption("Possession Value")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 18)

    GRASS = (38, 120, 62)
    TEAM = (200, 30, 30)
    OPPONENT = (30, 90, 200)
    BALL = (245, 245, 245)
    TEXT = (245, 245, 245)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_q:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen_size = (event.w, event.h)
                screen = pygame.display.set_mode(screen_size, pygame.RESIZABLE)

        margin_x = int(screen_size[0] * 0.04)
        margin_y = int(screen_size[1] * 0.08)
        rect = (margin_x, margin_y, screen_size[0] - 2 * margin_x, screen_size[1] - 2 * margin_y)

        screen.fill(GRASS)
        _draw_heatmap(screen, analysis, pitch, rect)
        _draw_pitch(screen, pitch, rect)

        carrier = snapshot.mover_by_id(analysis.carrier_id) if analysis.has_carrier else None
        if carrier is not None:
            start = world_to_screen(carrier.x, carrier.y, pitch, rect)
            for option in analysis.pass_options:
                end = world_to_screen(option.receiver_x, option.receiver_y, pitch, rect)
                pygame.draw.line(screen, pass_arrow_colour(option.value_added), start, end, 3)

        for movers, colour in ((snapshot.team, TEAM), (snapshot.opponents, OPPONENT)):
            for mover in movers:
                sx, sy = world_to_screen(mover.x, mover.y, pitch, rect)
                if carrier is not None and mover.mover_id == carrier.mover_id:
                    pygame.draw.circle(screen, (255, 215, 0), (sx, sy), 13)
                pygame.draw.circle(screen, colour, (sx, sy), 9)
                label = font.render(str(mover.mover_id), True, TEXT)
                screen.blit(label, (sx - label.get_width() // 2, sy - label.get_height() // 2))

        bx, by = world_to_screen(snapshot.ball.x, snapshot.ball.y, pitch, rect)
        pygame.draw.circle(screen, BALL, (bx, by), 5)

        if analysis.has_carrier:
            hud = f"Carrier {analysis.carrier_id} | Value {analysis.current_value:+.3f}"
            if analysis.comparison is not None:
                hud += f" | Recommended: {analysis.comparison.recommended}"
        else:
            hud = "No ball-carrier"
        screen.blit(font.render(hud, True, TEXT), (10, 10))

        pygame.display.flip()
        clock.tick(fps)

    pygame.quit()
