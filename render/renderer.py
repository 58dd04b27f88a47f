"""
bugsim module: render/renderer.py

Pygame rendering of environment snapshots (top-down).
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Optional, Sequence, Tuple

import numpy as np
import pygame

from bug.bug import BugSnapshot
from neural.brain import BrainLog
from render import colors
from world.food import FoodSnapshot

BUG_PIXELS_PER_SIZE = 8.0


@dataclass
class Camera:
    """World point at the screen centre plus a zoom factor."""
    x: float
    y: float
    zoom: float = 1.0
    screen_w: int = 980
    screen_h: int = 720

    def to_screen(self, wx: float, wy: float) -> Tuple[int, int]:
        sx = (wx - self.x) * self.zoom + self.screen_w / 2
        sy = (wy - self.y) * self.zoom + self.screen_h / 2
        return int(sx), int(sy)

    def to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        return (
            (sx - self.screen_w / 2) / self.zoom + self.x,
            (sy - self.screen_h / 2) / self.zoom + self.y,
        )

    def zoom_by(self, factor: float) -> None:
        self.zoom = max(0.05, min(20.0, self.zoom * factor))


def _draw_dir_indicator(screen: pygame.Surface, x: float, y: float, angle: float, r: float) -> None:
    dx = math.cos(angle) * r
    dy = math.sin(angle) * r
    pygame.draw.line(screen, colors.DIR, (x, y), (x + dx, y + dy), 2)


def draw_food(screen: pygame.Surface, food: Sequence[FoodSnapshot], cam: Camera) -> None:
    for f in food:
        sx, sy = cam.to_screen(f.x, f.y)
        r = max(1, int(f.radius * cam.zoom))
        pygame.draw.circle(screen, colors.FOOD, (sx, sy), r)


def draw_bug(screen: pygame.Surface, bug: BugSnapshot, cam: Camera, selected: bool = False) -> None:
    sx, sy = cam.to_screen(bug.x, bug.y)
    r = max(2, int(bug.size * BUG_PIXELS_PER_SIZE * cam.zoom))

    if selected:
        vr = int(bug.vision_range * cam.zoom)
        if vr > 2:
            pygame.draw.circle(screen, colors.VISION, (sx, sy), vr, 1)
        pygame.draw.circle(screen, colors.SELECTED, (sx, sy), r + 3, 2)

    pygame.draw.circle(screen, bug.color.rgb255(), (sx, sy), r)
    _draw_dir_indicator(screen, sx, sy, bug.rotation, r + 4)


def draw_hud(screen: pygame.Surface, stats: dict, paused: bool, speed: float, tool: str) -> None:
    font = pygame.font.Font(None, 26)

    lines = [
        f"Population: {stats.get('population', 0)}  Food: {stats.get('food', 0)}",
        f"Births: {stats.get('births', 0)}  Deaths: {stats.get('deaths', 0)}",
        f"Avg energy: {stats.get('avg_energy', 0.0):.2f}",
        f"Sim time: {stats.get('time', 0.0):.1f}s  x{speed:g}{'  [paused]' if paused else ''}",
        f"Tool: {tool}",
    ]

    y = 10
    for line in lines:
        txt = font.render(line, True, colors.TEXT)
        screen.blit(txt, (12, y))
        y += 22


def _draw_layer(screen: pygame.Surface, values: np.ndarray, x: int, y: int, cell: int) -> None:
    for i, v in enumerate(values):
        col = colors.ACT_POS if v >= 0 else colors.ACT_NEG
        h = int(min(1.0, abs(float(v))) * cell)
        pygame.draw.rect(screen, colors.DIR, (x, y + i * (cell + 2), cell, cell), 1)
        pygame.draw.rect(screen, col, (x, y + i * (cell + 2) + cell - h, cell, h))


def draw_brain_panel(screen: pygame.Surface, bug: Optional[BugSnapshot], log: Optional[BrainLog]) -> None:
    """Selected bug's vitals and last input/hidden/output activations."""
    if bug is None:
        return
    font = pygame.font.Font(None, 20)
    w = 260
    x0 = screen.get_width() - w - 10
    pygame.draw.rect(screen, colors.PANEL_BG, (x0, 10, w, 420))

    lines = [
        f"Bug #{bug.id}",
        f"energy {bug.energy:.1f}/{bug.energy_capacity:.1f}",
        f"age {bug.age:.1f}/{bug.max_age:.1f}",
        f"baby {bug.baby_charge:.1f}/{bug.baby_charge_capacity:.1f}",
        f"heat {bug.heat:.1f}/{bug.heat_capacity:.1f}",
        f"size {bug.size:.2f}/{bug.max_size:.2f}",
    ]
    if log is not None:
        a = log.actuators
        lines += [
            f"vel {a.velocity:.2f}  rot {math.degrees(a.desired_rotation):.0f}",
            f"rot vel {math.degrees(a.rotation_velocity):.0f}/s  charge {a.baby_charging_rate:.2f}",
        ]

    y = 18
    for line in lines:
        screen.blit(font.render(line, True, colors.TEXT), (x0 + 8, y))
        y += 18

    if log is not None:
        inputs, hidden, outputs = log.activations
        _draw_layer(screen, inputs, x0 + 20, y + 6, 10)
        _draw_layer(screen, hidden, x0 + 110, y + 6, 10)
        _draw_layer(screen, outputs, x0 + 200, y + 6, 10)
