"""
Live viewer: bugs sense, think, eat, breed and die while you watch.

Keys:
  SPACE  pause / resume        +/-  simulation speed
  1/2/3  tool: bug / food / nuke   TAB  clear selection
  arrows pan, mouse wheel zooms, left click applies the tool,
  right click selects a bug for the brain panel.
"""

from __future__ import annotations
import logging
from typing import Optional

import pygame

import config
from world.environment import Environment
from world.presets import less_food_further_from_center
from render.renderer import Camera, draw_brain_panel, draw_bug, draw_food, draw_hud
from render import colors

logger = logging.getLogger("bugsim")

TOOLS = {pygame.K_1: "bug", pygame.K_2: "food", pygame.K_3: "nuke"}
NUKE_RADIUS = 60.0
SPEEDS = (0.25, 0.5, 1.0, 2.0, 4.0, 8.0)
PAN_PIXELS = 24


def apply_tool(env: Environment, tool: str, wx: float, wy: float) -> None:
    if tool == "bug":
        bug_id = env.spawn_bug(wx, wy)
        logger.info("spawned bug %d at (%.0f, %.0f)", bug_id, wx, wy)
    elif tool == "food":
        env.spawn_food(wx, wy)
    elif tool == "nuke":
        env.nuke(wx, wy, NUKE_RADIUS)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption("bugsim (Live Evolution)")
    clock = pygame.time.Clock()

    env = less_food_further_from_center(seed=1)
    cfg = env.config
    cam = Camera(cfg.world_width / 2, cfg.world_height / 2, zoom=0.5,
                 screen_w=config.SCREEN_W, screen_h=config.SCREEN_H)

    paused = False
    speed_idx = SPEEDS.index(1.0)
    tool = "bug"
    selected: Optional[int] = None
    last_report_tick = 0
    running = True

    while running:
        clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_SPACE:
                    paused = not paused
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    speed_idx = min(len(SPEEDS) - 1, speed_idx + 1)
                elif e.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    speed_idx = max(0, speed_idx - 1)
                elif e.key in TOOLS:
                    tool = TOOLS[e.key]
                elif e.key == pygame.K_TAB:
                    selected = None
            elif e.type == pygame.MOUSEWHEEL:
                cam.zoom_by(1.1 ** e.y)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                wx, wy = cam.to_world(*e.pos)
                if e.button == 1:
                    apply_tool(env, tool, wx, wy)
                elif e.button == 3:
                    selected = env.bug_at(wx, wy, reach=20.0 / cam.zoom)

        keys = pygame.key.get_pressed()
        step = PAN_PIXELS / cam.zoom
        cam.x += (keys[pygame.K_RIGHT] - keys[pygame.K_LEFT]) * step
        cam.y += (keys[pygame.K_DOWN] - keys[pygame.K_UP]) * step

        speed = SPEEDS[speed_idx]
        if not paused:
            # whole ticks only: a paused frame never runs a partial step
            for _ in range(max(1, config.SIM_SPEED)):
                env.step(speed)

        if env.tick - last_report_tick >= 600:
            last_report_tick = env.tick
            s = env.stats()
            logger.info("tick %d: population %d, food %d, births %d, deaths %d",
                        s["tick"], s["population"], s["food"], s["births"], s["deaths"])

        if selected is not None and selected not in {b.id for b in env.bugs()}:
            selected = None

        # Render
        screen.fill(colors.BG)
        draw_food(screen, env.food(), cam)
        for b in env.bugs():
            draw_bug(screen, b, cam, selected=(b.id == selected))

        draw_hud(screen, env.stats(), paused, speed, tool)
        if selected is not None:
            draw_brain_panel(screen, env.bug(selected), env.brain_log(selected))

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
