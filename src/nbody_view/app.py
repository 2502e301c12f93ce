"""
N-body viewer
=============

Real-time 3D view of a gravitational N-body system. Each frame the
integrator advances the bodies, the render engine projects them into the
selected reference frame and the telemetry panel is refreshed.

Keys: ``F`` cycle frame, ``Space`` pause, ``[``/``]`` halve/double speed,
``-``/``=`` scale down/up, ``Esc`` quit. Drag to orbit the camera, scroll to zoom.
"""
from __future__ import annotations

import argparse
import math
import sys
from typing import Sequence

import numpy as np
import pygame

from nbody_view.core.config import RENDER_CFG, SIMULATION_CFG
from nbody_view.core.frames import BodyFrame, cycle_frame, frame_label
from nbody_view.core.logging_utils import RunLogger
from nbody_view.core.model import Barycenter
from nbody_view.core.physics import NBodySolver, update_simulation
from nbody_view.core.settings import Settings
from nbody_view.core.timekeeping import FrameTimer
from nbody_view.data.scenarios import SCENARIO_DISPLAY_ORDER, SCENARIOS, build_bodies
from nbody_view.render import (
    OrthoCamera,
    RenderEngine,
    SceneObject,
    SpriteCache,
    TickRejected,
    build_telemetry_panel,
    build_text_panel,
    draw_axes,
    draw_focus_ring,
    draw_ribbon,
    draw_spheres,
    get_text_surface,
    load_font,
    update_body_object,
)

FLASH_DURATION = 2.0
SPEED_KEYS = {pygame.K_RIGHTBRACKET: 2.0, pygame.K_LEFTBRACKET: 0.5}
SCALE_KEYS = {pygame.K_EQUALS: 2.0, pygame.K_PLUS: 2.0, pygame.K_MINUS: 0.5}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive N-body gravitational viewer.")
    parser.add_argument(
        "--scenario",
        choices=SCENARIO_DISPLAY_ORDER,
        default=SIMULATION_CFG.default_scenario,
        help="Preset system to simulate",
    )
    parser.add_argument("--scale", type=float, help="Render units per meter")
    parser.add_argument(
        "--speed",
        type=float,
        default=SIMULATION_CFG.default_speed,
        help="Simulated seconds per frame",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=SIMULATION_CFG.samples_per_frame,
        help="Integration steps per frame",
    )
    parser.add_argument(
        "--trajectory-length",
        type=int,
        default=SIMULATION_CFG.trajectory_length,
        help="Number of past positions kept per body",
    )
    parser.add_argument("--log", action="store_true", help="Record telemetry under data/runs")
    args = parser.parse_args(argv)
    if args.scale is not None and args.scale <= 0.0:
        parser.error("--scale must be positive")
    if args.speed <= 0.0:
        parser.error("--speed must be positive")
    if args.samples <= 0:
        parser.error("--samples must be positive")
    if args.trajectory_length <= 0:
        parser.error("--trajectory-length must be positive")
    return args


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    scenario = SCENARIOS[args.scenario]

    bodies = build_bodies(scenario, args.trajectory_length)
    barycenter = Barycenter.of(bodies, args.trajectory_length)
    solver = NBodySolver(SIMULATION_CFG.gravitational_constant)
    settings = Settings(
        scale=args.scale if args.scale is not None else scenario.scale,
        speed=args.speed,
        samples=args.samples,
    )
    settings.validate()

    pygame.init()
    pygame.display.set_caption(f"N-body viewer – {scenario.name}")
    screen = pygame.display.set_mode((RENDER_CFG.width, RENDER_CFG.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    font = load_font(["consolas", "dejavusansmono", "menlo"], 16)
    font_fps = load_font(["consolas", "dejavusansmono", "menlo"], 14)

    camera = OrthoCamera(
        screen.get_size(),
        min_zoom=RENDER_CFG.min_zoom,
        max_zoom=RENDER_CFG.max_zoom,
    )
    engine = RenderEngine(bodies, barycenter, camera, RENDER_CFG)
    primary_light = SceneObject()
    sprites = SpriteCache()
    marker_layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
    frame_timer = FrameTimer()

    logger: RunLogger | None = None
    if args.log:
        logger = RunLogger()
        logger.write_meta(
            {
                "scenario_key": scenario.key,
                "scenario_name": scenario.name,
                "bodies": [
                    {
                        "id": body.id,
                        "mass": body.mass,
                        "position": body.position.tolist(),
                        "velocity": body.velocity.tolist(),
                    }
                    for body in bodies
                ],
                "G": SIMULATION_CFG.gravitational_constant,
                "integrator": "RK4",
                "speed": settings.speed,
                "samples": settings.samples,
                "scale": settings.scale,
                "trajectory_length": args.trajectory_length,
            }
        )

    paused = False
    flash_text: str | None = None
    flash_time = 0.0
    telemetry = None
    rotate_step = math.radians(RENDER_CFG.rotate_step_deg)

    def flash(text: str) -> None:
        nonlocal flash_text, flash_time
        flash_text = text
        flash_time = FLASH_DURATION

    def log_event(event_type: str, details: dict | None = None) -> None:
        if logger is not None:
            logger.log_event(solver.timer.t1, event_type, details)

    def quit_app() -> None:
        if logger is not None:
            logger.close()
        pygame.quit()
        sys.exit()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                camera.update_size(screen.get_size())
                marker_layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_f:
                    settings.frame = cycle_frame(settings.frame, len(bodies))
                    label = frame_label(settings.frame, bodies)
                    flash(f"Frame: {label}")
                    log_event("frame", {"frame": label})
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                    flash("Paused" if paused else "Running")
                    log_event("pause" if paused else "resume")
                elif event.key in SPEED_KEYS:
                    if not settings.speed_by(SPEED_KEYS[event.key]):
                        flash("Speed limit reached")
                elif event.key in SCALE_KEYS:
                    if not settings.scale_by(SCALE_KEYS[event.key]):
                        flash("Scale limit reached")
                elif event.key == pygame.K_LEFT:
                    camera.rotate(-rotate_step, 0.0)
                elif event.key == pygame.K_RIGHT:
                    camera.rotate(rotate_step, 0.0)
                elif event.key == pygame.K_UP:
                    camera.rotate(0.0, -rotate_step)
                elif event.key == pygame.K_DOWN:
                    camera.rotate(0.0, rotate_step)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                camera.begin_drag(event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                camera.end_drag()
            elif event.type == pygame.MOUSEMOTION:
                camera.drag(event.pos)
            elif event.type == pygame.MOUSEWHEEL and event.y != 0:
                camera.zoom_by_factor(RENDER_CFG.zoom_step ** event.y)

        if not running:
            break

        frame_dt_real = frame_timer.tick()
        camera.update()

        if not paused:
            update_simulation(bodies, barycenter, solver, settings)

        try:
            telemetry = engine.update(settings, solver.timer)
            update_body_object(0, bodies, barycenter, primary_light, settings)
        except TickRejected as exc:
            flash("Tick rejected")
            log_event("rejected_tick", {"reason": str(exc)})

        if logger is not None and not paused:
            logger.log_ts(
                [
                    solver.timer.t1,
                    frame_label(settings.frame, bodies),
                    float(np.linalg.norm(barycenter.momentum)),
                    sum(float(np.linalg.norm(body.momentum)) for body in bodies),
                    *barycenter.position.tolist(),
                    settings.scale,
                    engine.overlay_scale,
                ]
            )

        # === DRAW ===
        screen.fill(RENDER_CFG.background_color)
        marker_layer.fill((0, 0, 0, 0))
        for ribbon in engine.ribbons:
            draw_ribbon(marker_layer, camera, ribbon, render_cfg=RENDER_CFG)
        screen.blit(marker_layer, (0, 0))
        draw_axes(screen, camera, engine.axes)
        draw_spheres(screen, camera, engine.spheres, sprites=sprites)
        if not isinstance(settings.frame, BodyFrame) or settings.frame.index != 0:
            draw_focus_ring(
                screen,
                camera,
                primary_light,
                color=RENDER_CFG.hud_label_color,
                radius=int(bodies[0].radius) + 6,
            )

        if telemetry is not None:
            panel = build_telemetry_panel(
                font,
                telemetry.lines(),
                label_color=RENDER_CFG.hud_label_color,
                value_color=RENDER_CFG.hud_value_color,
                background_color=RENDER_CFG.hud_background_color,
            )
            screen.blit(panel, (16, 16))

        if flash_text is not None and flash_time > 0.0:
            flash_panel = build_text_panel(
                font,
                [(flash_text, RENDER_CFG.hud_warning_color)],
                background_color=RENDER_CFG.hud_background_color,
            )
            rect = flash_panel.get_rect(midbottom=(screen.get_width() // 2, screen.get_height() - 24))
            screen.blit(flash_panel, rect)
            flash_time -= frame_dt_real

        fps_surf = get_text_surface(font_fps, f"{clock.get_fps():.0f} fps", RENDER_CFG.hud_text_color)
        fps_surf = fps_surf.copy()
        fps_surf.set_alpha(RENDER_CFG.fps_text_alpha)
        screen.blit(fps_surf, fps_surf.get_rect(topright=(screen.get_width() - 12, 12)))

        pygame.display.flip()
        clock.tick(SIMULATION_CFG.target_framerate)

    quit_app()


if __name__ == "__main__":
    main()
