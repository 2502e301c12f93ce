"""Configuration dataclasses for the N-body viewer."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationCfg:
    gravitational_constant: float = 6.67408e-11
    trajectory_length: int = 1_024
    samples_per_frame: int = 64
    target_framerate: int = 60
    secs_per_month: float = 2.628e6
    default_scenario: str = "inner_solar"

    @property
    def default_speed(self) -> float:
        """Physical seconds advanced per frame: one month per real second."""

        return self.secs_per_month / self.target_framerate


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    background_color: tuple[int, int, int] = (6, 10, 22)
    default_scale: float = 1e-9
    overlay_calibration: float = 800.0
    scale_reference_units: float = 200.0
    axis_length: float = 60.0
    axis_colors: tuple[tuple[int, int, int], ...] = (
        (235, 87, 87),
        (111, 207, 151),
        (86, 156, 214),
    )
    barycenter_color: tuple[int, int, int] = (255, 255, 255)
    barycenter_pixel_size: int = 6
    marker_pixel_length: float = 4.0
    marker_alpha: int = 150
    max_rendered_markers: int = 512
    min_zoom: float = 0.02
    max_zoom: float = 500.0
    zoom_step: float = 1.1
    rotate_step_deg: float = 3.0
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_label_color: tuple[int, int, int] = (180, 185, 195)
    hud_value_color: tuple[int, int, int] = (100, 220, 255)
    hud_warning_color: tuple[int, int, int] = (255, 180, 60)
    hud_background_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.6))
    fps_text_alpha: int = int(255 * 0.6)


SIMULATION_CFG = SimulationCfg()
RENDER_CFG = RenderCfg()


__all__ = ["RENDER_CFG", "SIMULATION_CFG", "RenderCfg", "SimulationCfg"]
