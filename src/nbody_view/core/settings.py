"""Mutable runtime settings read by every tick."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from .config import RENDER_CFG, SIMULATION_CFG, RenderCfg, SimulationCfg
from .frames import FIXED, Frame


@dataclass
class Settings:
    scale: float
    speed: float
    samples: int
    frame: Frame = field(default=FIXED)

    @classmethod
    def from_config(
        cls,
        simulation_cfg: SimulationCfg = SIMULATION_CFG,
        render_cfg: RenderCfg = RENDER_CFG,
    ) -> "Settings":
        return cls(
            scale=render_cfg.default_scale,
            speed=simulation_cfg.default_speed,
            samples=simulation_cfg.samples_per_frame,
        )

    @property
    def dt(self) -> float:
        """Integration step implied by the current speed and sample count."""

        return self.speed / self.samples

    def scale_by(self, factor: float) -> bool:
        """Multiply the render scale, refusing results that would underflow or overflow."""

        return self._multiply("scale", factor)

    def speed_by(self, factor: float) -> bool:
        """Multiply the simulation speed, refusing results that would underflow or overflow."""

        return self._multiply("speed", factor)

    def _multiply(self, name: str, factor: float) -> bool:
        value = getattr(self, name) * factor
        if not (value > 0.0 and math.isfinite(value)):
            return False
        setattr(self, name, value)
        return True

    def validate(self) -> None:
        if not self.scale > 0.0:
            raise ValueError(f"Render scale must be positive, got {self.scale!r}")
        if not self.speed > 0.0:
            raise ValueError(f"Simulation speed must be positive, got {self.speed!r}")
        if self.samples <= 0:
            raise ValueError(f"Sample count must be positive, got {self.samples!r}")


__all__ = ["Settings"]
