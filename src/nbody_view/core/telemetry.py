"""Display strings for the telemetry panel."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from .config import RENDER_CFG
from .frames import frame_label
from .model import Barycenter, Body
from .settings import Settings
from .timekeeping import SimTimer
from .units import make_time, make_unit, to_precision


@dataclass(frozen=True)
class Telemetry:
    frame: str
    samples: str
    dt: str
    delta: str
    momentum: str
    elapsed: str
    scale: str

    def lines(self) -> Iterator[tuple[str, str]]:
        yield "Frame", self.frame
        yield "Samples", self.samples
        yield "Step", self.dt
        yield "Per frame", self.delta
        yield "Momentum", self.momentum
        yield "Elapsed", self.elapsed
        yield f"{RENDER_CFG.scale_reference_units:g} units", self.scale


def format_scale(scale: float, reference_units: float = RENDER_CFG.scale_reference_units) -> str:
    """Physical distance spanned by ``reference_units`` render units."""

    if not scale > 0.0:
        raise ValueError(f"Render scale must be positive, got {scale!r}")
    value, prefix = make_unit(reference_units / scale)
    return f"{to_precision(value, 4)} {prefix}m"


def format_telemetry(
    settings: Settings,
    bodies: Sequence[Body],
    barycenter: Barycenter,
    timer: SimTimer,
) -> Telemetry:
    return Telemetry(
        frame=frame_label(settings.frame, bodies),
        samples=f"{settings.samples:d}",
        dt=make_time(timer.dt),
        delta=make_time(settings.speed),
        momentum=to_precision(float(np.linalg.norm(barycenter.momentum)), 5),
        elapsed=make_time(timer.t1),
        scale=format_scale(settings.scale),
    )


__all__ = ["Telemetry", "format_scale", "format_telemetry"]
