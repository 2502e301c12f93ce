"""Wall-clock and simulated-time bookkeeping."""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class SimTimer:
    """Integration step size and elapsed simulated time.

    ``t0`` is the start of the last integration step and ``t1`` the simulated
    time reached at its end.
    """

    dt: float = 0.0
    t0: float = 0.0
    t1: float = 0.0

    def advance(self) -> None:
        self.t0 = self.t1
        self.t1 += self.dt

    def reset(self) -> None:
        self.t0 = 0.0
        self.t1 = 0.0


__all__ = ["FrameTimer", "SimTimer"]
