"""Gravitational N-body integration."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .config import SIMULATION_CFG
from .model import Barycenter, Body
from .settings import Settings
from .timekeeping import SimTimer


def gravitational_accelerations(
    positions: np.ndarray,
    masses: np.ndarray,
    gravitational_constant: float = SIMULATION_CFG.gravitational_constant,
) -> np.ndarray:
    """Acceleration of each body due to every other body.

    ``positions`` has shape ``(n, 3)`` and ``masses`` shape ``(n,)``. A body
    exerts no force on itself.
    """

    separation = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
    dist2 = np.einsum("ijk,ijk->ij", separation, separation)
    np.fill_diagonal(dist2, np.inf)
    inv_dist3 = dist2 ** -1.5
    weights = gravitational_constant * masses[np.newaxis, :] * inv_dist3
    return np.einsum("ij,ijk->ik", weights, separation)


def rk4_step(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    dt: float,
    gravitational_constant: float = SIMULATION_CFG.gravitational_constant,
) -> tuple[np.ndarray, np.ndarray]:
    """Advance the system state with a classical RK4 step."""

    def accel(r: np.ndarray) -> np.ndarray:
        return gravitational_accelerations(r, masses, gravitational_constant)

    k1_r = velocities
    k1_v = accel(positions)

    k2_r = velocities + 0.5 * dt * k1_v
    k2_v = accel(positions + 0.5 * dt * k1_r)

    k3_r = velocities + 0.5 * dt * k2_v
    k3_v = accel(positions + 0.5 * dt * k2_r)

    k4_r = velocities + dt * k3_v
    k4_v = accel(positions + dt * k3_r)

    r_next = positions + (dt / 6.0) * (k1_r + 2 * k2_r + 2 * k3_r + k4_r)
    v_next = velocities + (dt / 6.0) * (k1_v + 2 * k2_v + 2 * k3_v + k4_v)
    return r_next, v_next


class NBodySolver:
    """Fixed-step RK4 integrator over a list of bodies."""

    def __init__(
        self,
        gravitational_constant: float = SIMULATION_CFG.gravitational_constant,
    ) -> None:
        self.gravitational_constant = gravitational_constant
        self.timer = SimTimer()

    def advance(
        self, bodies: Sequence[Body], duration: float
    ) -> tuple[np.ndarray, np.ndarray]:
        """Integrate ``duration`` seconds in steps of ``timer.dt``.

        Returns the final positions and velocities; the bodies themselves are
        left untouched.
        """

        if self.timer.dt <= 0.0:
            raise ValueError("Solver step size must be positive")
        masses = np.array([body.mass for body in bodies], dtype=float)
        r = np.array([body.position for body in bodies], dtype=float)
        v = np.array([body.velocity for body in bodies], dtype=float)
        steps = max(1, int(round(duration / self.timer.dt)))
        for _ in range(steps):
            r, v = rk4_step(r, v, masses, self.timer.dt, self.gravitational_constant)
            self.timer.advance()
        return r, v


def update_simulation(
    bodies: Sequence[Body],
    barycenter: Barycenter,
    solver: NBodySolver,
    settings: Settings,
) -> None:
    """Advance the bodies by one tick and record one trajectory sample each.

    Every body and the barycenter gain exactly one sample, so their
    trajectories stay index-aligned.
    """

    settings.validate()
    solver.timer.dt = settings.dt
    positions, velocities = solver.advance(bodies, settings.speed)
    for body, position, velocity in zip(bodies, positions, velocities):
        body.update(position, velocity)
    barycenter.update(bodies)


__all__ = [
    "NBodySolver",
    "gravitational_accelerations",
    "rk4_step",
    "update_simulation",
]
