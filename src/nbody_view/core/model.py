"""Data models for the simulated bodies and their barycenter."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from .trajectory import Trajectory


def _zeros() -> np.ndarray:
    return np.zeros(3, dtype=float)


@dataclass
class Body:
    """Point mass with SI state and a trajectory of past positions."""

    id: str
    mass: float
    position: np.ndarray = field(default_factory=_zeros)
    velocity: np.ndarray = field(default_factory=_zeros)
    trajectory: Trajectory | None = None
    radius: float = 4.0
    color: tuple[int, int, int] = (255, 255, 255)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=float).copy()
        self.velocity = np.asarray(self.velocity, dtype=float).copy()
        if self.trajectory is None:
            self.trajectory = Trajectory(1, self.position)

    @property
    def momentum(self) -> np.ndarray:
        return self.mass * self.velocity

    def update(self, position: np.ndarray, velocity: np.ndarray) -> None:
        """Store a new state and record the position as the newest sample."""

        self.position = np.asarray(position, dtype=float).copy()
        self.velocity = np.asarray(velocity, dtype=float).copy()
        self.trajectory.append(self.position)


@dataclass
class Barycenter:
    """Mass-weighted aggregate of a set of bodies.

    ``momentum`` is the total linear momentum of the system, which is what the
    telemetry reports.
    """

    position: np.ndarray = field(default_factory=_zeros)
    velocity: np.ndarray = field(default_factory=_zeros)
    momentum: np.ndarray = field(default_factory=_zeros)
    mass: float = 0.0
    trajectory: Trajectory | None = None

    def __post_init__(self) -> None:
        if self.trajectory is None:
            self.trajectory = Trajectory(1, self.position)

    @classmethod
    def of(cls, bodies: Sequence[Body], trajectory_length: int) -> "Barycenter":
        barycenter = cls(trajectory=Trajectory(trajectory_length))
        barycenter.recompute(bodies)
        barycenter.trajectory.reset(barycenter.position)
        return barycenter

    def recompute(self, bodies: Sequence[Body]) -> None:
        if not bodies:
            raise ValueError("Barycenter needs at least one body")
        masses = np.array([body.mass for body in bodies], dtype=float)
        total = float(masses.sum())
        if total <= 0.0:
            raise ValueError("Total mass must be positive")
        positions = np.array([body.position for body in bodies], dtype=float)
        velocities = np.array([body.velocity for body in bodies], dtype=float)
        self.mass = total
        self.momentum = masses @ velocities
        self.position = (masses @ positions) / total
        self.velocity = self.momentum / total

    def update(self, bodies: Sequence[Body]) -> None:
        """Recompute from ``bodies`` and append a trajectory sample."""

        self.recompute(bodies)
        self.trajectory.append(self.position)


__all__ = ["Barycenter", "Body"]
