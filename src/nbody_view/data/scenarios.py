"""Preset systems used as simulation starting conditions."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from nbody_view.core.model import Body
from nbody_view.core.trajectory import Trajectory


@dataclass(frozen=True)
class BodySpec:
    """Body placed ``distance`` from its parent, moving ``speed`` prograde.

    ``phase_deg`` is the angle in the x-y plane, ``parent`` the name of a body
    defined earlier in the same scenario (``None`` for the system origin).
    """

    name: str
    mass: float
    distance: float = 0.0
    speed: float = 0.0
    phase_deg: float = 0.0
    parent: str | None = None
    color: tuple[int, int, int] = (255, 255, 255)
    radius: float = 4.0


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    description: str
    bodies: tuple[BodySpec, ...]
    scale: float = 1e-9


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="inner_solar",
        name="Inner solar system",
        description="Sun, the four rocky planets and Jupiter on near-circular orbits.",
        bodies=(
            BodySpec("Sun", 1.989e30, color=(255, 204, 92), radius=9.0),
            BodySpec("Mercury", 3.301e23, 5.791e10, 47.36e3, 40.0, "Sun", (183, 174, 164), 3.0),
            BodySpec("Venus", 4.867e24, 1.082e11, 35.02e3, 155.0, "Sun", (232, 196, 128), 4.0),
            BodySpec("Earth", 5.972e24, 1.496e11, 29.78e3, 260.0, "Sun", (86, 156, 214), 4.0),
            BodySpec("Mars", 6.417e23, 2.279e11, 24.07e3, 320.0, "Sun", (214, 104, 76), 3.5),
            BodySpec("Jupiter", 1.898e27, 7.785e11, 13.07e3, 110.0, "Sun", (214, 176, 140), 7.0),
        ),
        scale=2e-10,
    ),
    Scenario(
        key="sun_earth_moon",
        name="Sun, Earth and Moon",
        description="The Moon orbiting the Earth while both orbit the Sun.",
        bodies=(
            BodySpec("Sun", 1.989e30, color=(255, 204, 92), radius=9.0),
            BodySpec("Earth", 5.972e24, 1.496e11, 29.78e3, 0.0, "Sun", (86, 156, 214), 4.0),
            BodySpec("Moon", 7.342e22, 3.844e8, 1.022e3, 90.0, "Earth", (200, 200, 200), 2.5),
        ),
        scale=1e-9,
    ),
    Scenario(
        key="binary",
        name="Binary star",
        description="Two equal stars with a circumbinary planet.",
        bodies=(
            BodySpec("Alpha", 1.0e30, 1.0e11, 12.917e3, 0.0, None, (255, 214, 130), 7.0),
            BodySpec("Beta", 1.0e30, 1.0e11, 12.917e3, 180.0, None, (255, 150, 110), 7.0),
            BodySpec("Planet", 5.972e24, 6.0e11, 14.915e3, 45.0, None, (111, 207, 151), 4.0),
        ),
        scale=3e-10,
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


def build_bodies(
    scenario: Scenario,
    trajectory_length: int,
    *,
    center_of_momentum: bool = True,
) -> list[Body]:
    """Create bodies for ``scenario`` with trajectories of equal capacity.

    With ``center_of_momentum`` the total momentum is removed so the
    barycenter stays put.
    """

    states: dict[str, tuple[np.ndarray, np.ndarray]] = {}
    for spec in scenario.bodies:
        if spec.parent is None:
            origin, origin_velocity = np.zeros(3), np.zeros(3)
        elif spec.parent in states:
            origin, origin_velocity = states[spec.parent]
        else:
            raise ValueError(f"Body {spec.name!r} refers to unknown parent {spec.parent!r}")
        phase = math.radians(spec.phase_deg)
        direction = np.array([math.cos(phase), math.sin(phase), 0.0])
        prograde = np.array([-math.sin(phase), math.cos(phase), 0.0])
        states[spec.name] = (
            origin + spec.distance * direction,
            origin_velocity + spec.speed * prograde,
        )

    if center_of_momentum:
        masses = np.array([spec.mass for spec in scenario.bodies], dtype=float)
        velocities = np.array([states[spec.name][1] for spec in scenario.bodies])
        drift = (masses @ velocities) / masses.sum()
        states = {name: (r, v - drift) for name, (r, v) in states.items()}

    bodies: list[Body] = []
    for spec in scenario.bodies:
        position, velocity = states[spec.name]
        bodies.append(
            Body(
                id=spec.name,
                mass=spec.mass,
                position=position,
                velocity=velocity,
                trajectory=Trajectory(trajectory_length, position),
                radius=spec.radius,
                color=spec.color,
            )
        )
    return bodies


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "BodySpec",
    "Scenario",
    "build_bodies",
]
