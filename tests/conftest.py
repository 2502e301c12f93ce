"""Shared fixtures for the N-body viewer tests."""
import numpy as np
import pytest

from nbody_view.core.model import Barycenter, Body
from nbody_view.core.trajectory import Trajectory

TRAJECTORY_LENGTH = 4


def make_body(name, position, velocity=(0.0, 0.0, 0.0), mass=1.0, length=TRAJECTORY_LENGTH):
    position = np.array(position, dtype=float)
    return Body(
        id=name,
        mass=mass,
        position=position,
        velocity=np.array(velocity, dtype=float),
        trajectory=Trajectory(length, position),
    )


@pytest.fixture
def three_bodies():
    """Three equal-mass bodies at distinct, known positions."""
    return [
        make_body("a", (1.0, 2.0, 3.0), (0.0, 1.0, 0.0)),
        make_body("b", (-4.0, 0.5, 0.0), (1.0, 0.0, 0.0)),
        make_body("c", (0.0, -1.0, 6.0), (0.0, 0.0, -2.0)),
    ]


@pytest.fixture
def barycenter(three_bodies):
    """Barycenter of the ``three_bodies`` fixture."""
    return Barycenter.of(three_bodies, TRAJECTORY_LENGTH)


def advance(bodies, barycenter, offsets):
    """Move each body by its offset and append a sample in lockstep."""
    for body, offset in zip(bodies, offsets):
        body.update(body.position + np.asarray(offset, dtype=float), body.velocity)
    barycenter.update(bodies)
