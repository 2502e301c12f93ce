"""Scene objects written by the render-space engine each tick."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Sequence

import numpy as np

from nbody_view.core.config import RENDER_CFG, RenderCfg
from nbody_view.core.model import Barycenter, Body

from .rotation import UP, shortest_arc

IDENTITY_QUATERNION = np.array([0.0, 0.0, 0.0, 1.0])


@dataclass
class SceneObject:
    """Render object with a position, an orientation and a geometry scale.

    Orientation is a unit quaternion stored as ``(x, y, z, w)``.
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    orientation: np.ndarray = field(default_factory=lambda: IDENTITY_QUATERNION.copy())
    geometry_scale: float = 1.0
    size: float = 1.0
    color: tuple[int, int, int] = (255, 255, 255)

    def set_orientation(self, quaternion: np.ndarray) -> None:
        self.orientation = np.asarray(quaternion, dtype=float).copy()

    def scale_geometry(self, factor: float) -> None:
        self.geometry_scale *= factor


class Marker:
    """View onto one slot of a :class:`Ribbon`."""

    __slots__ = ("_ribbon", "_index")

    def __init__(self, ribbon: "Ribbon", index: int) -> None:
        self._ribbon = ribbon
        self._index = index

    @property
    def position(self) -> np.ndarray:
        return self._ribbon.positions[self._index]

    @property
    def orientation(self) -> np.ndarray:
        return self._ribbon.orientations[self._index]

    def set_orientation(self, quaternion: np.ndarray) -> None:
        self._ribbon.orientations[self._index] = quaternion


class Ribbon:
    """Markers for one entity's trajectory, one per sample slot.

    Positions and orientations live in two contiguous arrays so a whole
    ribbon can be written at once; :meth:`__getitem__` hands out per-marker
    views.
    """

    def __init__(self, length: int, color: tuple[int, int, int] = (255, 255, 255)) -> None:
        if length <= 0:
            raise ValueError("Ribbon length must be positive")
        self.positions = np.zeros((length, 3), dtype=float)
        self.orientations = np.tile(IDENTITY_QUATERNION, (length, 1))
        self.color = color

    def __len__(self) -> int:
        return self.positions.shape[0]

    def __getitem__(self, index: int) -> Marker:
        if not 0 <= index < len(self):
            raise IndexError(f"Marker index {index} outside ribbon of length {len(self)}")
        return Marker(self, index)

    def __iter__(self) -> Iterator[Marker]:
        for index in range(len(self)):
            yield Marker(self, index)


def make_spheres(
    bodies: Sequence[Body],
    render_cfg: RenderCfg = RENDER_CFG,
) -> list[SceneObject]:
    """One sphere for the barycenter followed by one per body."""

    spheres = [
        SceneObject(size=float(render_cfg.barycenter_pixel_size), color=render_cfg.barycenter_color)
    ]
    spheres.extend(SceneObject(size=body.radius, color=body.color) for body in bodies)
    return spheres


def make_ribbons(
    bodies: Sequence[Body],
    barycenter: Barycenter,
    render_cfg: RenderCfg = RENDER_CFG,
) -> list[Ribbon]:
    """One ribbon per entity, barycenter first, sized to its trajectory."""

    ribbons = [Ribbon(len(barycenter.trajectory), render_cfg.barycenter_color)]
    ribbons.extend(Ribbon(len(body.trajectory), body.color) for body in bodies)
    return ribbons


def make_axes(render_cfg: RenderCfg = RENDER_CFG) -> list[SceneObject]:
    """Axis indicators along +X, +Y and +Z, each centred on its half-length."""

    axes: list[SceneObject] = []
    for index, color in enumerate(render_cfg.axis_colors):
        direction = np.zeros(3, dtype=float)
        direction[index] = 1.0
        axis = SceneObject(
            position=direction * (render_cfg.axis_length / 2.0),
            size=render_cfg.axis_length,
            color=color,
        )
        axis.set_orientation(shortest_arc(UP, direction))
        axes.append(axis)
    return axes


__all__ = [
    "IDENTITY_QUATERNION",
    "Marker",
    "Ribbon",
    "SceneObject",
    "make_axes",
    "make_ribbons",
    "make_spheres",
]
