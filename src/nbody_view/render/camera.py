from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class CameraState:
    zoom: float
    zoom_target: float
    yaw: float
    pitch: float


class OrthoCamera:
    """Orthographic camera looking at the render-space origin.

    At zoom ``1`` one render unit maps to one pixel; the vertical extent
    ``top - bottom`` is the viewport height in render units.
    """

    def __init__(
        self,
        size: tuple[int, int],
        zoom: float = 1.0,
        *,
        min_zoom: float,
        max_zoom: float,
        yaw: float = 0.0,
        pitch: float = math.radians(-60.0),
    ) -> None:
        self._size = size
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        zoom = _clamp(zoom, min_zoom, max_zoom)
        self._state = CameraState(zoom=zoom, zoom_target=zoom, yaw=yaw, pitch=pitch)
        self._drag_anchor: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def top(self) -> float:
        return self._size[1] / 2.0

    @property
    def bottom(self) -> float:
        return -self._size[1] / 2.0

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def yaw(self) -> float:
        return self._state.yaw

    @property
    def pitch(self) -> float:
        return self._state.pitch

    def set_zoom(self, zoom: float) -> None:
        clamped = _clamp(zoom, self._min_zoom, self._max_zoom)
        self._state.zoom = clamped
        self._state.zoom_target = clamped

    def zoom_by_factor(self, factor: float) -> None:
        self._state.zoom_target = _clamp(
            self._state.zoom_target * factor, self._min_zoom, self._max_zoom
        )

    def rotate(self, d_yaw: float, d_pitch: float) -> None:
        self._state.yaw = (self._state.yaw + d_yaw) % (2.0 * math.pi)
        self._state.pitch = _clamp(self._state.pitch + d_pitch, -math.pi / 2.0, math.pi / 2.0)

    def update(self, smoothing: float = 0.2) -> None:
        state = self._state
        state.zoom += (state.zoom_target - state.zoom) * smoothing
        state.zoom = _clamp(state.zoom, self._min_zoom, self._max_zoom)

    def begin_drag(self, position: tuple[int, int]) -> None:
        self._drag_anchor = position

    def drag(self, position: tuple[int, int], radians_per_pixel: float = 0.005) -> None:
        if self._drag_anchor is None:
            return
        dx = position[0] - self._drag_anchor[0]
        dy = position[1] - self._drag_anchor[1]
        if dx == 0 and dy == 0:
            return
        self.rotate(dx * radians_per_pixel, dy * radians_per_pixel)
        self._drag_anchor = position

    def end_drag(self) -> None:
        self._drag_anchor = None

    def view_matrix(self) -> np.ndarray:
        """Rotation taking render space into camera space (yaw about Z, then pitch about X)."""

        cy, sy = math.cos(self._state.yaw), math.sin(self._state.yaw)
        cp, sp = math.cos(self._state.pitch), math.sin(self._state.pitch)
        yaw = np.array([[cy, -sy, 0.0], [sy, cy, 0.0], [0.0, 0.0, 1.0]])
        pitch = np.array([[1.0, 0.0, 0.0], [0.0, cp, -sp], [0.0, sp, cp]])
        return pitch @ yaw

    def project(self, points: np.ndarray) -> np.ndarray:
        """Screen coordinates of ``(n, 3)`` render-space points as an ``(n, 2)`` array."""

        points = np.atleast_2d(np.asarray(points, dtype=float))
        view = points @ self.view_matrix().T
        width, height = self._size
        screen = np.empty((points.shape[0], 2), dtype=float)
        screen[:, 0] = width / 2.0 + view[:, 0] * self._state.zoom
        screen[:, 1] = height / 2.0 - view[:, 1] * self._state.zoom
        return screen


__all__ = ["CameraState", "OrthoCamera"]
