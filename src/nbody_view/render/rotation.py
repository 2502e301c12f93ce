"""Quaternion helpers, ``(x, y, z, w)`` layout."""
from __future__ import annotations

import numpy as np

UP = np.array([0.0, 1.0, 0.0])

_ANTIPARALLEL_EPS = 1e-12


def shortest_arc(source: np.ndarray, targets: np.ndarray) -> np.ndarray:
    """Quaternions rotating unit vector ``source`` onto each unit vector in ``targets``.

    ``targets`` may be a single vector or an ``(n, 3)`` array; the result has
    the matching shape ``(4,)`` or ``(n, 4)``. When a target is opposite to
    ``source`` the half turn is taken about an axis orthogonal to ``source``.
    """

    source = np.asarray(source, dtype=float)
    targets = np.asarray(targets, dtype=float)
    single = targets.ndim == 1
    targets = np.atleast_2d(targets)

    w = targets @ source + 1.0
    quaternions = np.empty((targets.shape[0], 4), dtype=float)
    quaternions[:, :3] = np.cross(source, targets)
    quaternions[:, 3] = w

    opposite = w < _ANTIPARALLEL_EPS
    if np.any(opposite):
        if abs(source[0]) > abs(source[2]):
            axis = np.array([-source[1], source[0], 0.0, 0.0])
        else:
            axis = np.array([0.0, -source[2], source[1], 0.0])
        quaternions[opposite] = axis

    quaternions /= np.linalg.norm(quaternions, axis=1)[:, np.newaxis]
    return quaternions[0] if single else quaternions


def rotate(quaternions: np.ndarray, vector: np.ndarray) -> np.ndarray:
    """Apply each quaternion to ``vector``.

    Accepts ``(4,)`` or ``(n, 4)`` quaternions and returns ``(3,)`` or
    ``(n, 3)`` accordingly.
    """

    quaternions = np.asarray(quaternions, dtype=float)
    single = quaternions.ndim == 1
    q = np.atleast_2d(quaternions)
    xyz = q[:, :3]
    w = q[:, 3:4]
    v = np.broadcast_to(np.asarray(vector, dtype=float), xyz.shape)
    t = 2.0 * np.cross(xyz, v)
    rotated = v + w * t + np.cross(xyz, t)
    return rotated[0] if single else rotated


__all__ = ["UP", "rotate", "shortest_arc"]
