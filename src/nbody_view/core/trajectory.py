"""Fixed-capacity ring buffer of past positions."""
from __future__ import annotations

import numpy as np


class Trajectory:
    """Circular buffer of 3D samples addressed by logical index.

    Logical index ``0`` is the oldest retained sample and ``len(self) - 1``
    the newest. The buffer starts filled with ``initial`` so its length always
    equals its capacity; every :meth:`append` evicts the oldest sample.
    """

    def __init__(self, capacity: int, initial: np.ndarray | None = None) -> None:
        if capacity <= 0:
            raise ValueError("Trajectory capacity must be positive")
        self._samples = np.zeros((capacity, 3), dtype=float)
        if initial is not None:
            self._samples[:] = np.asarray(initial, dtype=float)
        self._cursor = 0

    @property
    def capacity(self) -> int:
        return self._samples.shape[0]

    def __len__(self) -> int:
        return self.capacity

    def append(self, position: np.ndarray) -> None:
        self._samples[self._cursor] = position
        self._cursor = (self._cursor + 1) % self.capacity

    def get(self, k: int) -> np.ndarray:
        if not 0 <= k < self.capacity:
            raise IndexError(f"Sample index {k} outside trajectory of length {self.capacity}")
        return self._samples[(self._cursor + k) % self.capacity].copy()

    def latest(self) -> np.ndarray:
        return self.get(self.capacity - 1)

    def as_array(self) -> np.ndarray:
        """Return every sample, oldest first, as a ``(capacity, 3)`` array."""

        return np.roll(self._samples, -self._cursor, axis=0)

    def reset(self, position: np.ndarray) -> None:
        self._samples[:] = np.asarray(position, dtype=float)
        self._cursor = 0


__all__ = ["Trajectory"]
