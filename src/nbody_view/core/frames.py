"""Reference frames against which positions are rendered.

A frame is one of three variants: :class:`FixedFrame` (world origin),
:class:`BarycentricFrame` (follows the barycenter) or :class:`BodyFrame`
(follows the body at ``index``). The basis is recomputed every tick from the
current state; nothing here caches it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from .model import Barycenter, Body
from .trajectory import Trajectory


@dataclass(frozen=True)
class FixedFrame:
    pass


@dataclass(frozen=True)
class BarycentricFrame:
    pass


@dataclass(frozen=True)
class BodyFrame:
    index: int


Frame = Union[FixedFrame, BarycentricFrame, BodyFrame]

FIXED = FixedFrame()
BARYCENTRIC = BarycentricFrame()


@dataclass(frozen=True)
class FrameBasis:
    """Values subtracted from every entity before scaling to render space."""

    position: np.ndarray
    trajectory: Trajectory | None


def _frame_body(frame: BodyFrame, bodies: Sequence[Body]) -> Body:
    if not 0 <= frame.index < len(bodies):
        raise IndexError(f"Frame body index {frame.index} out of range for {len(bodies)} bodies")
    return bodies[frame.index]


def frame_position(frame: Frame, bodies: Sequence[Body], barycenter: Barycenter) -> np.ndarray:
    if isinstance(frame, FixedFrame):
        return np.zeros(3, dtype=float)
    if isinstance(frame, BarycentricFrame):
        return barycenter.position.copy()
    if isinstance(frame, BodyFrame):
        return _frame_body(frame, bodies).position.copy()
    raise TypeError(f"Unknown frame {frame!r}")


def frame_trajectory(
    frame: Frame, bodies: Sequence[Body], barycenter: Barycenter
) -> Trajectory | None:
    if isinstance(frame, FixedFrame):
        return None
    if isinstance(frame, BarycentricFrame):
        return barycenter.trajectory
    if isinstance(frame, BodyFrame):
        return _frame_body(frame, bodies).trajectory
    raise TypeError(f"Unknown frame {frame!r}")


def resolve_frame(frame: Frame, bodies: Sequence[Body], barycenter: Barycenter) -> FrameBasis:
    return FrameBasis(
        position=frame_position(frame, bodies, barycenter),
        trajectory=frame_trajectory(frame, bodies, barycenter),
    )


def frame_label(frame: Frame, bodies: Sequence[Body]) -> str:
    if isinstance(frame, FixedFrame):
        return "fixed"
    if isinstance(frame, BarycentricFrame):
        return "barycenter"
    if isinstance(frame, BodyFrame):
        return _frame_body(frame, bodies).id
    raise TypeError(f"Unknown frame {frame!r}")


def cycle_frame(frame: Frame, body_count: int) -> Frame:
    """Next frame in the order fixed, barycenter, body 0 .. body n-1, fixed."""

    if isinstance(frame, FixedFrame):
        return BARYCENTRIC
    if isinstance(frame, BarycentricFrame):
        return BodyFrame(0) if body_count > 0 else FIXED
    if isinstance(frame, BodyFrame):
        next_index = frame.index + 1
        return BodyFrame(next_index) if next_index < body_count else FIXED
    raise TypeError(f"Unknown frame {frame!r}")


__all__ = [
    "BARYCENTRIC",
    "FIXED",
    "BarycentricFrame",
    "BodyFrame",
    "FixedFrame",
    "Frame",
    "FrameBasis",
    "cycle_frame",
    "frame_label",
    "frame_position",
    "frame_trajectory",
    "resolve_frame",
]
