"""Zoom-compensated scaling of the axis overlay."""
from __future__ import annotations

from typing import Protocol, Sequence

from nbody_view.core.config import RENDER_CFG

from .scene import SceneObject


class OverlayCamera(Protocol):
    @property
    def top(self) -> float: ...

    @property
    def bottom(self) -> float: ...

    @property
    def zoom(self) -> float: ...


def overlay_scale(camera: OverlayCamera, calibration: float = RENDER_CFG.overlay_calibration) -> float:
    if not camera.zoom > 0.0:
        raise ValueError(f"Camera zoom must be positive, got {camera.zoom!r}")
    extent = camera.top - camera.bottom
    if not extent > 0.0:
        raise ValueError(f"Camera vertical extent must be positive, got {extent!r}")
    return extent / camera.zoom / calibration


def apply_overlay_transfer(axes: Sequence[SceneObject], transfer: float) -> None:
    """Scale axis geometry and positions by ``transfer`` in place."""

    for axis in axes:
        axis.scale_geometry(transfer)
        axis.position *= transfer


def update_axes_overlay(
    camera: OverlayCamera,
    axes: Sequence[SceneObject],
    previous_scale: float,
    calibration: float = RENDER_CFG.overlay_calibration,
) -> float:
    """Rescale ``axes`` relative to last tick and return the new scale.

    Geometry is scaled incrementally, so the factor applied is the ratio of
    this tick's scale to ``previous_scale``; feed the return value back in as
    ``previous_scale`` on the next call.
    """

    if not previous_scale > 0.0:
        raise ValueError(f"Previous overlay scale must be positive, got {previous_scale!r}")
    scale = overlay_scale(camera, calibration)
    apply_overlay_transfer(axes, scale / previous_scale)
    return scale


__all__ = ["OverlayCamera", "apply_overlay_transfer", "overlay_scale", "update_axes_overlay"]
