"""Physical state to render space.

Every function here takes the frame basis fresh from
:func:`nbody_view.core.frames.resolve_frame`, so positions and trajectory
markers written in the same tick always share one basis snapshot. Values are
computed in full and checked before anything is written; a tick that would
produce NaN or infinite coordinates raises :class:`TickRejected` and leaves the
scene as it was.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from nbody_view.core.config import RENDER_CFG, RenderCfg
from nbody_view.core.frames import FrameBasis, resolve_frame
from nbody_view.core.model import Barycenter, Body
from nbody_view.core.settings import Settings
from nbody_view.core.telemetry import Telemetry, format_telemetry
from nbody_view.core.timekeeping import SimTimer
from nbody_view.core.trajectory import Trajectory

from .overlay import OverlayCamera, apply_overlay_transfer, overlay_scale
from .rotation import UP, shortest_arc
from .scene import Ribbon, SceneObject, make_axes, make_ribbons, make_spheres


class TickRejected(ValueError):
    """Raised when a tick would write non-finite values into the scene."""


def _require_finite(values: np.ndarray, what: str) -> None:
    if not np.all(np.isfinite(values)):
        raise TickRejected(f"Non-finite {what}; tick rejected")


def _entities(bodies: Sequence[Body], barycenter: Barycenter) -> list[Body | Barycenter]:
    return [barycenter, *bodies]


def project_position(position: np.ndarray, basis: FrameBasis, scale: float) -> np.ndarray:
    return (np.asarray(position, dtype=float) - basis.position) * scale


def update_body_object(
    idx: int,
    bodies: Sequence[Body],
    barycenter: Barycenter,
    obj: SceneObject,
    settings: Settings,
) -> None:
    """Write body ``idx``'s render-space position into ``obj``."""

    settings.validate()
    basis = resolve_frame(settings.frame, bodies, barycenter)
    position = project_position(bodies[idx].position, basis, settings.scale)
    _require_finite(position, f"position for body {bodies[idx].id!r}")
    obj.position = position


def sphere_positions(
    bodies: Sequence[Body], barycenter: Barycenter, basis: FrameBasis, scale: float
) -> np.ndarray:
    positions = np.array([entity.position for entity in _entities(bodies, barycenter)], dtype=float)
    return (positions - basis.position) * scale


def update_spheres(
    bodies: Sequence[Body],
    barycenter: Barycenter,
    spheres: Sequence[SceneObject],
    settings: Settings,
) -> None:
    """Position the barycenter sphere (index 0) and one sphere per body."""

    settings.validate()
    basis = resolve_frame(settings.frame, bodies, barycenter)
    positions = sphere_positions(bodies, barycenter, basis, settings.scale)
    _require_finite(positions, "sphere positions")
    for sphere, position in zip(spheres, positions):
        sphere.position = position


def ribbon_positions(
    trajectory: Trajectory, frame_trajectory: Trajectory | None, scale: float
) -> np.ndarray:
    """Render-space marker positions, oldest sample first.

    Sample ``k`` of the frame trajectory is subtracted from sample ``k`` of
    the entity trajectory; both buffers are filled in lockstep.
    """

    samples = trajectory.as_array()
    if frame_trajectory is not None:
        if len(frame_trajectory) != len(trajectory):
            raise ValueError(
                f"Frame trajectory holds {len(frame_trajectory)} samples, expected {len(trajectory)}"
            )
        samples = samples - frame_trajectory.as_array()
    return samples * scale


def marker_orientations(positions: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """Orient each marker from ``+Y`` onto its reversed direction of travel.

    The segment for marker ``k`` runs from marker ``k - 1`` (the render-space
    origin for ``k == 0``) to marker ``k``. Markers whose segment has zero
    length keep their orientation from ``previous``.
    """

    preceding = np.zeros_like(positions)
    preceding[1:] = positions[:-1]
    facing = preceding - positions
    lengths = np.linalg.norm(facing, axis=1)
    moving = lengths > 0.0
    orientations = np.array(previous, dtype=float, copy=True)
    if np.any(moving):
        orientations[moving] = shortest_arc(UP, facing[moving] / lengths[moving, np.newaxis])
    return orientations


def compute_ribbons(
    bodies: Sequence[Body],
    barycenter: Barycenter,
    ribbons: Sequence[Ribbon],
    basis: FrameBasis,
    scale: float,
) -> list[tuple[np.ndarray, np.ndarray]]:
    computed: list[tuple[np.ndarray, np.ndarray]] = []
    for entity, ribbon in zip(_entities(bodies, barycenter), ribbons):
        positions = ribbon_positions(entity.trajectory, basis.trajectory, scale)
        if positions.shape != ribbon.positions.shape:
            raise ValueError(
                f"Ribbon holds {len(ribbon)} markers, trajectory holds {positions.shape[0]}"
            )
        orientations = marker_orientations(positions, ribbon.orientations)
        computed.append((positions, orientations))
    return computed


def _write_ribbons(ribbons: Sequence[Ribbon], computed: list[tuple[np.ndarray, np.ndarray]]) -> None:
    for ribbon, (positions, orientations) in zip(ribbons, computed):
        ribbon.positions[:] = positions
        ribbon.orientations[:] = orientations


def update_ribbons(
    bodies: Sequence[Body],
    barycenter: Barycenter,
    ribbons: Sequence[Ribbon],
    settings: Settings,
) -> None:
    """Write trajectory markers for the barycenter (ribbon 0) and every body."""

    settings.validate()
    basis = resolve_frame(settings.frame, bodies, barycenter)
    computed = compute_ribbons(bodies, barycenter, ribbons, basis, settings.scale)
    for positions, orientations in computed:
        _require_finite(positions, "marker positions")
        _require_finite(orientations, "marker orientations")
    _write_ribbons(ribbons, computed)


class RenderEngine:
    """Owns the scene objects and runs the per-tick render-space update."""

    def __init__(
        self,
        bodies: Sequence[Body],
        barycenter: Barycenter,
        camera: OverlayCamera,
        render_cfg: RenderCfg = RENDER_CFG,
    ) -> None:
        self.bodies = bodies
        self.barycenter = barycenter
        self.camera = camera
        self.render_cfg = render_cfg
        self.spheres = make_spheres(bodies, render_cfg)
        self.ribbons = make_ribbons(bodies, barycenter, render_cfg)
        self.axes = make_axes(render_cfg)
        self.overlay_scale = 1.0

    def update(self, settings: Settings, timer: SimTimer) -> Telemetry:
        """Project the current state into the scene and format telemetry.

        Raises :class:`TickRejected` without touching the scene when any
        precondition fails or any computed value is non-finite.
        """

        try:
            settings.validate()
            basis = resolve_frame(settings.frame, self.bodies, self.barycenter)
            spheres = sphere_positions(self.bodies, self.barycenter, basis, settings.scale)
            ribbons = compute_ribbons(
                self.bodies, self.barycenter, self.ribbons, basis, settings.scale
            )
            if not self.overlay_scale > 0.0:
                raise ValueError(f"Overlay scale must be positive, got {self.overlay_scale!r}")
            next_overlay_scale = overlay_scale(self.camera, self.render_cfg.overlay_calibration)
            telemetry = format_telemetry(settings, self.bodies, self.barycenter, timer)
        except TickRejected:
            raise
        except (ValueError, IndexError) as exc:
            raise TickRejected(str(exc)) from exc

        _require_finite(spheres, "sphere positions")
        for positions, orientations in ribbons:
            _require_finite(positions, "marker positions")
            _require_finite(orientations, "marker orientations")
        _require_finite(np.array([next_overlay_scale]), "overlay scale")

        for sphere, position in zip(self.spheres, spheres):
            sphere.position = position
        _write_ribbons(self.ribbons, ribbons)
        apply_overlay_transfer(self.axes, next_overlay_scale / self.overlay_scale)
        self.overlay_scale = next_overlay_scale
        return telemetry


__all__ = [
    "RenderEngine",
    "TickRejected",
    "compute_ribbons",
    "marker_orientations",
    "project_position",
    "ribbon_positions",
    "sphere_positions",
    "update_body_object",
    "update_ribbons",
    "update_spheres",
]
