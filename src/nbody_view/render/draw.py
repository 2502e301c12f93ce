from __future__ import annotations

import math
from typing import Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import SpriteCache
from .camera import OrthoCamera
from .rotation import UP, rotate
from .scene import Ribbon, SceneObject

if TYPE_CHECKING:  # pragma: no cover
    from nbody_view.core.config import RenderCfg


def downsample_indices(length: int, max_points: int) -> np.ndarray:
    """Evenly spaced indices into ``range(length)``, always keeping the newest."""

    if length <= max_points:
        return np.arange(length)
    step = max(1, math.ceil(length / max_points))
    indices = np.arange(0, length, step)
    if indices[-1] != length - 1:
        indices = np.append(indices, length - 1)
    return indices


def draw_spheres(
    surface: pygame.Surface,
    camera: OrthoCamera,
    spheres: Sequence[SceneObject],
    *,
    sprites: SpriteCache,
) -> None:
    """Draw the barycenter (index 0) as a hollow square and bodies as discs."""

    if not spheres:
        return
    screen = camera.project(np.array([sphere.position for sphere in spheres]))
    for idx, (sphere, (sx, sy)) in enumerate(zip(spheres, screen)):
        radius = max(1, int(round(sphere.size)))
        sprite = sprites.disc(radius, sphere.color, square=idx == 0)
        surface.blit(sprite, sprite.get_rect(center=(int(sx), int(sy))))


def draw_ribbon(
    surface: pygame.Surface,
    camera: OrthoCamera,
    ribbon: Ribbon,
    *,
    render_cfg: RenderCfg,
) -> None:
    """Draw each sampled marker as a short tick along its orientation."""

    indices = downsample_indices(len(ribbon), render_cfg.max_rendered_markers)
    positions = ribbon.positions[indices]
    tick = rotate(ribbon.orientations[indices], UP) * (render_cfg.marker_pixel_length / camera.zoom)
    starts = camera.project(positions)
    ends = camera.project(positions + tick)
    color = (*ribbon.color, render_cfg.marker_alpha)
    for start, end in zip(starts, ends):
        pygame.draw.line(surface, color, tuple(start), tuple(end), 1)


def draw_axes(
    surface: pygame.Surface,
    camera: OrthoCamera,
    axes: Sequence[SceneObject],
) -> None:
    for axis in axes:
        half = rotate(axis.orientation, UP) * (axis.size * axis.geometry_scale / 2.0)
        start, end = camera.project(np.array([axis.position - half, axis.position + half]))
        pygame.draw.line(surface, axis.color, tuple(start), tuple(end), 2)


def draw_focus_ring(
    surface: pygame.Surface,
    camera: OrthoCamera,
    obj: SceneObject,
    *,
    color: tuple[int, int, int],
    radius: int,
) -> None:
    (sx, sy), = camera.project(obj.position)
    pygame.draw.circle(surface, color, (int(sx), int(sy)), radius, 1)
