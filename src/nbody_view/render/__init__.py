"""Rendering helpers for the N-body viewer."""

from .camera import OrthoCamera
from .assets import (
    SpriteCache,
    get_text_surface,
    load_font,
)
from .draw import (
    downsample_indices,
    draw_axes,
    draw_focus_ring,
    draw_ribbon,
    draw_spheres,
)
from .overlay import apply_overlay_transfer, overlay_scale, update_axes_overlay
from .scene import (
    Marker,
    Ribbon,
    SceneObject,
    make_axes,
    make_ribbons,
    make_spheres,
)
from .transform import (
    RenderEngine,
    TickRejected,
    update_body_object,
    update_ribbons,
    update_spheres,
)
from .ui import build_telemetry_panel, build_text_panel

__all__ = [
    "Marker",
    "OrthoCamera",
    "RenderEngine",
    "Ribbon",
    "SceneObject",
    "SpriteCache",
    "TickRejected",
    "apply_overlay_transfer",
    "build_telemetry_panel",
    "build_text_panel",
    "downsample_indices",
    "draw_axes",
    "draw_focus_ring",
    "draw_ribbon",
    "draw_spheres",
    "get_text_surface",
    "load_font",
    "make_axes",
    "make_ribbons",
    "make_spheres",
    "overlay_scale",
    "update_axes_overlay",
    "update_body_object",
    "update_ribbons",
    "update_spheres",
]
