from __future__ import annotations

from typing import Iterable, Sequence

import pygame

from .assets import Color, get_text_surface


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
    alpha: int | None = None,
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(
        panel_surface,
        background_color,
        panel_surface.get_rect(),
        border_radius=12,
    )
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        if alpha is not None and alpha < 255:
            text_surf = text_surf.copy()
            text_surf.set_alpha(alpha)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    if alpha is not None and alpha < 255:
        panel_surface.set_alpha(alpha)
    return panel_surface


def build_telemetry_panel(
    font: pygame.font.Font,
    rows: Iterable[tuple[str, str]],
    *,
    label_color: tuple[int, int, int],
    value_color: tuple[int, int, int],
    background_color: Color,
    padding: tuple[int, int] = (14, 14),
) -> pygame.Surface:
    """Two-column panel: labels on the left, values aligned after the widest label."""

    rows = list(rows)
    if not rows:
        raise ValueError("rows must not be empty")
    padding_x, padding_y = padding
    gap = font.size("  ")[0]
    line_height = font.get_linesize()
    label_width = max(font.size(label)[0] for label, _ in rows)
    value_width = max(font.size(value)[0] for _, value in rows)
    width = label_width + gap + value_width + padding_x * 2
    height = line_height * len(rows) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=12)
    for idx, (label, value) in enumerate(rows):
        y = padding_y + idx * line_height
        panel_surface.blit(get_text_surface(font, label, label_color), (padding_x, y))
        panel_surface.blit(
            get_text_surface(font, value, value_color),
            (padding_x + label_width + gap, y),
        )
    return panel_surface
