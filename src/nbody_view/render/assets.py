from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]


class SpriteCache:
    """Cache of pre-rendered disc sprites keyed by radius and color."""

    def __init__(self, max_size: int = 128) -> None:
        self._max_size = max_size
        self._discs: OrderedDict[tuple[int, Color, bool], pygame.Surface] = OrderedDict()

    def __len__(self) -> int:
        return len(self._discs)

    def disc(self, radius: int, color: Color, *, square: bool = False) -> pygame.Surface:
        if radius <= 0:
            raise ValueError("Sprite radius must be positive")
        key = (radius, color, square)
        cached = self._discs.get(key)
        if cached is not None:
            self._discs.move_to_end(key)
            return cached
        diameter = radius * 2
        sprite = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
        if square:
            pygame.draw.rect(sprite, color, sprite.get_rect(), 2)
        else:
            pygame.draw.circle(sprite, color, (radius, radius), radius)
        self._discs[key] = sprite
        if len(self._discs) > self._max_size:
            self._discs.popitem(last=False)
        return sprite


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    fallback = names[0] if names else None
    return pygame.font.SysFont(fallback, size, bold=bold)
