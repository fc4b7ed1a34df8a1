"""Window that shows the emulated monochrome screen."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from itertools import islice

import pygame

from chipeight.options import DisplayOptions

WINDOW_TITLE = "CHIP-8 emulator"

Rect = tuple[int, int, int, int]


def pixel_rects(
    pixels: Iterable[bool], width: int, height: int, scaling: int
) -> Iterator[Rect]:
    """Yield ``(x, y, w, h)`` window rectangles for every lit pixel.

    Pixels are given row by row. Entries beyond ``width * height`` are ignored;
    a short sequence leaves the remaining pixels unlit.
    """
    for i, lit in enumerate(islice(pixels, width * height)):
        if lit:
            row, column = divmod(i, width)
            yield (column * scaling, row * scaling, scaling, scaling)


class Display:
    """Draws display buffers onto a scaled window or onto a given surface."""

    def __init__(
        self, options: DisplayOptions | None = None, surface: pygame.Surface | None = None
    ) -> None:
        options = options if options is not None else DisplayOptions()
        self.width = options.display_width
        self.height = options.display_height
        self.scaling = options.scaling
        self.on_color = pygame.Color(*options.color_on_rgb)
        self.off_color = pygame.Color(*options.color_off_rgb)
        self._owns_window = surface is None
        if surface is None:
            os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
            pygame.display.init()
            pygame.display.set_caption(WINDOW_TITLE)
            surface = pygame.display.set_mode(
                (self.width * self.scaling, self.height * self.scaling)
            )
        self.surface = surface

    def draw_screen(self, pixels: Iterable[bool]) -> None:
        """Redraw the whole screen from *pixels*, given row by row."""
        self.surface.fill(self.off_color)
        for rect in pixel_rects(pixels, self.width, self.height, self.scaling):
            self.surface.fill(self.on_color, rect)
        if self._owns_window:
            pygame.display.flip()