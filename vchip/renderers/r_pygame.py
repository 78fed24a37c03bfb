#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws the framebuffer onto an SDL window surface via PyGame.  Note that the
surface is allocated at the size which matches the machine's display, and then
the contents are stretched (in the correct aspect ratio using 'Nearest
Neighbour' translation) to fit the window itself.  This means we don't have to
draw the same pixel multiple times.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import Renderer as RendererBase
from ..constants import APP_NAME

BACKGROUND_COLOUR = 0x222222
FOREGROUND_COLOUR = 0xDDDDDD


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 512  # Default window width if not supplied, or set to default

        pygame.display.init()
        self.rgb_buffer = None
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size)

        # Split compound RGB values for faster byte-based lookup later.  Pixels are only ever 0 or 1.
        self.rgb_map = [
            memoryview(bytearray([i >> 16, (i >> 8) & 0xFF, i & 0xFF])) for i in (BACKGROUND_COLOUR, FOREGROUND_COLOUR)
        ]

        super().__init__(scale)
        self.set_title(APP_NAME)

    def set_resolution(self, width, height):
        # Call superclass method so display size is known on the next refresh
        super().set_resolution(width, height)
        self.rgb_buffer = memoryview(bytearray(width * height * 3))  # 24-bit

    def refresh_display(self, pixels):
        if not self.rgb_buffer:
            return

        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_buffer = self.rgb_buffer
        rgb_map = self.rgb_map

        for location, pixel in enumerate(pixels):
            rgb_location = location * 3
            rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]

        # Blit the bytearray straight to the surface
        render_surface = pygame.image.frombuffer(rgb_buffer, (self.width, self.height), "RGB")
        scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
        self.display_surface.blit(scaled_win, (0, 0))
        pygame.display.flip()

    def set_title(self, title):
        super().set_title(title)
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
