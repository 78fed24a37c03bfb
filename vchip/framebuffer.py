#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) when the host asks for them, usually at 60Hz.

Unlike other computers, programs for this system cannot write directly into
video RAM.  Instead, sprites are drawn to the screen using an XOR method.  The
surface is monochrome, one byte per pixel, each either 0 or 1.

Collisions (where any pixel was set, but was unset by an XOR), are reported
back to the caller.  Pixels past the right or bottom edge are clipped rather
than wrapped.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import DISPLAY_WIDTH, DISPLAY_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer():
    def __init__(self, vid_width=DISPLAY_WIDTH, vid_height=DISPLAY_HEIGHT):
        self.vid_width = 0
        self.vid_height = 0
        self.vid_size = 0
        self.ram_bank = RAM()
        self.changed = False
        self.resize_vid(vid_width, vid_height)

    def resize_vid(self, vid_width, vid_height):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display size must be positive, got {}x{}".format(vid_width, vid_height))

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = self.vid_width * self.vid_height
        self.ram_bank.resize(self.vid_size)
        self.changed = True

    def clear(self):
        self.ram_bank.clear()
        self.changed = True

    def xor_pixel(self, x, y):
        # Returns flagging any collision, or None if the pixel is off-screen
        if x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.ram_bank.read(vram_loc)
        self.ram_bank.write(vram_loc, pixel ^ 1)
        self.changed = True

        return pixel != 0

    def get_pixel(self, x, y):
        if not (0 <= x < self.vid_width and 0 <= y < self.vid_height):
            raise FramebufferError("Pixel ({}, {}) is outside the display".format(x, y))

        return self.ram_bank.read(y * self.vid_width + x)

    def get_view(self):
        # Row-major, one byte per pixel
        return self.ram_bank.read_all()

    def take_changed(self):
        changed = self.changed
        self.changed = False
        return changed

    def get_vid_size(self):
        return self.vid_width, self.vid_height
