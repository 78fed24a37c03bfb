#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "VirtualChip"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Machine geometry
MEMORY_SIZE = 0x1000
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10
STACK_DEPTH = 16
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

# Memory map.  FX29 computes glyph addresses as Vx * 5, so the font has to sit at the very bottom of RAM.
FONT_LOCATION = 0x000
FONT_GLYPH_SIZE = 5
PROGRAM_LOCATION = 0x200

# Timing
TIMER_FREQ = 60.0    # 60Hz delay/sound timer decrement
DISPLAY_FREQ = 60.0  # 60Hz display refresh and input polling
DEFAULT_CLOCK_SPEED = 1000

# Glyphs 0-F, 5 rows each, 4 pixels wide (high nibble)
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# CPU quirks, each selectable individually or all at once via the master quirk switch
CPU_QUIRKS = ["shift", "jump", "load"]
