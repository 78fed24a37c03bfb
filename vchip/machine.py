#!/usr/bin/env python3

"""
Virtual Machine

Bundles RAM, the call stack, the framebuffer, the keypad and the CPU into the
one object a host owns.  Everything a host needs goes through here: loading
programs and fonts, poking at memory, forwarding key events, ticking timers,
stepping the CPU and reading back the display.

Nothing is loaded on construction.  Memory starts zeroed with the program
counter at 0x200, so the host must call load_font() itself if the running
program uses Fx29.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import FONT_LOCATION, MEMORY_SIZE, PROGRAM_LOCATION, STACK_DEPTH, SYSTEM_FONT
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .keypad import Keypad
from .ram import RAM
from .stack import Stack


class Machine:
    def __init__(self, quirks=False, shift_quirks=None, jump_quirks=None, load_quirks=None, seed=None, rng=None,
                 debugger=None):
        self.ram = RAM(MEMORY_SIZE)
        self.stack = Stack(STACK_DEPTH)
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.debugger = Debugger() if debugger is None else debugger

        self.cpu = CPU(
            self.ram, self.stack, self.framebuffer, self.keypad, self.debugger,
            rng=Random(seed) if rng is None else rng, quirks=quirks, shift_quirks=shift_quirks,
            jump_quirks=jump_quirks, load_quirks=load_quirks
        )

    def reset(self):
        # Zero everything in place; quirk settings and the random source survive
        self.ram.clear()
        self.stack.clear()
        self.framebuffer.clear()
        self.keypad.clear()
        self.cpu.reset()

    # Memory

    def read_memory(self):
        return self.ram.read_all()

    def replace_memory(self, image):
        self.ram.replace(image)

    def read_memory_block(self, location, size):
        return self.ram.read_block(location, size)

    def write_memory_block(self, location, block, size=None):
        self.ram.write_block(location, block, size)

    def read_byte(self, location):
        return self.ram.read(location)

    def write_byte(self, location, byte):
        self.ram.write(location, byte)

    def load_program(self, program, location=PROGRAM_LOCATION):
        self.ram.write_block(location, program)

    def load_font(self, font=SYSTEM_FONT, location=FONT_LOCATION):
        self.ram.write_block(location, font)
        self.cpu.font_location = location

    # Keypad

    def set_key_held(self, key, held=True):
        self.keypad.set_held(key, held)

    def set_key_released(self, key, released=True):
        self.keypad.set_released(key, released)

    # Execution

    def decrement_timers(self):
        self.cpu.decrement_timers()

    def step(self):
        self.cpu.step()

    # Display

    def get_display(self):
        return self.framebuffer.get_view()

    def get_display_size(self):
        return self.framebuffer.get_vid_size()
