#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.

To embed the virtual machine without any window or run loop, use Machine
directly.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS
from .cpu import CPU, CPUError, InvalidOpcodeError
from .debugger import Debugger
from .framebuffer import Framebuffer, FramebufferError
from .host import Host, HostError
from .hostio import Loader, LoaderError
from .keypad import Keypad, KeypadError
from .machine import Machine
from .ram import RAM, RAMError
from .stack import Stack, StackError, StackOverflowError, StackUnderflowError


class StartupError(Exception):
    pass


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    quirk_settings = {}

    for cpu_quirk in CPU_QUIRKS:
        quirk_label = "{}_quirks".format(cpu_quirk)
        quirk_setting = args[quirk_label]
        quirk_settings[quirk_label] = None if quirk_setting is None else bool(quirk_setting)

    opt_renderer = args["renderer"] or "pygame"

    # flake8: noqa: F401
    if opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            raise StartupError("PyGame does not appear to be installed.  Use the 'null' renderer to run headless.")

        from .inputs.i_pygame import Inputs
        from .renderers.r_pygame import Renderer
    else:
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer

    loader = Loader()

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(args["debug"])

    # Create a new machine with the selected quirks, then write the system font and the ROM into its RAM
    machine = Machine(quirks=bool(args["quirks"]), seed=args["seed"], debugger=debugger, **quirk_settings)
    machine.load_font()
    machine.load_program(loader.load_rom(args["filename"]))

    # Set up a new rendering system, and link host inputs to it in case it provides inputs too
    renderer = Renderer(scale=args["scale"])
    inputs = Inputs(args["keymap"], renderer)
    host = Host(machine, renderer, inputs, clock_speed=args["clock_speed"])

    try:
        host.run(args.get("max_cycles"))
    finally:
        # The host has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        inputs.shutdown()
        renderer.shutdown()
