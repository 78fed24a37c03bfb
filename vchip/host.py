#!/usr/bin/env python3

"""
Host Run Loop

Drives a Machine against the wall clock.  The machine itself has no notion of
time: this loop decides how often to step the CPU, ticks the delay and sound
timers at 60Hz, polls the input plugin and redraws the display at 60Hz, and
reports performance through the renderer's title once a second.

If the machine raises, the loop halts and raises a HostError carrying a full
debugger report of the machine state.  The machine is left exactly as the
faulting instruction found it (apart from the program counter), so a caller
could inspect it or carry on stepping.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import APP_INTRO, APP_NAME, DEFAULT_CLOCK_SPEED, DISPLAY_FREQ, TIMER_FREQ
from .cpu import CPUError
from .ram import RAMError
from .stack import StackError

DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ
TIMER_INTERVAL = 1.0 / TIMER_FREQ


class HostError(Exception):
    pass


class Host:
    def __init__(self, machine, renderer, inputs, clock_speed=DEFAULT_CLOCK_SPEED):
        self.machine = machine
        self.renderer = renderer
        self.inputs = inputs
        # User can specify 0 (or None) for uncapped
        self.core_interval = None if not clock_speed or clock_speed <= 0 else 1.0 / clock_speed

        self.renderer.set_resolution(*self.machine.get_display_size())
        self.report_perf()

        # Performance-related vars
        self.next_display_update_time = 0
        self.next_timer_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def run(self, max_cycles=None):
        # Returns the number of instructions executed before the inputs asked to quit, or max_cycles was reached
        cycles = 0

        while max_cycles is None or cycles < max_cycles:
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages(self.machine.keypad):  # Process inputs at 60Hz too, to avoid slowdown
                    break

                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_framebuffer()
                self.perf_counter_fps += 1

            # Timers tick by wall clock, independent of how fast the CPU is going
            if this_time >= self.next_timer_time:
                self.next_timer_time = this_time + TIMER_INTERVAL
                self.machine.decrement_timers()

            try:
                self.machine.step()
            except (CPUError, RAMError, StackError) as err:
                self.refresh_framebuffer()
                raise HostError(
                    "Emulation halted.\n\n{}Debug info:\n{}\n\n{}".format(
                        APP_INTRO, self.machine.debugger.debug(self.machine.cpu, "???", verbose=True), err
                    )
                ) from err

            # A release is seen by exactly one step, so one key press can't complete several Fx0A waits
            self.machine.keypad.clear_released()
            cycles += 1
            self.perf_counter_ops += 1

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

        self.refresh_framebuffer()
        return cycles

    def refresh_framebuffer(self):
        # Render pending screen updates.  Should be called whenever there will be a pause, a quit, or the display
        # refresh interval expires.
        if self.machine.framebuffer.take_changed():
            self.renderer.refresh_display(self.machine.get_display())

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))
