#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import unittest
from contextlib import redirect_stdout
from vchip.debugger import Debugger
from vchip.machine import Machine


class TestDebugger(unittest.TestCase):
    def setUp(self):
        self.debugger = Debugger()
        self.machine = Machine(debugger=self.debugger)
        self.cpu = self.machine.cpu

    def test_debugger_live_switch(self):
        self.assertFalse(self.debugger.is_live())
        self.debugger.set_live(True)
        self.assertTrue(self.debugger.is_live())

    def test_debugger_debug_line(self):
        self.cpu.v[0xF] = 0x12
        self.cpu.v[0x0] = 0x34
        self.cpu.i = 0xABC
        self.cpu.dt = 0x5
        self.cpu.ds = 0x6
        self.cpu.debug_pc = 0x204
        self.cpu.opcode = 0x6034
        self.assertEqual(
            "V: 0x12" + "00" * 14 + "34 I: 0x0abc DT: 0x05 ST: 0x06 PC: 0x204 OP: 0x6034 IN: LD V0, 0x34",
            self.debugger.debug(self.cpu, "LD V0, 0x34")
        )

    def test_debugger_debug_verbose_stack(self):
        self.assertTrue(self.debugger.debug(self.cpu, "???", verbose=True).endswith("\nStack: (Empty)"))
        self.machine.stack.push(0x202)
        self.machine.stack.push(0x30A)
        self.assertTrue(self.debugger.debug(self.cpu, "???", verbose=True).endswith("\nStack: 0x202 0x30a"))

    def test_debugger_output(self):
        out = io.StringIO()

        with redirect_stdout(out):
            self.debugger.output(self.cpu, "CLS")

        self.assertTrue(out.getvalue().endswith("IN: CLS\n"))

    def test_debugger_live_trace_from_cpu(self):
        # The CPU decides whether to trace when it is built
        self.debugger.set_live(True)
        machine = Machine(debugger=self.debugger)
        machine.load_program(b"\x61\x2A\x00\xE0")
        out = io.StringIO()

        with redirect_stdout(out):
            machine.step()
            machine.step()

        lines = out.getvalue().splitlines()
        self.assertEqual(2, len(lines))
        self.assertTrue(lines[0].endswith("PC: 0x200 OP: 0x612a IN: LD V1, 0x2a"))
        self.assertTrue(lines[1].endswith("PC: 0x202 OP: 0x00e0 IN: CLS"))

    def test_debugger_dump_memory_hex(self):
        dump = self.debugger.dump_memory(bytes(range(40)), start=0x200)
        lines = dump.splitlines()
        self.assertEqual(2, len(lines))
        self.assertEqual(
            "0200: 00 01 02 03 04 05 06 07  08 09 0a 0b 0c 0d 0e 0f  "
            "10 11 12 13 14 15 16 17  18 19 1a 1b 1c 1d 1e 1f",
            lines[0]
        )
        self.assertEqual("0220: 20 21 22 23 24 25 26 27", lines[1])

    def test_debugger_dump_memory_dec(self):
        self.assertEqual("0000: 000 010 255", self.debugger.dump_memory(b"\x00\x0A\xFF", decimal=True))

    def test_debugger_dump_memory_empty(self):
        self.assertEqual("", self.debugger.dump_memory(b""))
