#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from vchip import main, StartupError
from vchip.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP
from virtualchip import parse_args


class TestLauncher(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.filename = os.path.join(self.tmp_dir.name, "loop.ch8")

        with open(self.filename, "wb") as f:
            f.write(b"\x60\x05\x12\x02")

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_parse_args_defaults(self):
        args = vars(parse_args(["game.ch8"]))
        self.assertEqual("game.ch8", args["filename"])
        self.assertEqual(DEFAULT_CLOCK_SPEED, args["clock_speed"])
        self.assertEqual("pygame", args["renderer"])
        self.assertEqual(DEFAULT_KEYMAP, args["keymap"])
        self.assertEqual(0, args["quirks"])
        self.assertIsNone(args["shift_quirks"])
        self.assertIsNone(args["jump_quirks"])
        self.assertIsNone(args["load_quirks"])
        self.assertFalse(args["debug"])

    def test_parse_args_quirks(self):
        args = vars(parse_args(["game.ch8", "-q", "1", "--load_quirks", "0", "--seed", "5"]))
        self.assertEqual(1, args["quirks"])
        self.assertEqual(0, args["load_quirks"])
        self.assertEqual(5, args["seed"])

    def test_main_headless(self):
        args = vars(parse_args([self.filename, "-r", "null", "-c", "0", "--max_cycles", "20"]))
        out = io.StringIO()

        with redirect_stdout(out):
            main(args)

        self.assertTrue(out.getvalue().startswith("VirtualChip V"))

    def test_main_debug_trace(self):
        args = vars(parse_args([self.filename, "-r", "null", "-c", "0", "--max_cycles", "2", "-d"]))
        out = io.StringIO()

        with redirect_stdout(out):
            main(args)

        lines = out.getvalue().splitlines()
        self.assertTrue(lines[1].endswith("IN: LD V0, 0x05"))
        self.assertTrue(lines[2].endswith("IN: JP 0x202"))

    def test_main_missing_rom(self):
        args = vars(parse_args([os.path.join(self.tmp_dir.name, "missing.ch8"), "-r", "null"]))

        with redirect_stdout(io.StringIO()):
            self.assertRaises(FileNotFoundError, main, args)

    def test_startup_error_is_exception(self):
        self.assertTrue(issubclass(StartupError, Exception))
