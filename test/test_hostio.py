#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from vchip.hostio import Loader, LoaderError


class TestLoader(unittest.TestCase):
    def setUp(self):
        self.loader = Loader()
        self.tmp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp_dir.cleanup()

    def _write_rom(self, data):
        filename = os.path.join(self.tmp_dir.name, "test.ch8")

        with open(filename, "wb") as f:
            f.write(data)

        return filename

    def test_loader_load_file_present(self):
        filename = self._write_rom(b"\x00\xE0\x12\x02")
        self.assertEqual(b"\x00\xE0\x12\x02", self.loader.load_binary(filename))
        self.assertEqual(b"\x00\xE0\x12\x02", self.loader.load_rom(filename))

    def test_loader_load_file_missing(self):
        self.assertRaises(FileNotFoundError, self.loader.load_binary, "NoFile.ch8")

    def test_loader_rom_fits_exactly(self):
        filename = self._write_rom(b"\xFF" * (0x1000 - 0x200))
        self.assertEqual(0xE00, len(self.loader.load_rom(filename)))

    def test_loader_rom_too_large(self):
        filename = self._write_rom(b"\xFF" * (0x1000 - 0x200 + 1))
        self.assertRaises(LoaderError, self.loader.load_rom, filename)
