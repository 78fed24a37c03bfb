#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from vchip.ram import RAM, RAMError


class TestRAM(unittest.TestCase):
    def setUp(self):
        self.ram = RAM()
        self.ram.resize(5)

    def test_ram_init(self):
        ram = RAM()
        self.assertEqual("", ram.mem.hex())

    def test_ram_init_sized(self):
        ram = RAM(0x1000)
        self.assertEqual(0x1000, len(ram.read_all()))

    def test_ram_resize(self):
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_write(self):
        self.ram.write(1, 255)
        self.assertEqual("00ff000000", self.ram.mem.hex())
        self.assertEqual(255, self.ram.read(1))

    def test_ram_write_block(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.ram.write_block(4, bytearray(b"\xFF"))
        self.assertEqual("00fdfe00ff", self.ram.mem.hex())

    def test_ram_write_block_sized(self):
        self.ram.write_block(0, b"\x01\x02", 2)
        self.assertEqual("0102000000", self.ram.mem.hex())

    def test_ram_write_block_list(self):
        self.ram.write_block(3, [0x00, 0xE0])
        self.assertEqual("00000000e0", self.ram.mem.hex())

    def test_ram_write_block_list_value_too_large(self):
        self.assertRaises(RAMError, self.ram.write_block, 0, [0x01, 0x100])
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_write_block_size_mismatch(self):
        self.assertRaises(RAMError, self.ram.write_block, 0, b"\x01\x02", 3)
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_read_block(self):
        self.ram.write_block(2, b"\xAB\xCD\xEF")
        self.assertEqual("abcdef", self.ram.read_block(2, 3).hex())
        self.assertEqual("ab", self.ram.read_block(2).hex())

    def test_ram_byte_overflow(self):
        self.assertRaises(RAMError, self.ram.write, 5, 255)
        self.assertRaises(RAMError, self.ram.read, 5)

    def test_ram_negative_location(self):
        self.assertRaises(RAMError, self.ram.read, -1)
        self.assertRaises(RAMError, self.ram.write, -1, 0)

    def test_ram_value_too_large(self):
        self.assertRaises(RAMError, self.ram.write, 0, 0x100)

    def test_ram_block_overflow(self):
        self.assertRaises(RAMError, self.ram.write_block, 4, bytearray(b"\xFE\xFF"))
        self.assertRaises(RAMError, self.ram.read_block, 4, 2)
        self.assertRaises(RAMError, self.ram.read_block, 5, 0)
        # Nothing should have been written by the failed block write
        self.assertEqual("0000000000", self.ram.mem.hex())

    def test_ram_read_all_is_read_only(self):
        view = self.ram.read_all()
        self.assertTrue(view.readonly)
        self.ram.write(0, 7)
        self.assertEqual(7, view[0])

    def test_ram_replace(self):
        self.ram.replace(b"\x01\x02\x03\x04\x05")
        self.assertEqual("0102030405", self.ram.mem.hex())

    def test_ram_replace_wrong_size(self):
        self.assertRaises(RAMError, self.ram.replace, b"\x01\x02")
        self.assertRaises(RAMError, self.ram.replace, b"\x00" * 6)

    def test_ram_clear(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.assertEqual("00fdfe0000", self.ram.mem.hex())
        self.ram.clear()
        self.assertEqual("0000000000", self.ram.mem.hex())
