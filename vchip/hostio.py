#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into RAM.  A ROM is nothing but
raw big-endian instructions, with no header to check.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEMORY_SIZE, PROGRAM_LOCATION


class LoaderError(Exception):
    pass


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_rom(self, filename, location=PROGRAM_LOCATION):
        data = self.load_binary(filename)

        if len(data) > MEMORY_SIZE - location:
            raise LoaderError(
                "ROM is {} bytes, but only {} bytes are free above 0x{:03x}".format(
                    len(data), MEMORY_SIZE - location, location
                )
            )

        return data
