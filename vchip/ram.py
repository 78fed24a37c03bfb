#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, as well
as swapping out the whole memory image at once.

Every access is range-checked.  Reaching past the end of memory is always an
error, so nothing here ever wraps around or quietly truncates a block.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_size = mem_size

    def read(self, location):
        self.check_range(location, 1)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_range(location, size)
        return self.mem[location:location + size]

    def read_all(self):
        return self.mem.toreadonly()

    def write(self, location, byte):
        self.check_range(location, 1)

        if not 0 <= byte <= 0xFF:
            raise RAMError("Value 0x{:x} does not fit in a byte".format(byte))

        self.mem[location] = byte

    def write_block(self, location, block, size=None):
        # Lists of ints are accepted too
        try:
            block = bytes(block)
        except ValueError:
            raise RAMError("Block contains a value that does not fit in a byte") from None

        block_size = len(block)

        if size is not None and size != block_size:
            raise RAMError("Block length {} does not match requested size {}".format(block_size, size))

        self.check_range(location, block_size)
        self.mem[location:location + block_size] = block

    def replace(self, image):
        if len(image) != self.mem_size:
            raise RAMError("Memory image must be exactly {} bytes, got {}".format(self.mem_size, len(image)))

        self.mem[:] = image

    def check_range(self, location, size):
        # Negative values are rejected too, since slicing would otherwise count back from the end
        if location < 0 or size < 0 or location >= self.mem_size or location + size > self.mem_size:
            raise RAMError("Memory access out of range: 0x{:x} (+{})".format(location, size))

    def clear(self):
        # Zero in place rather than reallocating, so views handed out earlier stay valid
        self.mem[:] = bytes(self.mem_size)
