#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each call
to step() performs exactly one fetch-decode-execute cycle.  Pacing, timer
cadence and display refresh are left to the host, which drives step() and
decrement_timers() at whatever rates it likes.

Instructions are looked up in a dictionary keyed on the opcode, masked down to
the bits that identify it.  Any opcode that isn't in the table is reported as
an InvalidOpcodeError, after the program counter has moved past it, so a host
may choose to carry on from the next instruction.

Every memory and stack access is checked before anything is changed, so an
instruction that raises leaves registers, memory and the display as they were.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from .constants import FONT_GLYPH_SIZE, FONT_LOCATION, NUM_REGISTERS, PROGRAM_LOCATION

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
REG_BITMASK = 0xFFFF  # PC and I are 16-bit registers
I_LIMIT = 0xFFF  # Highest address I can point to before FX1E reports an overflow


class CPUError(Exception):
    pass


class InvalidOpcodeError(CPUError):
    def __init__(self, opcode, address):
        super().__init__("Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction.".format(opcode, address))
        self.opcode = opcode
        self.address = address


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, debugger, rng=None, quirks=False, shift_quirks=None,
                 jump_quirks=None, load_quirks=None):

        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.rng = Random() if rng is None else rng
        self.font_location = FONT_LOCATION

        """
        Quirks
        ------

        - Shift quirks: 8xy6/8xyE shift Vx in place, rather than shifting Vy into Vx.
        - Jump quirks : Bnnn jumps to nnn + Vx, rather than nnn + V0.
        - Load quirks : Fx55/Fx65 leave I alone, rather than moving it past the last register transferred.

        Each follows the master 'quirks' switch unless set individually.
        """

        self.shift_quirks = quirks if shift_quirks is None else shift_quirks
        self.jump_quirks = quirks if jump_quirks is None else jump_quirks
        self.load_quirks = quirks if load_quirks is None else load_quirks

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0x9: self._5nnn_8nnn_9nnn,  # Alias for bitmask 0xF00F
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            0xF: self._Ennn_Fnnn,  # Alias for bitmask 0xF0FF
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x00E0: self._00E0,
            0x00EE: self._00EE,
            # Instructions beginning with nibble 0x5/0x8/0x9, bitmask 0xF00F
            0x5000: self._5xy0,
            0x8000: self._8xy0,
            0x8001: self._8xy1,
            0x8002: self._8xy2,
            0x8003: self._8xy3,
            0x8004: self._8xy4,
            0x8005: self._8xy5,
            0x8006: self._8xy6,
            0x8007: self._8xy7,
            0x800E: self._8xyE,
            0x9000: self._9xy0,
            # Instructions beginning with nibble 0xE/0xF, bitmask 0xF0FF
            0xE09E: self._Ex9E,
            0xE0A1: self._ExA1,
            0xF007: self._Fx07,
            0xF00A: self._Fx0A,
            0xF015: self._Fx15,
            0xF018: self._Fx18,
            0xF01E: self._Fx1E,
            0xF029: self._Fx29,
            0xF033: self._Fx33,
            0xF055: self._Fx55,
            0xF065: self._Fx65
        }

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so this should be fast when updated
        self.i = 0  # Index register

        # Initialise timers
        self.dt = 0  # Delay timer integer (byte)
        self.ds = 0  # Sound timer integer (byte)

        # Initialise program counter and current opcode
        self.pc = PROGRAM_LOCATION
        self.debug_pc = 0
        self.opcode = 0

        # Input-related vars.  Holds the register waiting on Fx0A, or None if not waiting.
        self.awaiting_key = None

    def set_quirks(self, enabled):
        self.shift_quirks = enabled
        self.jump_quirks = enabled
        self.load_quirks = enabled

    def reset(self):
        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0
        self.dt = 0
        self.ds = 0
        self.pc = PROGRAM_LOCATION
        self.debug_pc = 0
        self.opcode = 0
        self.awaiting_key = None
        self.font_location = FONT_LOCATION

    def step(self):
        if self.awaiting_key is not None:
            # Fx0A is still waiting, so don't fetch anything new until a key has been released
            self._poll_key_release()
            return

        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch (and technically before decode), but before execute
        self.decode_exec()

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def _call_masked_instruction(self, masked_opcode):
        instruction = self.instructions.get(masked_opcode)

        if instruction is None:
            self._opcode_unsupported()

        instruction()

    def decode_exec(self):
        self._call_masked_instruction((0xF000 & self.opcode) >> 12)

    def decrement_timers(self):
        # Floor at zero, never wrap
        if self.dt > 0:
            self.dt -= 1

        if self.ds > 0:
            self.ds -= 1

    def is_awaiting_key(self):
        return self.awaiting_key is not None

    def inc_pc(self):
        self.pc = (self.pc + 2) & REG_BITMASK

    def dec_pc(self):
        # Only used to hold the program counter on a key wait
        self.pc = (self.pc - 2) & REG_BITMASK

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def category(self):
        return (self.opcode & 0xF000) >> 12

    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def _opcode_unsupported(self):
        raise InvalidOpcodeError(self.opcode, self.debug_pc) from None

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _0nnn(self):
        opcode = self.opcode

        if opcode < 0x10:
            # Let's use opcodes 0x0 - 0xF internally for indexing, since they're not real instructions
            self._opcode_unsupported()

        self._call_masked_instruction(opcode)

    def _5nnn_8nnn_9nnn(self):
        self._call_masked_instruction(self.opcode & 0xF00F)

    def _Ennn_Fnnn(self):
        self._call_masked_instruction(self.opcode & 0xF0FF)

    def _00E0(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_debug:
            self.debug("RET")

        self.pc = self.stack.pop()

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(self.addr))

        self.stack.push(self.pc)
        self.pc = self.addr

    def _post_skip(self):
        self.inc_pc()

    def _3xkk(self):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] == self.byte:
            self._post_skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] == self.v[self.vy]:
            self._post_skip()

    def _6xkk(self):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # Wraps, and leaves Vf alone
        byte += self.v[vx]
        self.v[vx] = byte & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        self.v[self.vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes VF is specified in the
        # parameters.
        self.v[0xF] = int(val >= 0)

    def _8xy5(self):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vx] - self.v[self.vy])

    def _debug_8xy6_8xyE(self, direction):
        self.debug(
            "{} V{:01x}".format(direction, self.vx) if self.shift_quirks else
            "{} V{:01x}, V{:01x}".format(direction, self.vx, self.vy)
        )

    def _8xy6(self):  # SHR Vx {, Vy}
        if self.live_debug:
            self._debug_8xy6_8xyE("SHR")

        val = self.v[self.vx if self.shift_quirks else self.vy]
        self.v[self.vx] = val >> 1  # The result is put in Vx either way
        self.v[0xF] = val & 1  # The whole byte gets set just for the flag

    def _8xy7(self):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(self.vx, self.vy))

        self._post_8xy5_8xy7(self.v[self.vy] - self.v[self.vx])

    def _8xyE(self):  # SHL Vx {, Vy}
        if self.live_debug:
            self._debug_8xy6_8xyE("SHL")

        val = self.v[self.vx if self.shift_quirks else self.vy]
        self.v[self.vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] != self.v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        # Nothing is masked here.  Landing past the end of RAM is caught on the next fetch.
        vr = self.vx if self.jump_quirks else 0

        if self.live_debug:
            self.debug("JP V{:01x}, 0x{:03x}".format(vr, self.addr))

        self.pc = self.v[vr] + self.addr

    def _Cxkk(self):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        height = self.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        # Read the whole sprite first, so a bad index register fails before any pixel changes
        sprite = self.ram.read_block(self.i, height) if height else ()

        # The sprite's start always wraps, but anything past the bottom-right edges is trimmed
        vid_width, vid_height = self.framebuffer.get_vid_size()
        vx_pos = self.v[self.vx] % vid_width
        vy_pos = self.v[self.vy] % vid_height
        collided = False

        for y, spr_data in enumerate(sprite):
            scr_y = y + vy_pos

            if scr_y >= vid_height:
                break

            for x in range(8):
                if spr_data & (0x80 >> x):
                    if self.framebuffer.xor_pixel(x + vx_pos, scr_y):
                        # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                        collided = True

        self.v[0xF] = int(collided)

    def _Ex9E(self):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(self.vx))

        if self.keypad.is_key_down(self.v[self.vx]):
            self._post_skip()

    def _ExA1(self):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(self.vx))

        if not self.keypad.is_key_down(self.v[self.vx]):
            self._post_skip()

    def _Fx07(self):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.dt

    def _Fx0A(self):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(self.vx))

        # This opcode waits for a key release, but the timers and display still need servicing by the host, so control
        # goes straight back.  step() keeps polling until a key comes up.
        key = self.keypad.get_released()

        if key is None:
            self.awaiting_key = self.vx
            self.dec_pc()  # Hold on this instruction while waiting
        else:
            self.v[self.vx] = key

    def _poll_key_release(self):
        self.debug_pc = self.pc
        key = self.keypad.get_released()

        if key is None:
            return

        self.v[self.awaiting_key] = key
        self.awaiting_key = None
        self.inc_pc()

    def _Fx15(self):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(self.vx))

        self.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(self.vx))

        self.ds = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(self.vx))

        val = self.i + self.v[self.vx]
        overflow = self.i <= I_LIMIT < val
        self.i = val & REG_BITMASK
        self.v[0xF] = int(overflow)

    def _Fx29(self):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(self.vx))

        self.i = (self.font_location + FONT_GLYPH_SIZE * self.v[self.vx]) & REG_BITMASK

    def _Fx33(self):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        self.ram.write_block(self.i, bytes((
            val // 100,        # Most-significant digit
            (val // 10) % 10,  # Middle digit
            val % 10           # Least-significant digit
        )))

    def _post_Fx55_Fx65(self):
        if not self.load_quirks:
            self.i = (self.i + self.vx + 1) & REG_BITMASK

    def _Fx55(self):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(self.vx))

        # Ensure with +1s that the final register is copied
        self.ram.write_block(self.i, self.v[:self.vx + 1])
        self._post_Fx55_Fx65()

    def _Fx65(self):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(self.vx))

        vx = self.vx
        self.v[:vx + 1] = self.ram.read_block(self.i, vx + 1)
        self._post_Fx55_Fx65()
