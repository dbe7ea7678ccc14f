# CHIP8 Virtual Machine Steps:
# Input - store key input states and check these per cycle.
# Output - 64x32 display(array of pixels are either in the on or off state(0 || 1)).
# CPU - CowGods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - can hold up to 4096 bytes which includes: the fonts and inputted ROM.
#----------------------------------------------------------------------------------------------
# Registers live in a bytearray of 16 zeros, the two timers are plain ints that we
# decrement per cycle, and the stack is a fixed 16 element array with a pointer.
# Nothing in here knows about windows or sound - see window.py for the pyglet host.

import numbers
import random

import numpy as np

from .config import (
    ADDRESS_MASK,
    FONT_GLYPH_SIZE,
    FONTSET,
    HEIGHT,
    MAX_ROM_SIZE,
    MEMORY_SIZE,
    NUM_KEYS,
    NUM_REGISTERS,
    PROGRAM_START,
    SHIFT_FLAG_BIT,
    SHIFT_FLAG_MODES,
    STACK_DEPTH,
    WIDTH,
)
from .errors import OutOfRange, RomTooLarge, StackOverflow, StackUnderflow
from .instructions import OPS, decode


class Chip8:
    """The interpreter: machine state plus the fetch-decode-execute step.

    Options:
        shift_flag: ``"bit"`` sets VF to the bit shifted out by 8xy6/8xyE,
            ``"nibble"`` reproduces the old ``Vx & 0x0F`` / ``(Vx & 0xF0) >> 1``.
        strict: raise ``OutOfRange`` for addresses past 0xFFF instead of
            wrapping them to 12 bits.
        timers_per_step: decrement both timers at the end of every ``step()``.
            Turn off when the host drives ``tick_timers()`` from its own clock.
        logs_on / log: per-instance trace switch and the callable it writes to.
        rng: anything with ``getrandbits`` - used by Cxnn.
    """

    def __init__(self, shift_flag=SHIFT_FLAG_BIT, strict=False, timers_per_step=True,
                 logs_on=False, log=print, rng=None):
        if shift_flag not in SHIFT_FLAG_MODES:
            raise ValueError("shift_flag must be one of %s, got %r" % (SHIFT_FLAG_MODES, shift_flag))
        self.shift_flag = shift_flag
        self.strict = strict
        self.timers_per_step = timers_per_step
        self.logs_on = logs_on
        self._log = log
        self.rng = rng if rng is not None else random.Random()

        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.V = bytearray(NUM_REGISTERS)
        self.stack = np.zeros(STACK_DEPTH, dtype=np.uint16)
        self.vram = bytearray(WIDTH * HEIGHT)
        self.keys = np.zeros(NUM_KEYS, dtype=np.uint8)

        # Prepare opcode function map
        self.setup_funcmap()
        self.initialize()

    def log(self, *args):
        if self.logs_on:
            self._log(*args)

    # ---- Init ----
    def initialize(self):
        self.memory[:] = bytes(MEMORY_SIZE)
        self.memory[:len(FONTSET)] = bytes(FONTSET)
        self.V[:] = bytes(NUM_REGISTERS)
        self.I = 0
        self.pc = PROGRAM_START
        self.stack[:] = 0
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.vram[:] = bytes(WIDTH * HEIGHT)
        self.keys[:] = 0
        self.should_draw = False
        self.cycles = 0
        self.unknown_opcodes = 0

    # ---- Load ROM ----
    def load(self, data):
        data = bytes(data)
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLarge(len(data), MAX_ROM_SIZE)
        self.memory[PROGRAM_START:PROGRAM_START + len(data)] = data
        self.log("Loaded %d bytes at 0x%03X" % (len(data), PROGRAM_START))

    def load_rom(self, path):
        self.log("Loading ROM: %s" % path)
        with open(path, "rb") as f:
            self.load(f.read())

    # ---- Host side ----
    @property
    def framebuffer(self):
        """Read-only view of the 64x32 cells, row-major."""
        view = np.frombuffer(self.vram, dtype=np.uint8)
        view.flags.writeable = False
        return view

    def screen(self):
        return self.framebuffer.reshape(HEIGHT, WIDTH)

    def consume_redraw_flag(self):
        flag = self.should_draw
        self.should_draw = False
        return flag

    def set_key(self, index):
        self.keys[self._key_index(index)] = 1

    def release_key(self, index):
        self.keys[self._key_index(index)] = 0

    def _key_index(self, index):
        if not isinstance(index, numbers.Integral) or not 0 <= index < NUM_KEYS:
            raise OutOfRange("Key", index)
        return index

    @property
    def sound_active(self):
        return self.sound_timer > 0

    # ---- timers ----
    def tick_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # ---- Addressing ----
    def _addr(self, address):
        if address > ADDRESS_MASK:
            if self.strict:
                raise OutOfRange("Address", address)
            return address & ADDRESS_MASK
        return address

    def _check_span(self, start, count):
        # strict mode: fail before the first write, not halfway through
        if self.strict and count > 0:
            self._addr(start + count - 1)

    def _next(self, skip=False):
        self.pc = (self.pc + (4 if skip else 2)) & ADDRESS_MASK

    # ---- Cycle ----
    def step(self):
        # Fetch opcode
        opcode = (self.memory[self._addr(self.pc)] << 8) | self.memory[self._addr(self.pc + 1)]
        ins = decode(opcode)
        if self.logs_on:
            self.log("%03X: %s" % (self.pc, ins))

        self.funcmap[ins.op](ins)

        if self.timers_per_step:
            self.tick_timers()
        self.cycles += 1

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {op: getattr(self, "op_" + op) for op in OPS}

    # ---- Opcode Handlers ----

    # 0nnn - SYS call, ignored on modern interpreters
    def op_SYS(self, ins):
        self.log("SYS call ignored (0nnn)")
        self._next()

    def op_UNKNOWN(self, ins):
        self.unknown_opcodes += 1
        self.log("Unknown opcode: %04X" % ins.opcode)
        self._next()

    # 00E0 - CLS
    def op_CLS(self, ins):
        self.vram[:] = bytes(WIDTH * HEIGHT)
        self.should_draw = True
        self._next()

    # 00EE - RET
    def op_RET(self, ins):
        if self.sp == 0:
            raise StackUnderflow(self.pc)
        self.sp -= 1
        self.pc = (int(self.stack[self.sp]) + 2) & ADDRESS_MASK

    # 1nnn - Jump to address NNN
    def op_JP(self, ins):
        self.pc = ins.nnn

    # 2nnn - Call subroutine at NNN
    def op_CALL(self, ins):
        if self.sp >= STACK_DEPTH:
            raise StackOverflow(self.pc)
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = ins.nnn

    # 3xkk - Skip next instruction if Vx == kk
    def op_SE_VX_NN(self, ins):
        self._next(self.V[ins.x] == ins.nn)

    # 4xkk - Skip next instruction if Vx != kk
    def op_SNE_VX_NN(self, ins):
        self._next(self.V[ins.x] != ins.nn)

    # 5xy0 - Skip next instruction if Vx == Vy
    def op_SE_VX_VY(self, ins):
        self._next(self.V[ins.x] == self.V[ins.y])

    # 6xkk - Set Vx = kk
    def op_LD_VX_NN(self, ins):
        self.V[ins.x] = ins.nn
        self._next()

    # 7xkk - Add immediate, no carry
    def op_ADD_VX_NN(self, ins):
        self.V[ins.x] = (self.V[ins.x] + ins.nn) & 0xFF
        self._next()

    # 8xy0..8xyE - math and logic between two registers.
    # VF is always written last so the flag wins when x is F.
    def op_LD_VX_VY(self, ins):
        self.V[ins.x] = self.V[ins.y]
        self._next()

    def op_OR(self, ins):
        self.V[ins.x] |= self.V[ins.y]
        self._next()

    def op_AND(self, ins):
        self.V[ins.x] &= self.V[ins.y]
        self._next()

    def op_XOR(self, ins):
        self.V[ins.x] ^= self.V[ins.y]
        self._next()

    def op_ADD_VX_VY(self, ins):
        total = self.V[ins.x] + self.V[ins.y]
        self.V[ins.x] = total & 0xFF
        self.V[0xF] = 1 if total > 0xFF else 0
        self._next()

    def op_SUB_VX_VY(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vx - vy) & 0xFF
        self.V[0xF] = 1 if vx < vy else 0
        self._next()

    def op_SHR(self, ins):
        vx = self.V[ins.x]
        self.V[ins.x] = vx >> 1
        self.V[0xF] = vx & 0x1 if self.shift_flag == SHIFT_FLAG_BIT else vx & 0x0F
        self._next()

    def op_SUBN(self, ins):
        vx, vy = self.V[ins.x], self.V[ins.y]
        self.V[ins.x] = (vy - vx) & 0xFF
        self.V[0xF] = 0 if vx > vy else 1
        self._next()

    def op_SHL(self, ins):
        vx = self.V[ins.x]
        self.V[ins.x] = (vx << 1) & 0xFF
        self.V[0xF] = vx >> 7 if self.shift_flag == SHIFT_FLAG_BIT else (vx & 0xF0) >> 1
        self._next()

    # 9xy0 - Skip next instruction if Vx != Vy
    def op_SNE_VX_VY(self, ins):
        self._next(self.V[ins.x] != self.V[ins.y])

    # Annn - Set I = NNN
    def op_LD_I(self, ins):
        self.I = ins.nnn
        self._next()

    # Bnnn - Jump to address NNN + V0
    def op_JP_V0(self, ins):
        self.pc = (self.V[0] + ins.nnn) & ADDRESS_MASK

    # Cxkk - RND Vx, byte
    def op_RND(self, ins):
        self.V[ins.x] = self.rng.getrandbits(8) & ins.nn
        self._next()

    # Dxyn - DRW Vx, Vy, nibble
    def op_DRW(self, ins):
        px = self.V[ins.x]
        py = self.V[ins.y]
        self._check_span(self.I, ins.n)
        buf = self.vram
        collision = False
        for row in range(ins.n):
            sprite = self.memory[self._addr(self.I + row)]
            if sprite == 0:
                continue
            base = ((py + row) % HEIGHT) * WIDTH
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    index = base + (px + bit) % WIDTH
                    if buf[index]:
                        collision = True
                    buf[index] ^= 1
        self.V[0xF] = 1 if collision else 0
        self.should_draw = True
        self._next()

    # Ex9E - SKP, the key stays held
    def op_SKP(self, ins):
        self._next(bool(self.keys[self.V[ins.x] & 0xF]))

    # ExA1 - SKNP, a pressed key is consumed
    def op_SKNP(self, ins):
        key = self.V[ins.x] & 0xF
        if self.keys[key]:
            self.keys[key] = 0
            self._next()
        else:
            self._next(True)

    # Fx07..Fx65 - timers, memory, I, and key input
    def op_LD_VX_DT(self, ins):
        self.V[ins.x] = self.delay_timer
        self._next()

    # Fx0A - wait for a key: stall on this instruction until one is down
    def op_LD_VX_K(self, ins):
        pressed = np.flatnonzero(self.keys)
        if len(pressed) == 0:
            return
        key = int(pressed[0])
        self.V[ins.x] = key
        self.keys[key] = 0
        self._next()

    def op_LD_DT_VX(self, ins):
        self.delay_timer = self.V[ins.x]
        self._next()

    def op_LD_ST_VX(self, ins):
        self.sound_timer = self.V[ins.x]
        self._next()

    def op_ADD_I_VX(self, ins):
        self.I = (self.I + self.V[ins.x]) & 0xFFFF
        self._next()

    def op_LD_F_VX(self, ins):
        self.I = self.V[ins.x] * FONT_GLYPH_SIZE
        self._next()

    def op_LD_B_VX(self, ins):
        v = self.V[ins.x]
        self._check_span(self.I, 3)
        self.memory[self._addr(self.I)] = v // 100
        self.memory[self._addr(self.I + 1)] = (v // 10) % 10
        self.memory[self._addr(self.I + 2)] = v % 10
        self._next()

    def op_LD_MEM_VX(self, ins):
        self._check_span(self.I, ins.x + 1)
        for i in range(ins.x + 1):
            self.memory[self._addr(self.I + i)] = self.V[i]
        self._next()

    def op_LD_VX_MEM(self, ins):
        self._check_span(self.I, ins.x + 1)
        for i in range(ins.x + 1):
            self.V[i] = self.memory[self._addr(self.I + i)]
        self._next()
