"""Opcode decoding for the CHIP-8 instruction set.

Every 16-bit word decodes to exactly one ``Instruction``. The ``op`` field
names the variant; words that match none of the 35 documented patterns
decode to ``UNKNOWN`` so the interpreter can treat them as a no-op.
"""

from collections import namedtuple

from .config import PROGRAM_START


UNKNOWN = "UNKNOWN"

# decode table: (mask, pattern, op) - first match wins, so the exact
# 00E0 / 00EE entries must come before the 0nnn catch-all
OPCODES = [
    (0xFFFF, 0x00E0, "CLS"),
    (0xFFFF, 0x00EE, "RET"),
    (0xF000, 0x0000, "SYS"),

    (0xF000, 0x1000, "JP"),
    (0xF000, 0x2000, "CALL"),
    (0xF000, 0x3000, "SE_VX_NN"),
    (0xF000, 0x4000, "SNE_VX_NN"),
    (0xF00F, 0x5000, "SE_VX_VY"),
    (0xF000, 0x6000, "LD_VX_NN"),
    (0xF000, 0x7000, "ADD_VX_NN"),

    (0xF00F, 0x8000, "LD_VX_VY"),
    (0xF00F, 0x8001, "OR"),
    (0xF00F, 0x8002, "AND"),
    (0xF00F, 0x8003, "XOR"),
    (0xF00F, 0x8004, "ADD_VX_VY"),
    (0xF00F, 0x8005, "SUB_VX_VY"),
    (0xF00F, 0x8006, "SHR"),
    (0xF00F, 0x8007, "SUBN"),
    (0xF00F, 0x800E, "SHL"),

    (0xF00F, 0x9000, "SNE_VX_VY"),
    (0xF000, 0xA000, "LD_I"),
    (0xF000, 0xB000, "JP_V0"),
    (0xF000, 0xC000, "RND"),
    (0xF000, 0xD000, "DRW"),

    (0xF0FF, 0xE09E, "SKP"),
    (0xF0FF, 0xE0A1, "SKNP"),

    (0xF0FF, 0xF007, "LD_VX_DT"),
    (0xF0FF, 0xF00A, "LD_VX_K"),
    (0xF0FF, 0xF015, "LD_DT_VX"),
    (0xF0FF, 0xF018, "LD_ST_VX"),
    (0xF0FF, 0xF01E, "ADD_I_VX"),
    (0xF0FF, 0xF029, "LD_F_VX"),
    (0xF0FF, 0xF033, "LD_B_VX"),
    (0xF0FF, 0xF055, "LD_MEM_VX"),
    (0xF0FF, 0xF065, "LD_VX_MEM"),
]

OPS = tuple(op for _, _, op in OPCODES) + (UNKNOWN,)

# assembly text per variant, filled from the decoded fields
_MNEMONICS = {
    "CLS": "CLS",
    "RET": "RET",
    "SYS": "SYS {nnn:03X}",
    "JP": "JP {nnn:03X}",
    "CALL": "CALL {nnn:03X}",
    "SE_VX_NN": "SE V{x:X}, {nn:02X}",
    "SNE_VX_NN": "SNE V{x:X}, {nn:02X}",
    "SE_VX_VY": "SE V{x:X}, V{y:X}",
    "LD_VX_NN": "LD V{x:X}, {nn:02X}",
    "ADD_VX_NN": "ADD V{x:X}, {nn:02X}",
    "LD_VX_VY": "LD V{x:X}, V{y:X}",
    "OR": "OR V{x:X}, V{y:X}",
    "AND": "AND V{x:X}, V{y:X}",
    "XOR": "XOR V{x:X}, V{y:X}",
    "ADD_VX_VY": "ADD V{x:X}, V{y:X}",
    "SUB_VX_VY": "SUB V{x:X}, V{y:X}",
    "SHR": "SHR V{x:X}",
    "SUBN": "SUBN V{x:X}, V{y:X}",
    "SHL": "SHL V{x:X}",
    "SNE_VX_VY": "SNE V{x:X}, V{y:X}",
    "LD_I": "LD I, {nnn:03X}",
    "JP_V0": "JP V0, {nnn:03X}",
    "RND": "RND V{x:X}, {nn:02X}",
    "DRW": "DRW V{x:X}, V{y:X}, {n}",
    "SKP": "SKP V{x:X}",
    "SKNP": "SKNP V{x:X}",
    "LD_VX_DT": "LD V{x:X}, DT",
    "LD_VX_K": "LD V{x:X}, K",
    "LD_DT_VX": "LD DT, V{x:X}",
    "LD_ST_VX": "LD ST, V{x:X}",
    "ADD_I_VX": "ADD I, V{x:X}",
    "LD_F_VX": "LD F, V{x:X}",
    "LD_B_VX": "LD B, V{x:X}",
    "LD_MEM_VX": "LD [I], V{x:X}",
    "LD_VX_MEM": "LD V{x:X}, [I]",
    UNKNOWN: "DW {opcode:04X}",
}


class Instruction(namedtuple("Instruction", "op opcode x y n nn nnn")):
    __slots__ = ()

    def mnemonic(self):
        return _MNEMONICS[self.op].format(**self._asdict())

    __str__ = mnemonic


def decode(opcode):
    """Split a 16-bit word into its fields and name the instruction."""
    opcode &= 0xFFFF
    op = UNKNOWN
    for mask, pattern, name in OPCODES:
        if (opcode & mask) == pattern:
            op = name
            break
    return Instruction(
        op,
        opcode,
        (opcode >> 8) & 0xF,
        (opcode >> 4) & 0xF,
        opcode & 0xF,
        opcode & 0xFF,
        opcode & 0xFFF,
    )


def disassemble(data, origin=PROGRAM_START):
    """Yield (address, opcode, instruction) for each whole word in data."""
    for offset in range(0, len(data) - 1, 2):
        opcode = (data[offset] << 8) | data[offset + 1]
        yield origin + offset, opcode, decode(opcode)
