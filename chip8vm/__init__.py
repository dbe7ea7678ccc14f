"""CHIP-8 virtual machine: interpreter core plus an optional pyglet host."""

from .cpu import Chip8
from .errors import Chip8Error, OutOfRange, RomTooLarge, StackOverflow, StackUnderflow
from .instructions import Instruction, decode, disassemble

__all__ = [
    "Chip8",
    "Chip8Error",
    "Instruction",
    "OutOfRange",
    "RomTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "decode",
    "disassemble",
]
