# CHIP-8 machine layout - CowGods CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
# Memory - 4096 bytes which includes: the fonts (0x000-0x04F) and the inputted ROM (0x200 onward).
#----------------------------------------------------------------------------------------------

# ---- Machine ----
MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584
ADDRESS_MASK = 0xFFF

NUM_REGISTERS = 16
STACK_DEPTH = 16
NUM_KEYS = 16

WIDTH, HEIGHT = 64, 32

# ---- Host defaults ----
SCALE = 10
CPU_HZ = 600
TIMER_HZ = 60

# ---- Shift flag modes (8xy6 / 8xyE) ----
SHIFT_FLAG_BIT = "bit"          # VF = bit shifted out
SHIFT_FLAG_NIBBLE = "nibble"    # VF = Vx & 0x0F / (Vx & 0xF0) >> 1
SHIFT_FLAG_MODES = (SHIFT_FLAG_BIT, SHIFT_FLAG_NIBBLE)

# set fonts (binary pixel patterns)
FONT_GLYPH_SIZE = 5
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes
