# Host-side helpers that don't need a display: the keyboard layout, turning the
# framebuffer into pixels, and driving step() from a host clock.
# window.py wraps these in a pyglet Window.

import numpy as np

from .config import CPU_HZ, SCALE
from .errors import Chip8Error

# physical key (pyglet.window.key name) -> CHIP-8 keypad
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
KEY_LAYOUT = {
    "_1": 0x1, "_2": 0x2, "_3": 0x3, "_4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


def render_rgba(screen, scale):
    """Turn a (HEIGHT, WIDTH) grid of 0/1 cells into upscaled RGBA bytes.

    Rows are flipped because pyglet puts y=0 at the bottom of the window.
    """
    small = np.zeros((screen.shape[0], screen.shape[1], 4), dtype=np.uint8)
    small[..., :3] = (screen[::-1] * 255)[..., None]
    small[..., 3] = 255
    if scale != 1:
        small = np.repeat(np.repeat(small, scale, axis=0), scale, axis=1)
    return small.tobytes()


class Runner:
    """Runs a Chip8 at cpu_hz from whatever clock the host has.

    Each ``tick(dt)`` executes the steps dt covers, capped at a tenth of a
    second's worth so a stalled host doesn't burst thousands of instructions.
    An emulation error halts the runner instead of propagating into the
    host's event loop.
    """

    def __init__(self, chip8, cpu_hz=CPU_HZ, scale=SCALE):
        if cpu_hz <= 0:
            raise ValueError("cpu_hz must be positive, got %r" % cpu_hz)
        self.chip8 = chip8
        self.cpu_hz = cpu_hz
        self.scale = scale
        self.max_steps = max(1, cpu_hz // 10)
        self.halted = False
        self.error = None

    def steps_for(self, dt):
        return min(self.max_steps, max(1, int(round(dt * self.cpu_hz))))

    def frame(self):
        return render_rgba(self.chip8.screen(), self.scale)

    def tick(self, dt):
        """Returns fresh RGBA bytes when the screen changed, else None."""
        if self.halted:
            return None
        try:
            for _ in range(self.steps_for(dt)):
                self.chip8.step()
        except Chip8Error as e:
            print("Emulation error:", e)
            self.error = e
            self.halted = True
            return None

        if self.chip8.consume_redraw_flag():
            return self.frame()
        return None
