import random

import pytest

from chip8vm import Chip8


def rom(*words):
    return b"".join(w.to_bytes(2, "big") for w in words)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def getrandbits(self, bits):
        return self.value & ((1 << bits) - 1)


@pytest.fixture
def chip8():
    return Chip8(rng=random.Random(0))


@pytest.fixture
def run_program():
    """Load words at 0x200 into a fresh interpreter and step through them."""
    def _run(*words, steps=None, **options):
        options.setdefault("rng", random.Random(0))
        c = Chip8(**options)
        c.load(rom(*words))
        for _ in range(len(words) if steps is None else steps):
            c.step()
        return c
    return _run
