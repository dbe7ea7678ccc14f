import numbers


class Chip8Error(Exception):
    """Base class for everything the interpreter raises."""


class RomTooLarge(Chip8Error):
    def __init__(self, size, limit):
        super().__init__("ROM is %d bytes, only %d fit above 0x200" % (size, limit))
        self.size = size
        self.limit = limit


class OutOfRange(Chip8Error, IndexError):
    """An address, key or stack slot outside the machine's fixed layout."""

    def __init__(self, what, value):
        shown = "0x%X" % value if isinstance(value, numbers.Integral) else repr(value)
        super().__init__("%s out of range: %s" % (what, shown))
        self.what = what
        self.value = value


class StackOverflow(OutOfRange):
    def __init__(self, pc):
        super().__init__("Stack overflow on CALL at PC", pc)


class StackUnderflow(OutOfRange):
    def __init__(self, pc):
        super().__init__("Stack underflow on RET at PC", pc)
