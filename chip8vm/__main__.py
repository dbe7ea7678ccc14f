# ---- Entry point ----
import argparse
import sys

from .config import CPU_HZ, SCALE, SHIFT_FLAG_BIT, SHIFT_FLAG_MODES, TIMER_HZ
from .cpu import Chip8
from .errors import Chip8Error
from .instructions import disassemble


def positive_int(text):
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer, got %s" % text)
    return value


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8vm", description="Run a CHIP-8 ROM.")
    parser.add_argument("rom", help="path to the ROM image")
    parser.add_argument("--scale", type=positive_int, default=SCALE, metavar="N",
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--cpu-hz", type=positive_int, default=CPU_HZ, metavar="N",
                        help="instructions per second (default: %(default)s)")
    parser.add_argument("--timer-hz", type=positive_int, default=None, metavar="N",
                        help="tick timers on a separate N Hz clock (e.g. %d) instead of once per step" % TIMER_HZ)
    parser.add_argument("--shift-flag", choices=SHIFT_FLAG_MODES, default=SHIFT_FLAG_BIT,
                        help="how 8xy6/8xyE compute VF (default: %(default)s)")
    parser.add_argument("--strict", action="store_true",
                        help="fail on addresses past 0xFFF instead of wrapping")
    parser.add_argument("--log", action="store_true",
                        help="trace every instruction (F1 toggles in the window)")
    parser.add_argument("--disasm", action="store_true",
                        help="print a listing of the ROM and exit")
    return parser


def print_listing(data, out=None):
    out = out or sys.stdout
    for address, opcode, ins in disassemble(data):
        print("%03X  %04X  %s" % (address, opcode, ins), file=out)


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        with open(args.rom, "rb") as f:
            data = f.read()
    except OSError as e:
        print("Cannot read ROM:", e, file=sys.stderr)
        return 1

    if args.disasm:
        print_listing(data)
        return 0

    chip8 = Chip8(shift_flag=args.shift_flag, strict=args.strict,
                  timers_per_step=args.timer_hz is None, logs_on=args.log)
    try:
        chip8.load(data)
    except Chip8Error as e:
        print("Cannot load ROM:", e, file=sys.stderr)
        return 1

    # the window needs a display, so it is only imported when we actually run
    from .window import run
    run(chip8, scale=args.scale, cpu_hz=args.cpu_hz, timer_hz=args.timer_hz or TIMER_HZ)
    return 0


if __name__ == "__main__":
    sys.exit(main())
