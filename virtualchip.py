#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from vchip import main
from vchip.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, CPU_QUIRKS


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int, default=DEFAULT_CLOCK_SPEED,
        help="set the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"], default="pygame",
        help="set the rendering and input systems (pygame by default, null to run headless)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "-q", "--quirks", type=int, choices=[0, 1], default=0,
        help="enable all CPU quirks at once (shift Vx in place, jump from Vx, leave I alone on loads/stores)"
    )

    for cpu_quirk in CPU_QUIRKS:
        parser.add_argument(
            "--{}_quirks".format(cpu_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks, overriding --quirks".format(cpu_quirk)
        )

    parser.add_argument(
        "--seed", type=int,
        help="seed the random number generator, for reproducible runs"
    )
    parser.add_argument(
        "--max_cycles", type=int,
        help="stop after this many instructions"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def cli():
    args = vars(parse_args())
    # It is possible to start the emulator from a GUI by calling this with a dictionary
    main(args)


if __name__ == "__main__":
    cli()
