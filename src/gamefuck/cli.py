from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .api import DISPLAY_MODES, RunOptions, run_file
from .errors import GamefuckError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gamefuck',
        description="Gamefuck interpreter (Brainfuck with a debugger and a 256x256 screen).",
    )
    parser.add_argument("source", nargs="?", help="Program file")
    parser.add_argument("--display", choices=DISPLAY_MODES, default="auto",
                        help="auto opens a window only for programs that present frames")
    parser.add_argument("--fps", type=int, default=None, help="Frame rate cap (window default 60)")
    parser.add_argument("--snapshot", default=None, help="Save the final frame as PNG")
    parser.add_argument("--no-color", action="store_true", help="Plain debugger output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(message)s")

    if args.source is None:
        print("Error: expected source file argument", file=sys.stderr)
        return 1

    options = RunOptions(
        display=args.display,
        fps=args.fps,
        color=False if args.no_color else None,
        snapshot=args.snapshot,
    )
    try:
        run_file(args.source, options=options)
    except GamefuckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
