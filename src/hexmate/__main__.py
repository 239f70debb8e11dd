#!/usr/bin/python3

"""
Entry point for HexMate.
"""

import argparse
import curses
import logging
import os
import sys
from typing import List, Optional

from .config import load_settings, resolve_config_path
from .core.buffer import Buffer
from .core.guard import ContextGuard
from .core.literals import Base, parse_literal, scan_literals
from .core.rewrite import RewriteRequest, apply_to_text, compute_edits, cycle_format_edits
from .core.session import Session
from .exceptions import HexMateError
from .ui.input_handler import InputHandler
from .ui.window import WindowManager
from .utils.numfmt import bit_row, describe_bitfields, parse_number_input, render_hover

logger = logging.getLogger(__name__)

BASE_CODES = [base.code for base in Base]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(
        prog="hexmate",
        description="HexMate - Numeric literal conversion for text files"
    )
    parser.add_argument("--config", type=str, help="Settings file (default: $HEXMATE_CONFIG or ~/.config/hexmate/settings.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=str, help="Write log output to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    edit_parser = subparsers.add_parser("edit", help="Open files in the editor")
    edit_parser.add_argument("files", nargs="*", type=str, help="Files to open")

    scan_parser = subparsers.add_parser("scan", help="List the numbers in a file")
    scan_parser.add_argument("file", type=str)

    convert_parser = subparsers.add_parser("convert", help="Show a number in every base")
    convert_parser.add_argument("value", type=str, help="Number such as 255, 0xFF, 0b1010 or 0o17")

    bits_parser = subparsers.add_parser("bits", help="Show the 32-bit view and configured bitfields")
    bits_parser.add_argument("value", type=str)

    replace_parser = subparsers.add_parser("replace", help="Convert occurrences of a number")
    replace_parser.add_argument("file", type=str)
    replace_parser.add_argument("literal", type=str, help="The number as written in the file")
    replace_parser.add_argument("--to", choices=BASE_CODES, required=True, help="Target base")
    replace_parser.add_argument("--all", action="store_true", help="Convert every occurrence")
    replace_parser.add_argument("--equivalent", action="store_true",
                                help="Match equal values written in any base (needs --all)")
    replace_parser.add_argument("--at", type=int, help="Offset of the occurrence to convert")
    replace_parser.add_argument("--in-place", action="store_true", help="Write the result back to the file")

    cycle_parser = subparsers.add_parser("cycle", help="Convert every number in a file to one base")
    cycle_parser.add_argument("file", type=str)
    cycle_parser.add_argument("--to", choices=BASE_CODES, required=True, help="Target base")
    cycle_parser.add_argument("--in-place", action="store_true", help="Write the result back to the file")

    args = parser.parse_args(argv)
    if args.command == "replace" and args.equivalent and not args.all:
        parser.error("--equivalent needs --all")

    return args


def setup_logging(verbose: bool, log_file: Optional[str], editor: bool = False) -> None:
    """Configure logging; the editor only logs to a file so the screen stays clean."""

    if editor and not log_file:
        logging.basicConfig(handlers=[logging.NullHandler()])
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        filename=log_file,
    )


def read_file(filename: str) -> str:
    with open(filename, 'r', encoding='utf-8', errors='replace', newline='') as f:
        return f.read()


def write_result(filename: str, text: str, in_place: bool) -> None:
    if not in_place:
        sys.stdout.write(text)
        return

    with open(filename, 'w', encoding='utf-8', newline='') as f:
        f.write(text)


def parse_value(text: str) -> int:
    value = parse_number_input(text)
    if value is None:
        raise HexMateError(f"Not a number: {text!r}")

    return value


def cmd_scan(args: argparse.Namespace) -> int:
    buf = Buffer(read_file(args.file))

    for literal in scan_literals(buf.text):
        line, column = buf.position_of(literal.start)
        print(f"{line + 1}:{column + 1} {literal.raw_text} {literal.value}")

    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    print(render_hover(parse_value(args.value)))
    return 0


def cmd_bits(args: argparse.Namespace) -> int:
    value = parse_value(args.value)
    settings = load_settings(args.config)

    print(f"Bits: {bit_row(value)}")
    for register, states in describe_bitfields(value, settings.bitfields).items():
        print(register)
        if not states:
            print("  (no definitions)")

        for state in states:
            doc = f" - {state.doc}" if state.doc else ""
            print(f"  {state.label}: {int(state.is_set)}{doc}")

    return 0


def cmd_replace(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    text = read_file(args.file)

    value = parse_literal(args.literal)
    if value is None:
        raise HexMateError(f"Not a number literal: {args.literal!r}")

    span = None
    if not args.all:
        if args.at is not None:
            span = (args.at, args.at + len(args.literal))
        else:
            first = next((m for m in scan_literals(text) if m.raw_text == args.literal), None)
            if first is None:
                logger.info("No occurrence of %s in %s", args.literal, args.file)
                write_result(args.file, text, args.in_place)
                return 0
            span = (first.start, first.end)

    request = RewriteRequest(
        value=value,
        format=args.to,
        original_text=args.literal,
        span=span,
        all=args.all,
        equivalent=args.equivalent,
    )

    policy = request.to_policy(text)
    edits = compute_edits(text, policy, ContextGuard(settings.skip_contexts)) if policy else []
    logger.info("Converting %d occurrences in %s", len(edits), args.file)

    write_result(args.file, apply_to_text(text, edits), args.in_place)
    return 0


def cmd_cycle(args: argparse.Namespace) -> int:
    text = read_file(args.file)
    edits = cycle_format_edits(text, Base.from_code(args.to))
    logger.info("Converting %d numbers in %s", len(edits), args.file)

    write_result(args.file, apply_to_text(text, edits), args.in_place)
    return 0


def run_editor(stdscr: 'curses.window', args: argparse.Namespace) -> None:
    """Run the curses editor loop."""

    curses.use_default_colors()
    curses.curs_set(0)
    stdscr.timeout(100)

    settings = load_settings(args.config)
    session = Session(settings, resolve_config_path(args.config))
    window_manager = WindowManager(stdscr, session)
    input_handler = InputHandler(window_manager)

    for filename in args.files:
        buf = Buffer()
        if not os.path.exists(filename):
            buf.filename = filename
            window_manager.add_buffer(buf)
            window_manager.set_status(f"Created new file: {filename}")
            continue

        buf.load_file(filename)
        window_manager.add_buffer(buf)

    if not window_manager.buffers:
        window_manager.add_buffer(Buffer())

    while True:
        current_height, current_width = stdscr.getmaxyx()
        if (current_height, current_width) != (window_manager.height, window_manager.width):
            window_manager.resize()

        window_manager.refresh_all()

        try:
            ch = stdscr.getch()
            if ch != -1:
                if not input_handler.handle_input(ch):
                    break
        except KeyboardInterrupt:
            break
        except curses.error:
            continue


COMMANDS = {
    "scan": cmd_scan,
    "convert": cmd_convert,
    "bits": cmd_bits,
    "replace": cmd_replace,
    "cycle": cmd_cycle,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""

    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file, editor=args.command == "edit")

    try:
        if args.command == "edit":
            curses.wrapper(run_editor, args)
            return 0

        return COMMANDS[args.command](args)
    except (HexMateError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
