#!/usr/bin/env python3
"""
Brainfuck interpreter command line.

Usage:
    bf examples/hello_world.b
    bf program.b --input data.bin
    bf program.b --trace          # step-by-step trace on stderr
"""

import argparse
import logging
import sys
from typing import List, Optional

from brainfuck.config import ConfigError, load_config
from brainfuck.debugger import BrainfuckDebugger
from brainfuck.execution import ExecutionError
from brainfuck.interpreter import BrainfuckInterpreter
from brainfuck.syntax import BadExpressionError

__version__ = "0.1.0"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INFRA = 2

_log = logging.getLogger("brainfuck")


def _configure_logging(verbosity: int) -> None:
    """0 → WARNING, 1 → INFO, 2+ → DEBUG, on stderr."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("brainfuck")
    root.setLevel(level)
    root.handlers[:] = [handler]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bf", description="Brainfuck interpreter")
    ap.add_argument("file", help="script to read from")
    ap.add_argument("--input", default=None, help="read program input from this file instead of stdin")
    ap.add_argument("--config", default=None, help="YAML file with interpreter settings")
    ap.add_argument("--trace", action="store_true", help="print a step-by-step trace to stderr")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="more logging (-v info, -vv debug)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[List[str]] = None, stdin=None, stdout=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    stdout = stdout if stdout is not None else sys.stdout.buffer
    stdin = stdin if stdin is not None else sys.stdin.buffer

    try:
        config = load_config(args.config)
    except (OSError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INFRA

    trace = args.trace or config.trace
    input_file = None
    try:
        if args.input is not None:
            input_file = open(args.input, "rb")
        options = dict(
            output=stdout,
            input=input_file if input_file is not None else stdin,
            tape_size=config.tape_size,
            flush_output=config.flush_output,
            capture_output=False,
        )
        if trace:
            bf = BrainfuckDebugger(show_memory_range=config.show_memory_range, **options)
        else:
            bf = BrainfuckInterpreter(**options)

        _log.info("Executing script from: %s", args.file)
        bf.feed_file(args.file, encoding=config.encoding)
        if trace:
            bf.debug_run()
        else:
            bf.execute()
    except (OSError, UnicodeDecodeError, LookupError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INFRA
    except (BadExpressionError, ExecutionError) as e:
        stdout.flush()
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        if input_file is not None:
            input_file.close()

    stdout.flush()
    _log.info("done: %d bytes written, %d bytes read", bf.output_writes, bf.input_reads)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
