from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from .compiler import compile
from .errors import BFVMError
from .executor import Executor
from .instructions import format_program
from .options import DEFAULT_TAPE_SIZE, EOF_POLICIES, ExecutionOptions
from .ports import StreamPort


def init_logging(debug: bool = False) -> None:
    """Send the package's log records to stderr; DEBUG level when debug is set."""
    logger = logging.getLogger("bfvm")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)5s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


def _format_memory(memory, count: int, per_row: int = 8) -> str:
    cells = [int(b) for b in memory[:count]]
    rows = [" ".join(str(v) for v in cells[i:i + per_row]) for i in range(0, len(cells), per_row)]
    return "\n".join(rows)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Compile and run a Brainfuck program.",
    )
    parser.add_argument("file", nargs="?", help="program source file")
    parser.add_argument("-e", "--execute", metavar="CODE", help="program source given on the command line")
    parser.add_argument("--dump", action="store_true", help="print the compiled instructions to stderr")
    parser.add_argument("--time", action="store_true", help="print compile and run times to stderr")
    parser.add_argument("--memory", type=int, default=0, metavar="N",
                        help="print the first N tape cells to stderr after the run")
    parser.add_argument("--tape-size", type=int, default=DEFAULT_TAPE_SIZE,
                        help=f"number of tape cells (default {DEFAULT_TAPE_SIZE})")
    parser.add_argument("--eof", choices=EOF_POLICIES, default="error",
                        help="what ',' does at end of input (default error)")
    parser.add_argument("--no-jit", action="store_true", help="run on the pure Python engine")
    parser.add_argument("--max-steps", type=int, default=None, help="abort after N instructions")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    if (args.file is None) == (args.execute is None):
        parser.error("give exactly one of FILE or -e CODE")

    try:
        options = ExecutionOptions(
            tape_size=args.tape_size,
            eof=args.eof,
            jit=not args.no_jit,
            max_steps=args.max_steps,
        )
    except ValueError as e:
        parser.error(str(e))

    init_logging(args.debug)

    if args.execute is not None:
        code = args.execute
    else:
        try:
            with open(args.file, 'r', encoding='utf-8') as f:
                code = f.read()
        except OSError as e:
            print(f"bfvm: cannot read {args.file}: {e.strerror}", file=sys.stderr)
            return 1

    try:
        start = time.perf_counter()
        program = compile(code)
        compiled = time.perf_counter()

        if args.dump:
            print(format_program(program), file=sys.stderr)
        if args.time:
            print(f"Compilation took {(compiled - start) * 1000:.2f} ms", file=sys.stderr)

        executor = Executor(program, StreamPort(), options)
        start = time.perf_counter()
        executor.run()
        finished = time.perf_counter()
    except BFVMError as e:
        print(e, file=sys.stderr)
        return 1

    if args.time:
        print(f"Execution took {(finished - start) * 1000:.2f} ms ({executor.steps:,} steps)",
              file=sys.stderr)
    if args.memory > 0:
        print(_format_memory(executor.memory, args.memory), file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
