from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .errors import make_compile_error
from .instructions import (
    Add,
    Input,
    Instruction,
    JumpIfNotZero,
    JumpIfZero,
    MoveLeft,
    MoveRight,
    Output,
    Program,
    Subtract,
    UnresolvedLoopStart,
    is_code_char,
)

logger = logging.getLogger(__name__)

CELL_SIZE = 256

_RUN_OPS = {
    '+': lambda n: Add(n % CELL_SIZE),
    '-': lambda n: Subtract(n % CELL_SIZE),
    '>': MoveRight,
    '<': MoveLeft,
}


def compile(source: str) -> Program:
    """Compile source text into a program with every loop resolved.

    Runs of identical ``+ - < >`` become one instruction carrying the run
    length (mod 256 for ``+``/``-``). Every character outside the eight
    operators is ignored, including between two halves of a run.

    Raises ``UnopenedLoop`` or ``UnclosedLoop`` on unbalanced brackets.
    """
    instructions: List[Instruction] = []
    # (instruction index, source offset) of each pending '['
    loop_stack: List[Tuple[int, int]] = []
    run_op: Optional[str] = None
    run_len = 0

    def flush() -> None:
        nonlocal run_op, run_len
        if run_op is not None:
            instructions.append(_RUN_OPS[run_op](run_len))
        run_op = None
        run_len = 0

    for offset, ch in enumerate(source):
        if not is_code_char(ch):
            continue

        if ch in _RUN_OPS:
            if ch != run_op:
                flush()
                run_op = ch
            run_len += 1
            continue

        flush()
        if ch == '[':
            loop_stack.append((len(instructions), offset))
            instructions.append(UnresolvedLoopStart())
        elif ch == ']':
            if not loop_stack:
                raise make_compile_error(
                    kind='UnopenedLoop',
                    message="']' has no matching '['",
                    source=source,
                    offset=offset,
                )
            start, _ = loop_stack.pop()
            instructions[start] = JumpIfZero(len(instructions))
            instructions.append(JumpIfNotZero(start))
        elif ch == '.':
            instructions.append(Output())
        elif ch == ',':
            instructions.append(Input())

    flush()

    if loop_stack:
        _, offset = loop_stack[-1]
        raise make_compile_error(
            kind='UnclosedLoop',
            message="'[' is never closed",
            source=source,
            offset=offset,
        )

    logger.debug("compiled %d characters into %d instructions", len(source), len(instructions))
    return tuple(instructions)
