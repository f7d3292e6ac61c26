from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from numba import njit

from .errors import ExecutionError, make_execution_error
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
    format_instruction,
)
from .options import ExecutionOptions
from .ports import InputOutputPort

logger = logging.getLogger(__name__)

# Opcodes of the encoded program
OP_ADD = 0
OP_SUB = 1
OP_RIGHT = 2
OP_LEFT = 3
OP_JZ = 4
OP_JNZ = 5
OP_OUTPUT = 6
OP_INPUT = 7
OP_INVALID = 8

# Why the jit loop handed control back
STOP_HALT = 0
STOP_OUTPUT = 1
STOP_INPUT = 2
STOP_BUDGET = 3
STOP_NEGATIVE_INDEX = 4
STOP_OUT_OF_BOUNDS = 5
STOP_MALFORMED = 6

_OPCODES = {
    Add: OP_ADD,
    Subtract: OP_SUB,
    MoveRight: OP_RIGHT,
    MoveLeft: OP_LEFT,
    JumpIfZero: OP_JZ,
    JumpIfNotZero: OP_JNZ,
    Output: OP_OUTPUT,
    Input: OP_INPUT,
}


def encode_program(program: Sequence[Instruction]) -> Tuple[np.ndarray, np.ndarray]:
    """Flatten a program into (opcodes, operands) arrays for the jit loop.

    Anything that is not a runnable instruction, UnresolvedLoopStart
    included, is encoded as OP_INVALID.
    """
    ops = np.full(len(program), OP_INVALID, dtype=np.int32)
    args = np.zeros(len(program), dtype=np.int64)
    for i, ins in enumerate(program):
        op = _OPCODES.get(type(ins))
        if op is None:
            continue
        ops[i] = op
        if op in (OP_ADD, OP_SUB, OP_RIGHT, OP_LEFT):
            args[i] = ins.count
        elif op in (OP_JZ, OP_JNZ):
            args[i] = ins.target
    return ops, args


@njit(cache=True)
def _run_batch(ops, args, memory, ip, dp, max_steps):
    """
    Run encoded instructions until something needs Python.

    Stops at Output/Input (before executing them), at halt, on a pointer or
    program error, or after max_steps instructions.
    Returns (ip, dp, stop_reason, steps).
    """
    n = len(ops)
    size = len(memory)
    steps = 0

    while ip < n:
        if steps >= max_steps:
            return ip, dp, STOP_BUDGET, steps

        op = ops[ip]
        arg = args[ip]

        if op == OP_ADD:
            memory[dp] = (memory[dp] + arg) & 255
        elif op == OP_SUB:
            memory[dp] = (memory[dp] - arg) & 255
        elif op == OP_RIGHT:
            if dp + arg >= size:
                return ip, dp, STOP_OUT_OF_BOUNDS, steps
            dp += arg
        elif op == OP_LEFT:
            if arg > dp:
                return ip, dp, STOP_NEGATIVE_INDEX, steps
            dp -= arg
        elif op == OP_JZ or op == OP_JNZ:
            if arg < 0 or arg >= n:
                return ip, dp, STOP_MALFORMED, steps
            if op == OP_JZ:
                taken = memory[dp] == 0
            else:
                taken = memory[dp] != 0
            steps += 1
            if taken:
                ip = arg
            else:
                ip += 1
            continue
        elif op == OP_OUTPUT:
            return ip, dp, STOP_OUTPUT, steps
        elif op == OP_INPUT:
            return ip, dp, STOP_INPUT, steps
        else:
            return ip, dp, STOP_MALFORMED, steps

        ip += 1
        steps += 1

    return ip, dp, STOP_HALT, steps


class Executor:
    """Runs one compiled program against its own zero-initialised tape."""

    def __init__(self, program: Sequence[Instruction], io: InputOutputPort,
                 options: Optional[ExecutionOptions] = None):
        self.program: Program = tuple(program)
        self.io = io
        self.options = options if options is not None else ExecutionOptions()
        self.memory = np.zeros(self.options.tape_size, dtype=np.uint8)
        self.ip = 0
        self.dp = 0
        self.steps = 0

    # ---------------- errors ----------------
    def _error(self, kind: str, message: str) -> ExecutionError:
        return make_execution_error(kind=kind, message=message, ip=self.ip, dp=self.dp)

    def _negative_index(self, count: int) -> ExecutionError:
        return self._error('NegativeIndex', f"MoveLeft({count}) from cell {self.dp} goes below cell 0")

    def _out_of_bounds(self, count: int) -> ExecutionError:
        return self._error(
            'OutOfBounds',
            f"MoveRight({count}) from cell {self.dp} goes past cell {len(self.memory) - 1}",
        )

    def _malformed(self) -> ExecutionError:
        ins = self.program[self.ip]
        return self._error('MalformedProgram', f"cannot execute {format_instruction(ins)} at {self.ip}")

    def _check_budget(self) -> None:
        max_steps = self.options.max_steps
        if max_steps is not None and self.steps >= max_steps:
            raise self._error('StepLimitExceeded', f"step limit of {max_steps} reached")

    # ---------------- I/O ----------------
    def _output(self) -> None:
        self.io.write(int(self.memory[self.dp]))

    def _input(self) -> None:
        value = self.io.read()
        if value is not None:
            self.memory[self.dp] = value & 0xFF
        elif self.options.eof == 'zero':
            self.memory[self.dp] = 0
        elif self.options.eof == 'error':
            raise self._error('MissingInput', "Input reached end of input")

    # ---------------- engines ----------------
    def step(self) -> bool:
        """Execute one instruction. Returns True while there is more to run."""
        if self.ip >= len(self.program):
            return False
        self._check_budget()

        ins = self.program[self.ip]
        if isinstance(ins, Add):
            self.memory[self.dp] = (int(self.memory[self.dp]) + ins.count) % 256
        elif isinstance(ins, Subtract):
            self.memory[self.dp] = (int(self.memory[self.dp]) - ins.count) % 256
        elif isinstance(ins, MoveRight):
            if self.dp + ins.count >= len(self.memory):
                raise self._out_of_bounds(ins.count)
            self.dp += ins.count
        elif isinstance(ins, MoveLeft):
            if ins.count > self.dp:
                raise self._negative_index(ins.count)
            self.dp -= ins.count
        elif isinstance(ins, (JumpIfZero, JumpIfNotZero)):
            if not 0 <= ins.target < len(self.program):
                raise self._malformed()
            cell = self.memory[self.dp]
            taken = cell == 0 if isinstance(ins, JumpIfZero) else cell != 0
            self.steps += 1
            self.ip = ins.target if taken else self.ip + 1
            return self.ip < len(self.program)
        elif isinstance(ins, Output):
            self._output()
        elif isinstance(ins, Input):
            self._input()
        else:
            raise self._malformed()

        self.ip += 1
        self.steps += 1
        return self.ip < len(self.program)

    def _run_jit(self) -> None:
        ops, args = encode_program(self.program)
        while True:
            budget = self.options.batch_steps
            if self.options.max_steps is not None:
                budget = min(budget, self.options.max_steps - self.steps)

            ip, dp, reason, steps = _run_batch(ops, args, self.memory, self.ip, self.dp, budget)
            self.ip = int(ip)
            self.dp = int(dp)
            self.steps += int(steps)

            if reason == STOP_HALT:
                return
            if reason == STOP_OUTPUT:
                self._output()
            elif reason == STOP_INPUT:
                self._input()
            elif reason == STOP_BUDGET:
                self._check_budget()
                continue
            elif reason == STOP_NEGATIVE_INDEX:
                raise self._negative_index(int(args[self.ip]))
            elif reason == STOP_OUT_OF_BOUNDS:
                raise self._out_of_bounds(int(args[self.ip]))
            else:
                raise self._malformed()
            self.ip += 1
            self.steps += 1

    def run(self) -> None:
        if self.options.jit:
            self._run_jit()
        else:
            while self.step():
                pass
        logger.debug("halted after %d steps (jit=%s)", self.steps, self.options.jit)


def execute(program: Sequence[Instruction], io: InputOutputPort,
            options: Optional[ExecutionOptions] = None) -> None:
    """Run a compiled program to completion, raising ExecutionError on failure."""
    Executor(program, io, options).run()
