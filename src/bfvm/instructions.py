from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


# ---------------- Instructions ----------------
@dataclass(frozen=True)
class Add:
    count: int  # 0..255

@dataclass(frozen=True)
class Subtract:
    count: int  # 0..255

@dataclass(frozen=True)
class MoveRight:
    count: int

@dataclass(frozen=True)
class MoveLeft:
    count: int

@dataclass(frozen=True)
class JumpIfZero:
    target: int  # index of the matching JumpIfNotZero

@dataclass(frozen=True)
class JumpIfNotZero:
    target: int  # index of the matching JumpIfZero

@dataclass(frozen=True)
class Output:
    pass

@dataclass(frozen=True)
class Input:
    pass

@dataclass(frozen=True)
class UnresolvedLoopStart:
    pass  # only valid while compiling

Instruction = Union[
    Add, Subtract, MoveRight, MoveLeft,
    JumpIfZero, JumpIfNotZero, Output, Input, UnresolvedLoopStart,
]
Program = Tuple[Instruction, ...]

OPERATORS = set("+-<>[].,")


def is_code_char(ch: str) -> bool:
    return ch in OPERATORS


# ---------------- Listing ----------------
def format_instruction(instruction: Instruction) -> str:
    name = type(instruction).__name__
    if isinstance(instruction, (Add, Subtract, MoveRight, MoveLeft)):
        return f"{name}({instruction.count})"
    if isinstance(instruction, (JumpIfZero, JumpIfNotZero)):
        return f"{name}({instruction.target})"
    return name


def format_program(program: Program) -> str:
    """One line per instruction: the index right-aligned, then the instruction."""
    width = len(str(max(len(program) - 1, 0)))
    return "\n".join(
        f"{i:>{width}}  {format_instruction(ins)}" for i, ins in enumerate(program)
    )
