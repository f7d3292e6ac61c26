from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


def _locate(source: str, offset: int) -> Tuple[int, int]:
    line = source.count('\n', 0, offset) + 1
    column = offset - (source.rfind('\n', 0, offset) + 1) + 1
    return line, column


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'UnopenedLoop':
        return 'Every "]" must close an earlier "[". Remove the extra "]" or add the missing "[".'
    if kind == 'UnclosedLoop':
        return 'Every "[" needs a matching "]" later in the program.'
    if kind == 'NegativeIndex':
        return 'The program moved the data pointer left of cell 0.'
    if kind == 'OutOfBounds':
        return 'Increase the tape size or check the loop that keeps moving right.'
    if kind == 'MissingInput':
        return 'Provide more input, or run with eof set to "zero" or "unchanged".'
    return None


@dataclass(eq=False)
class BFVMError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class CompileError(BFVMError):
    offset: int
    line: int
    column: int
    context: str


class UnopenedLoop(CompileError):
    """A ']' with no pending '['."""


class UnclosedLoop(CompileError):
    """A '[' still pending at end of input."""


@dataclass(eq=False)
class ExecutionError(BFVMError):
    ip: int
    dp: int


class NegativeIndex(ExecutionError):
    """The data pointer would move left of cell 0."""


class OutOfBounds(ExecutionError):
    """The data pointer would move past the last tape cell."""


class MissingInput(ExecutionError):
    """An Input instruction hit end of input."""


class MalformedProgram(ExecutionError):
    """The program holds something the executor cannot run, e.g. an unresolved loop start."""


class StepLimitExceeded(ExecutionError):
    """The run used up its instruction budget."""


_COMPILE_ERRORS = {cls.__name__: cls for cls in (UnopenedLoop, UnclosedLoop)}
_EXECUTION_ERRORS = {
    cls.__name__: cls
    for cls in (NegativeIndex, OutOfBounds, MissingInput, MalformedProgram, StepLimitExceeded)
}


def make_compile_error(*, kind: str, message: str, source: str, offset: int) -> CompileError:
    cls = _COMPILE_ERRORS[kind]
    line, column = _locate(source, offset)
    ctx = _build_context(source.split('\n'), line, column)
    hint = _hint_for(kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"{kind}: {message} (line {line}, column {column})\n{ctx}{hint_block}",
        offset=offset,
        line=line,
        column=column,
        context=ctx,
    )


def make_execution_error(*, kind: str, message: str, ip: int, dp: int) -> ExecutionError:
    cls = _EXECUTION_ERRORS[kind]
    hint = _hint_for(kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"{kind}: {message} (ip={ip}, dp={dp}){hint_block}",
        ip=ip,
        dp=dp,
    )
