from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .compiler import compile
from .executor import Executor
from .options import ExecutionOptions
from .ports import BufferPort


@dataclass(frozen=True)
class RunResult:
    output: bytes
    steps: int
    instructions: int

    @property
    def text(self) -> str:
        return "".join(chr(b) for b in self.output)


def run_string(source: str, *, input_data: Union[str, bytes] = "",
               options: Optional[ExecutionOptions] = None) -> RunResult:
    program = compile(source)
    port = BufferPort(input_data)
    executor = Executor(program, port, options)
    executor.run()
    return RunResult(output=port.output, steps=executor.steps, instructions=len(program))


def run_file(path: str | Path, *, input_data: Union[str, bytes] = "",
             options: Optional[ExecutionOptions] = None, encoding: str = "utf-8") -> RunResult:
    p = Path(path)
    return run_string(p.read_text(encoding=encoding), input_data=input_data, options=options)
