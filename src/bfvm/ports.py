from __future__ import annotations

import sys
from typing import List, Optional, Protocol, TextIO, Union


class InputOutputPort(Protocol):
    def read(self) -> Optional[int]:
        """Return the next character code, or None at end of input."""

    def write(self, value: int) -> None:
        """Emit one cell value."""


class BufferPort:
    """In-memory port: input from a str or bytes buffer, output collected as bytes."""

    def __init__(self, input_data: Union[str, bytes] = ""):
        if isinstance(input_data, str):
            self._input: List[int] = [ord(c) for c in input_data]
        else:
            self._input = list(input_data)
        self._pos = 0
        self._output = bytearray()

    def read(self) -> Optional[int]:
        if self._pos >= len(self._input):
            return None
        value = self._input[self._pos]
        self._pos += 1
        return value

    def write(self, value: int) -> None:
        self._output.append(value)

    @property
    def output(self) -> bytes:
        return bytes(self._output)

    @property
    def text(self) -> str:
        return "".join(chr(b) for b in self._output)


class StreamPort:
    """Binds the VM to text streams, the process's stdin/stdout unless given."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self._stdin = stdin
        self._stdout = stdout

    def read(self) -> Optional[int]:
        stream = self._stdin if self._stdin is not None else sys.stdin
        char = stream.read(1)
        return ord(char) if char else None

    def write(self, value: int) -> None:
        stream = self._stdout if self._stdout is not None else sys.stdout
        stream.write(chr(value))
        stream.flush()
