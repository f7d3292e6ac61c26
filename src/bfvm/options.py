from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_TAPE_SIZE = 30000
EOF_POLICIES = ('error', 'zero', 'unchanged')


@dataclass(frozen=True)
class ExecutionOptions:
    tape_size: int = DEFAULT_TAPE_SIZE
    # what Input does at end of input: raise MissingInput, store 0, or leave the cell
    eof: str = 'error'
    jit: bool = True
    max_steps: Optional[int] = None
    # instructions the jit loop runs before handing control back to Python
    batch_steps: int = 1 << 20

    def __post_init__(self) -> None:
        if self.tape_size < 1:
            raise ValueError(f"tape_size must be at least 1, got {self.tape_size}")
        if self.eof not in EOF_POLICIES:
            raise ValueError(f"eof must be one of {', '.join(EOF_POLICIES)}, got {self.eof!r}")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {self.max_steps}")
        if self.batch_steps < 1:
            raise ValueError(f"batch_steps must be at least 1, got {self.batch_steps}")
