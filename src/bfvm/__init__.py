from .compiler import compile
from .executor import Executor, execute
from .instructions import format_program
from .options import ExecutionOptions
from .ports import BufferPort, InputOutputPort, StreamPort
from .api import RunResult, run_file, run_string

__all__ = [
    'compile',
    'execute',
    'Executor',
    'format_program',
    'ExecutionOptions',
    'InputOutputPort',
    'BufferPort',
    'StreamPort',
    'RunResult',
    'run_string',
    'run_file',
]
