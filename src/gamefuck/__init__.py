from .api import RunOptions, RunResult, run_file, run_string
from .errors import GamefuckError
from .interpreter import GamefuckInterpreter
from .lexer import Program, preprocess
from .port import DisplayPort, HeadlessPort
from .tape import Tape

__all__ = [
    'GamefuckInterpreter',
    'GamefuckError',
    'Program',
    'preprocess',
    'Tape',
    'DisplayPort',
    'HeadlessPort',
    'RunOptions',
    'RunResult',
    'run_string',
    'run_file',
]
