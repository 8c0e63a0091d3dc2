from __future__ import annotations

from typing import BinaryIO, Optional, TextIO

from .debugger import Debugger
from .lexer import Program, preprocess
from .ops_control import ControlMixin
from .ops_debug import DebugOpsMixin
from .ops_game import GameOpsMixin
from .ops_io import IOMixin
from .ops_memory import MemoryOpsMixin
from .port import DisplayPort
from .state import ExecutionContext


class GamefuckInterpreter(
    MemoryOpsMixin,
    IOMixin,
    ControlMixin,
    DebugOpsMixin,
    GameOpsMixin,
):
    """
    Gamefuck Interpreter

    Runs preprocessed Gamefuck source directly, one character at a time.

    Instruction Sets (tried in this order):
    - Core: + - < > . , [ ]
    - Debug: p (print cell), # (break into the debugger)
    - Game: r l u d (move cursor), ' (paint), : (present frame),
      ; (poll key), P (print cursor)

    Characters no set recognizes are skipped. An op handler returns True when
    it has already positioned the instruction pointer; otherwise the pointer
    moves to the next character.
    """

    CORE_OPS = {
        '+': '_op_increment',
        '-': '_op_decrement',
        '<': '_op_left',
        '>': '_op_right',
        '.': '_op_output',
        ',': '_op_input',
        '[': '_op_loop_open',
        ']': '_op_loop_close',
    }

    DEBUG_OPS = {
        'p': '_op_print_cell',
        '#': '_op_break',
    }

    GAME_OPS = {
        'P': '_op_print_cursor',
        ':': '_op_present',
        ';': '_op_poll_key',
        'r': '_op_cursor_right',
        'l': '_op_cursor_left',
        'u': '_op_cursor_up',
        'd': '_op_cursor_down',
        "'": '_op_paint',
    }

    def __init__(
        self,
        program: Program,
        *,
        port: Optional[DisplayPort] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[TextIO] = None,
        debug_input: Optional[BinaryIO] = None,
        color: bool = True,
    ):
        streams = dict(port=port, stdin=stdin, stdout=stdout, stderr=stderr)
        self.program = program
        self.ctx = ExecutionContext(
            source=program.source,
            embedded_input=program.embedded_input,
            **{k: v for k, v in streams.items() if v is not None},
        )
        self.debugger = Debugger(self, input_stream=debug_input, color=color)

    @classmethod
    def from_source(cls, raw: str, **kwargs) -> "GamefuckInterpreter":
        return cls(preprocess(raw), **kwargs)

    # ===== Dispatch =====

    def _dispatch(self, ops) -> bool:
        name = ops.get(self.ctx.current)
        if name is None:
            return False
        self.ctx.steps += 1
        if not getattr(self, name)():
            self.ctx.ip += 1
        return True

    def step_core(self) -> bool:
        """Execute one core instruction; False (and no move) for anything else."""
        if self.ctx.at_end:
            return False
        return self._dispatch(self.CORE_OPS)

    def step(self) -> bool:
        """Execute the instruction under ``ip``; False if it was skipped."""
        if self.ctx.at_end:
            return False
        for ops in (self.CORE_OPS, self.DEBUG_OPS, self.GAME_OPS):
            if self._dispatch(ops):
                return True
        self.ctx.ip += 1
        return False

    def run(self) -> ExecutionContext:
        ctx = self.ctx
        while not ctx.at_end:
            self.step()
        return ctx
