from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List, Optional, Sequence

from .errors import DebugCommandError
from .state import ExecutionContext

# Source shown around the instruction pointer: 10 before, the current one, 10 after.
PROMPT_CONTEXT = 10
PROMPT_WIDTH = 1 + 2 * PROMPT_CONTEXT

# Memory dump: 8 cells per row, 2 rows on either side of the focus row.
DUMP_ROW = 8
DUMP_ROWS_AROUND = 2

MAX_ADDRESS_DIGITS = 16

# Only these separate command words; other control bytes stay in the token.
COMMAND_SEPARATORS = " \t\r\n"


class CommandKind(Enum):
    STEP = 'step'
    QUIT = 'quit'
    CONTINUE = 'continue'
    MEMORY = 'memory'


# Abbreviations resolve in this order, so "c" is continue and "m" is memory.
COMMAND_ORDER = (CommandKind.STEP, CommandKind.QUIT, CommandKind.CONTINUE, CommandKind.MEMORY)


@dataclass(frozen=True)
class DebugCommand:
    kind: CommandKind
    address: Optional[int] = None


class Style:
    BOLD = '\x1b[1m'
    ALERT = '\x1b[31;1m'
    FOCUS = '\x1b[32m'
    RESET = '\x1b[0m'

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def wrap(self, code: str, text: str) -> str:
        if not self.enabled:
            return text
        return f"{code}{text}{self.RESET}"

    def cell(self, text: str, *, pointer: bool, focus: bool) -> str:
        if not self.enabled:
            return text
        prefix = (self.BOLD if pointer else '') + (self.FOCUS if focus else '')
        return f"{prefix}{text}{self.RESET}"


# ===== Command parsing =====

def tokenize(line: str) -> List[str]:
    stripped = line.strip(COMMAND_SEPARATORS)
    if not stripped:
        return []
    return re.split(f"[{COMMAND_SEPARATORS}]+", stripped)


def match_command(token: str) -> CommandKind:
    """Resolve a command name or any prefix of one (case-sensitive)."""
    for kind in COMMAND_ORDER:
        if kind.value.startswith(token):
            return kind
    raise DebugCommandError(message=f"Unknown command: {token}")


def parse_hex_address(text: str) -> int:
    if len(text) > MAX_ADDRESS_DIGITS:
        raise DebugCommandError(message=f"Invalid address: {text} (too long)")
    value = 0
    for ch in text:
        digit = '0123456789abcdef'.find(ch.lower())
        if digit < 0:
            raise DebugCommandError(message=f"Invalid hex digit: {ch}")
        value = (value << 4) + digit
    return value


def parse_command(tokens: Sequence[str]) -> DebugCommand:
    kind = match_command(tokens[0])
    args = list(tokens[1:])

    limit = 1 if kind is CommandKind.MEMORY else 0
    if len(args) > limit:
        raise DebugCommandError(message=f"Unexpected arg: {args[limit]}")

    if args:
        return DebugCommand(kind, parse_hex_address(args[0]))
    return DebugCommand(kind)


# ===== Rendering =====

def render_prompt(ctx: ExecutionContext, style: Style, *, jumping: bool = False) -> str:
    """
    The source window around ``ip``, e.g. ``(++[->+<]        ) ``.

    The current instruction is bold; a bracket about to jump is bold red.
    """
    start = ctx.ip - PROMPT_CONTEXT if ctx.ip >= PROMPT_CONTEXT else 0
    out = ['(']
    for i in range(start, start + PROMPT_WIDTH):
        if i >= len(ctx.source):
            out.append(' ')
        elif i == ctx.ip:
            out.append(style.wrap(style.ALERT if jumping else style.BOLD, ctx.source[i]))
        else:
            out.append(ctx.source[i])
    out.append(') ')
    return ''.join(out)


def _printable(value: int) -> str:
    return chr(value) if 0x20 <= value <= 0x7e else '.'


def render_memory(ctx: ExecutionContext, style: Style, focus: Optional[int] = None) -> str:
    """
    Hex and ASCII dump of the rows around ``focus`` (the data pointer by default).

    The data pointer cell is bold; an explicitly requested address is green.
    """
    center = ctx.dp if focus is None else focus
    row = center // DUMP_ROW * DUMP_ROW
    span = DUMP_ROWS_AROUND * DUMP_ROW
    first = row - span if row >= span else 0
    last = first + 2 * span
    width = len(f"{last:x}")

    lines = []
    for base in range(first, last + 1, DUMP_ROW):
        cells = ctx.tape.window(base, base + DUMP_ROW)
        hex_part = []
        text_part = []
        for offset, value in enumerate(cells):
            addr = base + offset
            marks = dict(pointer=addr == ctx.dp, focus=focus is not None and addr == focus)
            hex_part.append(style.cell(f" {value:02x}", **marks))
            text_part.append(style.cell(_printable(value), **marks))
        lines.append(f"{base:0{width}x} |{''.join(hex_part)} | {''.join(text_part)}\n")
    return ''.join(lines)


# ===== Interactive loop =====

class Debugger:
    """
    Line-oriented debugger entered at a ``#`` break marker.

    Commands may be abbreviated to any prefix; an empty line repeats the last
    command. ``continue`` resumes the program, ``quit`` ends it.
    """

    def __init__(self, interpreter, *, input_stream: Optional[BinaryIO] = None, color: bool = True):
        self.interpreter = interpreter
        self.input_stream = input_stream
        self.style = Style(color)
        self.previous: Optional[List[str]] = None

    @property
    def ctx(self) -> ExecutionContext:
        return self.interpreter.ctx

    def _write(self, text: str) -> None:
        self.ctx.stderr.write(text)
        self.ctx.stderr.flush()

    def _read_tokens(self) -> Optional[List[str]]:
        stream = self.ctx.stdin if self.input_stream is None else self.input_stream
        while True:
            self._write(render_prompt(self.ctx, self.style, jumping=self.interpreter.would_jump()))
            raw = stream.readline()
            if not raw:
                return None
            tokens = tokenize(raw.decode('latin-1'))
            if tokens:
                self.previous = tokens
                return tokens
            if self.previous:
                return self.previous

    def run(self) -> None:
        ctx = self.ctx
        logging.debug(f"[debugger] enter at ip={ctx.ip}")
        while not ctx.at_end:
            tokens = self._read_tokens()
            if tokens is None:
                logging.debug("[debugger] input closed, continuing")
                return
            try:
                command = parse_command(tokens)
            except DebugCommandError as e:
                self._write(f"{e}\n")
                continue
            if command.kind is CommandKind.CONTINUE:
                logging.debug(f"[debugger] continue at ip={ctx.ip}")
                return
            self.execute(command)

    def execute(self, command: DebugCommand) -> None:
        ctx = self.ctx
        if command.kind is CommandKind.STEP:
            if not self.interpreter.step_core():
                self._write(f"Not a core instruction: {ctx.current}\n")
        elif command.kind is CommandKind.QUIT:
            ctx.ip = len(ctx.source)
        elif command.kind is CommandKind.MEMORY:
            self._write(render_memory(ctx, self.style, command.address))
