from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, TextIO

import numpy as np

from .port import DisplayPort, HeadlessPort
from .tape import Tape


@dataclass
class ExecutionContext:
    source: str
    tape: Tape = field(default_factory=Tape)
    ip: int = 0
    dp: int = 0

    # None means "read from stdin".
    embedded_input: Optional[bytes] = None
    input_pos: int = 0

    port: DisplayPort = field(default_factory=HeadlessPort)
    cursor_x: int = 0
    cursor_y: int = 0

    stdin: BinaryIO = field(default_factory=lambda: sys.stdin.buffer)
    stdout: BinaryIO = field(default_factory=lambda: sys.stdout.buffer)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    steps: int = 0
    code: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Read-only byte view of the source for the compiled bracket scans.
        self.code = np.frombuffer(self.source.encode('latin-1', errors='replace'), dtype=np.uint8)

    @property
    def at_end(self) -> bool:
        return self.ip >= len(self.source)

    @property
    def current(self) -> str:
        return self.source[self.ip]

    @property
    def cell(self) -> int:
        return self.tape.get(self.dp)
