from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Tuple

from .errors import SnapshotError, SourceLoadError
from .interpreter import GamefuckInterpreter
from .lexer import Program, preprocess
from .port import DEFAULT_FPS, DisplayPort, HeadlessPort

DISPLAY_MODES = ('auto', 'window', 'headless')


@dataclass(frozen=True)
class RunOptions:
    display: str = 'headless'
    fps: Optional[int] = None
    color: Optional[bool] = None
    snapshot: Optional[str] = None


@dataclass(frozen=True)
class RunResult:
    steps: int
    dp: int
    tape_size: int
    frames: int
    warnings: Tuple[str, ...]


def make_port(program: Program, options: RunOptions) -> DisplayPort:
    display = options.display
    if display not in DISPLAY_MODES:
        raise ValueError(f"Unknown display mode: {display}")
    if display == 'auto':
        display = 'window' if ':' in program.source else 'headless'
    if display == 'window':
        from .qt_port import QtWindowPort

        return QtWindowPort(fps=DEFAULT_FPS if options.fps is None else options.fps)
    return HeadlessPort(fps=options.fps)


def save_snapshot(port: DisplayPort, path) -> None:
    try:
        port.image().save(path, format='PNG')
    except OSError:
        raise SnapshotError(message=f"failed to write '{path}'", path=str(path)) from None


def _use_color(options: RunOptions, stderr: TextIO) -> bool:
    if options.color is not None:
        return options.color
    isatty = getattr(stderr, 'isatty', None)
    return bool(isatty and isatty())


def run_string(
    source: str,
    *,
    options: Optional[RunOptions] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[TextIO] = None,
    port: Optional[DisplayPort] = None,
) -> RunResult:
    options = RunOptions() if options is None else options
    err = sys.stderr if stderr is None else stderr

    program = preprocess(source)
    for warning in program.warnings:
        err.write(f"Warning: {warning}\n")
    err.flush()

    owns_port = port is None
    if owns_port:
        port = make_port(program, options)

    interpreter = GamefuckInterpreter(
        program,
        port=port,
        stdin=stdin,
        stdout=stdout,
        stderr=err,
        color=_use_color(options, err),
    )
    try:
        ctx = interpreter.run()
        if options.snapshot:
            save_snapshot(port, options.snapshot)
    finally:
        if owns_port:
            port.close()

    return RunResult(
        steps=ctx.steps,
        dp=ctx.dp,
        tape_size=ctx.tape.size,
        frames=port.frames,
        warnings=program.warnings,
    )


def run_file(path: str | Path, *, options: Optional[RunOptions] = None, **kwargs) -> RunResult:
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError:
        raise SourceLoadError(message=f"failed to open '{path}'", path=str(path)) from None
    return run_string(raw.decode('latin-1'), options=options, **kwargs)
