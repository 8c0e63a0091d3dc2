from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_FLATTEN = str.maketrans("\t\n\r\v\f", "     ")


def _build_context(source: str, position: int, *, context: int = 12) -> str:
    start = max(0, position - context)
    end = min(len(source), position + context + 1)
    snippet = source[start:end].translate(_FLATTEN)
    caret = ' ' * (position - start) + '^'
    return f"  {snippet}\n  {caret}"


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if 'unmatched ]' in msg:
        return 'A loop was closed that was never opened. Check the "[" before it.'
    if 'unmatched [' in msg:
        return 'A loop is never closed. Add the missing "]".'
    if 'unmatched }' in msg:
        return 'A comment was closed that was never opened. Comments are written {like this}.'
    if 'past origin' in msg:
        return 'The tape starts at cell 0; there are no cells to its left.'
    return None


@dataclass
class GamefuckError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class SourceLoadError(GamefuckError):
    path: str


@dataclass
class PreprocessError(GamefuckError):
    position: int
    context: str


@dataclass
class UnmatchedCommentError(PreprocessError):
    pass


@dataclass
class UnmatchedBracketError(PreprocessError):
    pass


@dataclass
class ExecutionError(GamefuckError):
    ip: int


@dataclass
class TapeUnderflowError(ExecutionError):
    pass


@dataclass
class TapeAllocationError(GamefuckError):
    size: int


@dataclass
class SnapshotError(GamefuckError):
    path: str


@dataclass
class DebugCommandError(GamefuckError):
    """Bad debugger input; only the current command is affected."""


def _make(cls, message: str, source: str, position: int):
    ctx = _build_context(source, position)
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"{message} (offset {position})\n{ctx}{hint_block}",
        position=position,
        context=ctx,
    )


def make_comment_error(*, message: str, source: str, position: int) -> UnmatchedCommentError:
    return _make(UnmatchedCommentError, message, source, position)


def make_bracket_error(*, message: str, source: str, position: int) -> UnmatchedBracketError:
    return _make(UnmatchedBracketError, message, source, position)


def make_underflow_error(*, source: str, ip: int) -> TapeUnderflowError:
    message = 'invalid cell access (< past origin)'
    hint = _hint_for(message)
    return TapeUnderflowError(
        message=f"{message} (offset {ip})\n{_build_context(source, ip)}\nHint: {hint}",
        ip=ip,
    )
