from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import make_bracket_error, make_comment_error

INPUT_DELIMITER = '!'
WHITESPACE = frozenset(' \t\n\v\f\r')


@dataclass(frozen=True)
class Program:
    source: str
    embedded_input: Optional[bytes]
    warnings: Tuple[str, ...] = ()


def split_input(raw: str) -> Tuple[str, Optional[bytes]]:
    """Cut the raw text at the first ``!``; what follows is embedded input."""
    idx = raw.find(INPUT_DELIMITER)
    if idx < 0:
        return raw, None
    return raw[:idx], raw[idx + 1:].encode('latin-1', errors='replace')


def strip_source(code: str) -> Tuple[str, List[str]]:
    """
    Drop whitespace and ``{...}`` comments (which nest).

    A stray ``}`` is fatal. An unclosed ``{`` only produces a warning; the
    code kept before it is returned as is.
    """
    out: List[str] = []
    warnings: List[str] = []
    depth = 0

    for pos, ch in enumerate(code):
        if ch == '{':
            depth += 1
            continue
        if ch == '}':
            if depth == 0:
                raise make_comment_error(message='unmatched }', source=code, position=pos)
            depth -= 1
            continue
        if depth != 0:
            continue
        if ch in WHITESPACE:
            continue
        out.append(ch)

    if depth != 0:
        warnings.append('unmatched {')
    return ''.join(out), warnings


def check_brackets(code: str) -> None:
    depth = 0
    opened: List[int] = []
    for pos, ch in enumerate(code):
        if ch == '[':
            depth += 1
            opened.append(pos)
        elif ch == ']':
            if depth == 0:
                raise make_bracket_error(message='unmatched ]', source=code, position=pos)
            depth -= 1
            opened.pop()
    if depth != 0:
        raise make_bracket_error(message='unmatched [', source=code, position=opened[-1])


def preprocess(raw: str) -> Program:
    code, embedded = split_input(raw)
    code, warnings = strip_source(code)
    check_brackets(code)
    return Program(source=code, embedded_input=embedded, warnings=tuple(warnings))
