from __future__ import annotations

from numba import njit

from .errors import make_bracket_error

OPEN = 91   # '['
CLOSE = 93  # ']'


@njit(cache=True)
def scan_forward(code, ip):
    """
    Index of the ``]`` matching the ``[`` at ``ip``, or -1 if the source ends
    first.
    """
    depth = 1
    n = len(code)
    while ip + 1 < n:
        ip += 1
        c = code[ip]
        if c == OPEN:
            depth += 1
        elif c == CLOSE:
            depth -= 1
            if depth == 0:
                return ip
    return -1


@njit(cache=True)
def scan_backward(code, ip):
    """Index of the ``[`` matching the ``]`` at ``ip``, or -1."""
    depth = 1
    while ip > 0:
        ip -= 1
        c = code[ip]
        if c == OPEN:
            depth -= 1
            if depth == 0:
                return ip
        elif c == CLOSE:
            depth += 1
    return -1


class ControlMixin:
    # ===== Loops =====
    # No jump table: each jump rescans the source between the two brackets.

    def _op_loop_open(self):
        ctx = self.ctx
        if ctx.tape.get(ctx.dp) != 0:
            return
        target = scan_forward(ctx.code, ctx.ip)
        if target < 0:
            raise make_bracket_error(message='unmatched [', source=ctx.source, position=ctx.ip)
        ctx.ip = target

    def _op_loop_close(self):
        ctx = self.ctx
        if ctx.tape.get(ctx.dp) == 0:
            return
        target = scan_backward(ctx.code, ctx.ip)
        if target < 0:
            raise make_bracket_error(message='unmatched ]', source=ctx.source, position=ctx.ip)
        ctx.ip = target

    def would_jump(self) -> bool:
        """True when the bracket under ``ip`` will move the instruction pointer."""
        ctx = self.ctx
        if ctx.at_end:
            return False
        ch = ctx.current
        if ch == '[':
            return ctx.tape.get(ctx.dp) == 0
        if ch == ']':
            return ctx.tape.get(ctx.dp) != 0
        return False
