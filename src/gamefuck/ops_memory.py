from __future__ import annotations

from .errors import make_underflow_error


class MemoryOpsMixin:
    # ===== Cell arithmetic =====

    def _op_increment(self):
        self.ctx.tape.add(self.ctx.dp, 1)

    def _op_decrement(self):
        self.ctx.tape.add(self.ctx.dp, -1)

    # ===== Data pointer movement =====

    def _op_left(self):
        ctx = self.ctx
        if ctx.dp == 0:
            raise make_underflow_error(source=ctx.source, ip=ctx.ip)
        ctx.dp -= 1

    def _op_right(self):
        # The tape grows lazily on the next write.
        self.ctx.dp += 1
