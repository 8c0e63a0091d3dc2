from __future__ import annotations


class IOMixin:
    def _op_output(self):
        ctx = self.ctx
        ctx.stdout.write(bytes((ctx.tape.get(ctx.dp),)))
        ctx.stdout.flush()

    def _op_input(self):
        ctx = self.ctx
        ctx.tape.set(ctx.dp, self._read_byte())

    def _read_byte(self) -> int:
        """Next input byte; 0 once the input is exhausted."""
        ctx = self.ctx
        if ctx.embedded_input is not None:
            if ctx.input_pos >= len(ctx.embedded_input):
                return 0
            value = ctx.embedded_input[ctx.input_pos]
            ctx.input_pos += 1
            return value

        data = ctx.stdin.read(1)
        if not data:
            return 0
        return data[0]
