from __future__ import annotations


class DebugOpsMixin:
    def _op_print_cell(self):
        ctx = self.ctx
        ctx.stderr.write(f"{ctx.tape.get(ctx.dp):02x}\n")
        ctx.stderr.flush()

    def _op_break(self):
        ctx = self.ctx
        ctx.stderr.write("\n")
        ctx.stderr.flush()
        ctx.ip += 1
        self.debugger.run()
        return True
