from __future__ import annotations


class GameOpsMixin:
    # ===== Drawing cursor =====
    # Both coordinates wrap at 256; y grows upwards.

    def _op_cursor_right(self):
        self.ctx.cursor_x = (self.ctx.cursor_x + 1) & 0xFF

    def _op_cursor_left(self):
        self.ctx.cursor_x = (self.ctx.cursor_x - 1) & 0xFF

    def _op_cursor_up(self):
        self.ctx.cursor_y = (self.ctx.cursor_y + 1) & 0xFF

    def _op_cursor_down(self):
        self.ctx.cursor_y = (self.ctx.cursor_y - 1) & 0xFF

    def _op_print_cursor(self):
        ctx = self.ctx
        ctx.stderr.write(f"{ctx.cursor_x:02x} {ctx.cursor_y:02x}\n")
        ctx.stderr.flush()

    # ===== Display port =====

    def _op_paint(self):
        ctx = self.ctx
        ctx.port.put_pixel(ctx.cursor_x, ctx.cursor_y, ctx.tape.get(ctx.dp))

    def _op_present(self):
        self.ctx.port.present_frame()

    def _op_poll_key(self):
        ctx = self.ctx
        ctx.tape.set(ctx.dp, ctx.port.poll_last_key())
