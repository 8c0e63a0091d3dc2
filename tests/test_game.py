#!/usr/bin/env python3
"""
Display/input instructions and the headless port.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import io

import pytest
from PIL import Image

from gamefuck import GamefuckInterpreter, HeadlessPort, RunOptions
from gamefuck.api import make_port
from gamefuck.lexer import preprocess
from gamefuck.port import (
    DEFAULT_FPS, KEY_END, KEY_F1, KEY_HOME, KEY_KP_ENTER, KEY_PAGE_DOWN, KEY_PAGE_UP, KEY_SHIFT,
    KEY_UP, KeyState,
)


def run_game(source, port=None):
    port = HeadlessPort() if port is None else port
    interp = GamefuckInterpreter.from_source(
        source,
        stdin=io.BytesIO(),
        stdout=io.BytesIO(),
        stderr=io.StringIO(),
        port=port,
        color=False,
    )
    interp.run()
    return interp.ctx


def test_cursor_moves_wrap():
    ctx = run_game("l")
    assert (ctx.cursor_x, ctx.cursor_y) == (255, 0)
    ctx = run_game("d")
    assert (ctx.cursor_x, ctx.cursor_y) == (0, 255)
    ctx = run_game("rrurl")
    assert (ctx.cursor_x, ctx.cursor_y) == (2, 1)


def test_print_cursor():
    ctx = run_game("rrruP")
    assert ctx.stderr.getvalue() == "03 01\n"


def test_paint_is_grayscale():
    port = HeadlessPort()
    run_game("+++r'", port)
    assert list(port.pixels[0, 1]) == [3, 3, 3]
    assert port.pixels.sum() == 9


def test_paint_uses_current_cursor_after_wrap():
    port = HeadlessPort()
    run_game("-ld'", port)
    assert list(port.pixels[255, 255]) == [255, 255, 255]


def test_keys_are_seen_after_a_frame():
    port = HeadlessPort()
    port.keys.press(65)
    ctx = run_game(";>:;>;", port)
    assert ctx.tape.window(0, 3) == b"\x00A\x00"
    assert port.frames == 1


def test_poll_returns_lowest_key_first():
    port = HeadlessPort()
    port.keys.press(90)
    port.keys.press(66)
    port.keys.press(KEY_UP)
    ctx = run_game(":;>;>;>;", port)
    assert ctx.tape.window(0, 4) == bytes([66, 90, KEY_UP, 0])


def test_released_key_is_gone_next_frame():
    port = HeadlessPort()
    port.keys.press(32)
    port.present_frame()
    port.keys.release(32)
    port.present_frame()
    assert port.poll_last_key() == 0


def test_key_zero_never_reported():
    keys = KeyState()
    keys.press(0)
    keys.snapshot()
    assert keys.take_lowest() == 0


def test_frame_is_copied_on_present():
    port = HeadlessPort()
    run_game("+':-'", port)
    assert port.last_frame[0, 0, 0] == 1
    assert port.pixels[0, 0, 0] == 0


def test_save_frame_puts_origin_bottom_left(tmp_path):
    port = HeadlessPort()
    run_game("+++++':", port)
    path = port.save_frame(tmp_path / "frame.png")
    with Image.open(path) as img:
        assert img.size == (256, 256)
        assert img.getpixel((0, 255)) == (5, 5, 5)
        assert img.getpixel((0, 0)) == (0, 0, 0)


def test_make_port_auto_and_headless():
    port = make_port(preprocess("+'"), RunOptions(display="auto"))
    assert isinstance(port, HeadlessPort)
    port = make_port(preprocess("+:"), RunOptions(display="headless", fps=30))
    assert isinstance(port, HeadlessPort)
    assert port.fps == 30


def test_make_port_keeps_zero_fps():
    port = make_port(preprocess("+"), RunOptions(display="headless", fps=0))
    assert port.fps == 0


def test_window_port_fps_default_and_zero(monkeypatch):
    pytest.importorskip("PyQt5.QtWidgets")
    created = []

    class FakeWindowPort(HeadlessPort):
        def __init__(self, fps=None):
            super().__init__(fps=fps)
            created.append(fps)

    monkeypatch.setattr("gamefuck.qt_port.QtWindowPort", FakeWindowPort)
    make_port(preprocess("+:"), RunOptions(display="window", fps=0))
    make_port(preprocess("+:"), RunOptions(display="window"))
    assert created == [0, DEFAULT_FPS]


def test_make_port_rejects_unknown_mode():
    with pytest.raises(ValueError):
        make_port(preprocess("+"), RunOptions(display="vga"))


def test_qt_key_mapping():
    pytest.importorskip("PyQt5.QtWidgets")
    from PyQt5.QtCore import Qt
    from gamefuck.qt_port import qt_key_code

    assert qt_key_code(Qt.Key_A) == ord('A')
    assert qt_key_code(Qt.Key_Space) == 32
    assert qt_key_code(Qt.Key_Up) == KEY_UP
    assert qt_key_code(Qt.Key_F35) == 0


def test_qt_navigation_and_modifier_keys():
    pytest.importorskip("PyQt5.QtWidgets")
    from PyQt5.QtCore import Qt
    from gamefuck.qt_port import qt_key_code

    assert qt_key_code(Qt.Key_PageUp) == KEY_PAGE_UP == 138
    assert qt_key_code(Qt.Key_PageDown) == KEY_PAGE_DOWN == 139
    assert qt_key_code(Qt.Key_Home) == KEY_HOME == 140
    assert qt_key_code(Qt.Key_End) == KEY_END == 141
    assert qt_key_code(Qt.Key_F1) == KEY_F1 == 162
    assert qt_key_code(Qt.Key_F12) == 173
    assert qt_key_code(Qt.Key_F25) == 186
    assert qt_key_code(Qt.Key_Shift) == KEY_SHIFT == 212
    assert qt_key_code(Qt.Key_Enter) == KEY_KP_ENTER == 207
