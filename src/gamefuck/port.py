from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

SCREEN_SIZE = 256
DEFAULT_FPS = 60

# Special keys live above the ASCII range: the GLFW key code minus 128.
KEY_ESCAPE = 128
KEY_ENTER = 129
KEY_TAB = 130
KEY_BACKSPACE = 131
KEY_INSERT = 132
KEY_DELETE = 133
KEY_RIGHT = 134
KEY_LEFT = 135
KEY_DOWN = 136
KEY_UP = 137
KEY_PAGE_UP = 138
KEY_PAGE_DOWN = 139
KEY_HOME = 140
KEY_END = 141
KEY_CAPS_LOCK = 152
KEY_SCROLL_LOCK = 153
KEY_NUM_LOCK = 154
KEY_PRINT_SCREEN = 155
KEY_PAUSE = 156
KEY_F1 = 162  # F1 through F25 are consecutive, ending at 186
KEY_F25 = 186
KEY_KP_ENTER = 207
KEY_SHIFT = 212
KEY_CONTROL = 213
KEY_ALT = 214
KEY_SUPER = 215
KEY_MENU = 220


class KeyState:
    """
    Held keys plus the copy of them taken at the last presented frame.

    ``poll`` only ever looks at the frame copy, so a program sees a stable set
    of keys between two frames no matter when the host delivers events.
    """

    def __init__(self):
        self.held = np.zeros(256, dtype=bool)
        self.frame = np.zeros(256, dtype=bool)

    def press(self, code: int) -> None:
        self.held[code & 0xFF] = True

    def release(self, code: int) -> None:
        self.held[code & 0xFF] = False

    def snapshot(self) -> None:
        self.frame[:] = self.held

    def take_lowest(self) -> int:
        # Key 0 is never reported: 0 means "nothing pending".
        pending = np.flatnonzero(self.frame[1:])
        if len(pending) == 0:
            return 0
        code = int(pending[0]) + 1
        self.frame[code] = False
        return code


class DisplayPort(ABC):
    """Display and keyboard service the interpreter draws to and polls."""

    def __init__(self, fps: Optional[int] = DEFAULT_FPS):
        self.pixels = np.zeros((SCREEN_SIZE, SCREEN_SIZE, 3), dtype=np.uint8)
        self.keys = KeyState()
        self.fps = fps
        self.frames = 0

        self._frame_time = 0.0
        self._rate_time = time.monotonic()
        self._rate_frames = 0
        self.frame_rate = 0

    def put_pixel(self, x: int, y: int, value: int) -> None:
        self.pixels[y & 0xFF, x & 0xFF, :] = value & 0xFF

    def present_frame(self) -> None:
        self._show()
        self._service_events()
        self.keys.snapshot()
        self._pace()
        self.frames += 1
        self._count_rate()

    def poll_last_key(self) -> int:
        return self.keys.take_lowest()

    def close(self) -> None:
        pass

    @abstractmethod
    def _show(self) -> None:
        ...

    def _service_events(self) -> None:
        pass

    def _on_rate(self, rate: int) -> None:
        pass

    def _pace(self) -> None:
        if not self.fps:
            return
        deadline = self._frame_time + 1.0 / self.fps
        now = time.monotonic()
        if now < deadline:
            time.sleep(deadline - now)
        self._frame_time = time.monotonic()

    def _count_rate(self) -> None:
        self._rate_frames += 1
        now = time.monotonic()
        if now - self._rate_time >= 1:
            self.frame_rate = self._rate_frames
            logging.debug(f"[port] {self.frame_rate} frames/s")
            self._on_rate(self.frame_rate)
            self._rate_time = now
            self._rate_frames = 0

    def image(self, frame: Optional[np.ndarray] = None) -> Image.Image:
        # Row 0 of the buffer is the bottom of the screen.
        frame = self.pixels if frame is None else frame
        return Image.fromarray(np.ascontiguousarray(np.flipud(frame)))


class HeadlessPort(DisplayPort):
    """Port without a window; frames stay in memory."""

    def __init__(self, fps: Optional[int] = None):
        super().__init__(fps=fps)
        self.last_frame: Optional[np.ndarray] = None

    def _show(self) -> None:
        self.last_frame = self.pixels.copy()

    def save_frame(self, path) -> Path:
        p = Path(path)
        frame = self.pixels if self.last_frame is None else self.last_frame
        self.image(frame).save(p, format='PNG')
        return p
