from __future__ import annotations

import sys
from typing import Optional

import numpy as np
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QImage, QPixmap
from PyQt5.QtWidgets import QApplication, QLabel

from .port import (
    DEFAULT_FPS, KEY_ALT, KEY_BACKSPACE, KEY_CAPS_LOCK, KEY_CONTROL, KEY_DELETE, KEY_DOWN,
    KEY_END, KEY_ENTER, KEY_ESCAPE, KEY_F1, KEY_F25, KEY_HOME, KEY_INSERT, KEY_KP_ENTER,
    KEY_LEFT, KEY_MENU, KEY_NUM_LOCK, KEY_PAGE_DOWN, KEY_PAGE_UP, KEY_PAUSE,
    KEY_PRINT_SCREEN, KEY_RIGHT, KEY_SCROLL_LOCK, KEY_SHIFT, KEY_SUPER, KEY_TAB, KEY_UP,
    SCREEN_SIZE, DisplayPort, KeyState,
)

WINDOW_SIZE = 512

_SPECIAL_KEYS = {
    Qt.Key_Escape: KEY_ESCAPE,
    Qt.Key_Return: KEY_ENTER,
    Qt.Key_Enter: KEY_KP_ENTER,
    Qt.Key_Tab: KEY_TAB,
    Qt.Key_Backspace: KEY_BACKSPACE,
    Qt.Key_Insert: KEY_INSERT,
    Qt.Key_Delete: KEY_DELETE,
    Qt.Key_Right: KEY_RIGHT,
    Qt.Key_Left: KEY_LEFT,
    Qt.Key_Down: KEY_DOWN,
    Qt.Key_Up: KEY_UP,
    Qt.Key_PageUp: KEY_PAGE_UP,
    Qt.Key_PageDown: KEY_PAGE_DOWN,
    Qt.Key_Home: KEY_HOME,
    Qt.Key_End: KEY_END,
    Qt.Key_CapsLock: KEY_CAPS_LOCK,
    Qt.Key_ScrollLock: KEY_SCROLL_LOCK,
    Qt.Key_NumLock: KEY_NUM_LOCK,
    Qt.Key_Print: KEY_PRINT_SCREEN,
    Qt.Key_Pause: KEY_PAUSE,
    Qt.Key_Shift: KEY_SHIFT,
    Qt.Key_Control: KEY_CONTROL,
    Qt.Key_Alt: KEY_ALT,
    Qt.Key_Meta: KEY_SUPER,
    Qt.Key_Super_L: KEY_SUPER,
    Qt.Key_Super_R: KEY_SUPER,
    Qt.Key_Menu: KEY_MENU,
}
_SPECIAL_KEYS.update({Qt.Key_F1 + i: KEY_F1 + i for i in range(KEY_F25 - KEY_F1 + 1)})


def qt_key_code(key: int) -> int:
    """Map a Qt key to a Gamefuck key byte; 0 for keys with no mapping."""
    if key < 256:
        return key
    return _SPECIAL_KEYS.get(key, 0)


class _Screen(QLabel):
    def __init__(self, keys: KeyState):
        super().__init__()
        self.keys = keys
        self.setFixedSize(WINDOW_SIZE, WINDOW_SIZE)
        self.setFocusPolicy(Qt.StrongFocus)

    def keyPressEvent(self, event):
        if event.isAutoRepeat():
            return
        code = qt_key_code(event.key())
        if code:
            self.keys.press(code)

    def keyReleaseEvent(self, event):
        if event.isAutoRepeat():
            return
        code = qt_key_code(event.key())
        if code:
            self.keys.release(code)


class QtWindowPort(DisplayPort):
    """Shows the frame buffer in a PyQt5 window, scaled with nearest neighbour."""

    def __init__(self, fps: Optional[int] = DEFAULT_FPS):
        super().__init__(fps=fps)
        self.app = QApplication.instance() or QApplication(sys.argv[:1])
        self.screen = _Screen(self.keys)
        self.screen.setWindowTitle("")
        self.screen.show()
        self._frame_data: Optional[np.ndarray] = None

    def _show(self) -> None:
        # QImage borrows the buffer, so keep it alive until the next frame.
        self._frame_data = np.ascontiguousarray(np.flipud(self.pixels))
        image = QImage(self._frame_data.data, SCREEN_SIZE, SCREEN_SIZE,
                       SCREEN_SIZE * 3, QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(image).scaled(
            self.screen.width(), self.screen.height(),
            Qt.IgnoreAspectRatio, Qt.FastTransformation,
        )
        self.screen.setPixmap(pixmap)

    def _service_events(self) -> None:
        self.app.processEvents()

    def _on_rate(self, rate: int) -> None:
        self.screen.setWindowTitle(str(rate))

    def close(self) -> None:
        self.screen.close()
        self.app.processEvents()
