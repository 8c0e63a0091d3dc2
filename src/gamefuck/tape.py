from __future__ import annotations

import logging

import numpy as np

from .errors import TapeAllocationError


class Tape:
    """
    Zero-initialized byte tape that grows on demand.

    Reads never allocate: any address past the current capacity reads as 0.
    Writes grow the backing array to at least 1.5x its size (or exactly to the
    requested size when that is larger), so a run of sequential writes costs
    O(n) amortized and O(log n) reallocations.
    """

    def __init__(self):
        self.buffer = np.zeros(0, dtype=np.uint8)
        self.reallocations = 0

    @property
    def size(self) -> int:
        return len(self.buffer)

    def ensure(self, size: int) -> None:
        current = len(self.buffer)
        if current >= size:
            return
        new_size = max(3 * current // 2, size)

        try:
            grown = np.zeros(new_size, dtype=np.uint8)
        except MemoryError:
            raise TapeAllocationError(message='not enough memory', size=new_size) from None
        grown[:current] = self.buffer
        self.buffer = grown
        self.reallocations += 1
        logging.debug(f"[tape] grow {current} -> {new_size}")

    def get(self, index: int) -> int:
        if index >= len(self.buffer):
            return 0
        return int(self.buffer[index])

    def set(self, index: int, value: int) -> None:
        self.ensure(index + 1)
        self.buffer[index] = value & 0xFF

    def add(self, index: int, delta: int) -> int:
        self.ensure(index + 1)
        value = (int(self.buffer[index]) + delta) & 0xFF
        self.buffer[index] = value
        return value

    def window(self, start: int, stop: int) -> bytes:
        """Cells ``start..stop-1`` as bytes, zero past capacity."""
        out = bytearray(max(0, stop - start))
        end = min(stop, len(self.buffer))
        if start < end:
            out[:end - start] = self.buffer[start:end].tobytes()
        return bytes(out)

    def __getitem__(self, index: int) -> int:
        return self.get(index)

    def __setitem__(self, index: int, value: int) -> None:
        self.set(index, value)
